"""Unit tests for the SQLModel repositories against in-memory SQLite."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.pricehub.entities import (
    DefaultPrice,
    DefaultPriceRepository,
    PriceAuditLog,
    PriceAuditLogRepository,
    PriceType,
    AuditAction,
    PrivatePrice,
    PrivatePriceRepository,
    Product,
    ProductRepository,
    Tenant,
    TenantRepository,
    TenantStatus,
    TenantType,
    User,
    UserRepository,
    UserRole,
    UserStatus,
)


def add_tenant(session: Session, **fields) -> Tenant:
    defaults = {
        "name": "Acme",
        "type": TenantType.SUPPLIER,
        "email": "acme@example.com",
        "status": TenantStatus.ACTIVE,
        "is_active": True,
    }
    tenant = TenantRepository(session).create(Tenant(**{**defaults, **fields}))
    session.commit()
    return tenant


def add_product(session: Session, supplier: Tenant, **fields) -> Product:
    defaults = {"supplier_id": supplier.id, "sku": "SKU-1", "name": "Cement"}
    product = ProductRepository(session).create(Product(**{**defaults, **fields}))
    session.commit()
    return product


class TestTenantRepository:
    def test_create_and_get(self, db_session: Session):
        tenant = add_tenant(db_session)
        repo = TenantRepository(db_session)

        loaded = repo.get(tenant.id)
        assert loaded is not None
        assert loaded.name == "Acme"
        assert loaded.type == TenantType.SUPPLIER
        assert repo.get_by_email("acme@example.com").id == tenant.id
        assert repo.get("missing") is None

    def test_email_is_unique(self, db_session: Session):
        add_tenant(db_session)
        with pytest.raises(IntegrityError):
            TenantRepository(db_session).create(
                Tenant(name="Other", type=TenantType.COMPANY, email="acme@example.com")
            )
        db_session.rollback()

    def test_update(self, db_session: Session):
        tenant = add_tenant(db_session)
        repo = TenantRepository(db_session)

        updated = repo.update(tenant.model_copy(update={"is_active": False}))
        db_session.commit()

        assert updated.is_active is False
        assert repo.get(tenant.id).is_active is False

    def test_update_missing_tenant(self, db_session: Session):
        with pytest.raises(ValueError):
            TenantRepository(db_session).update(
                Tenant(name="Ghost", type=TenantType.COMPANY, email="ghost@example.com")
            )

    def test_search_and_count(self, db_session: Session):
        add_tenant(db_session, email="s1@example.com")
        add_tenant(db_session, email="s2@example.com", status=TenantStatus.PENDING)
        add_tenant(db_session, email="c1@example.com", type=TenantType.COMPANY)
        repo = TenantRepository(db_session)

        tenants, total = repo.search(tenant_type=TenantType.SUPPLIER, limit=1)
        assert total == 2
        assert len(tenants) == 1

        assert repo.count() == 3
        assert repo.count(status=TenantStatus.PENDING) == 1
        assert repo.count(tenant_type=TenantType.COMPANY) == 1
        assert [t.email for t in repo.list_by_status(TenantStatus.PENDING)] == [
            "s2@example.com"
        ]


class TestUserRepository:
    def test_permissions_round_trip(self, db_session: Session):
        tenant = add_tenant(db_session)
        repo = UserRepository(db_session)
        user = repo.create(
            User(
                tenant_id=tenant.id,
                email="staff@example.com",
                password_hash="hash",
                role=UserRole.SUPPLIER_STAFF,
                permissions={"products": {"create": True, "delete": False}},
            )
        )
        db_session.commit()

        loaded = repo.get(user.id)
        assert loaded.permissions == {"products": {"create": True, "delete": False}}
        assert loaded.has_permission("products", "create")
        assert not loaded.has_permission("products", "delete")
        assert not loaded.is_operational

    def test_tenant_scoping(self, db_session: Session):
        acme = add_tenant(db_session)
        other = add_tenant(db_session, email="other@example.com")
        repo = UserRepository(db_session)
        user = repo.create(
            User(
                tenant_id=acme.id,
                email="a@example.com",
                password_hash="hash",
                role=UserRole.SUPPLIER_ADMIN,
            )
        )
        db_session.commit()

        assert repo.get_in_tenant(user.id, acme.id) is not None
        assert repo.get_in_tenant(user.id, other.id) is None
        assert [u.id for u in repo.list_by_tenant(acme.id)] == [user.id]

    def test_set_status_for_tenant(self, db_session: Session):
        tenant = add_tenant(db_session, status=TenantStatus.PENDING, is_active=False)
        repo = UserRepository(db_session)
        for index in range(2):
            repo.create(
                User(
                    tenant_id=tenant.id,
                    email=f"u{index}@example.com",
                    password_hash="hash",
                    role=UserRole.SUPPLIER_STAFF,
                )
            )
        db_session.commit()

        moved = repo.set_status_for_tenant(
            tenant.id, UserStatus.PENDING, UserStatus.ACTIVE, is_active=True
        )
        db_session.commit()

        assert moved == 2
        assert all(u.is_operational for u in repo.list_by_tenant(tenant.id))

    def test_touch_last_login(self, db_session: Session):
        repo = UserRepository(db_session)
        user = repo.create(
            User(email="root@example.com", password_hash="hash", role=UserRole.SUPER_ADMIN)
        )
        db_session.commit()
        assert repo.get(user.id).last_login_at is None

        repo.touch_last_login(user.id)
        db_session.commit()
        assert repo.get(user.id).last_login_at is not None


class TestProductRepository:
    def test_sku_is_unique_per_supplier(self, db_session: Session):
        acme = add_tenant(db_session)
        other = add_tenant(db_session, email="other@example.com")
        add_product(db_session, acme)
        add_product(db_session, other)

        with pytest.raises(IntegrityError):
            ProductRepository(db_session).create(
                Product(supplier_id=acme.id, sku="SKU-1", name="Duplicate")
            )
        db_session.rollback()

    def test_visibility_requires_active_product_and_supplier(self, db_session: Session):
        active = add_tenant(db_session)
        pending = add_tenant(
            db_session, email="pending@example.com", status=TenantStatus.PENDING, is_active=False
        )
        visible = add_product(db_session, active, sku="A", name="Alpha")
        add_product(db_session, active, sku="B", name="Beta", is_active=False)
        hidden = add_product(db_session, pending, sku="C", name="Gamma")
        repo = ProductRepository(db_session)

        assert [p.id for p in repo.list_visible()] == [visible.id]
        assert repo.get_visible(visible.id) is not None
        assert repo.get_visible(hidden.id) is None
        assert len(repo.list_for_supplier(active.id)) == 2
        assert len(repo.list_for_supplier(active.id, include_inactive=False)) == 1

    def test_filters(self, db_session: Session):
        supplier = add_tenant(db_session)
        add_product(db_session, supplier, sku="CEM-1", name="Portland Cement", category="Cement")
        add_product(
            db_session,
            supplier,
            sku="REB-4",
            name="Steel Rebar",
            category="Steel",
            description="Reinforcement bar",
        )
        repo = ProductRepository(db_session)

        assert [p.sku for p in repo.list_visible(category="Steel")] == ["REB-4"]
        assert [p.sku for p in repo.list_visible(search="cement")] == ["CEM-1"]
        assert [p.sku for p in repo.list_visible(search="REINFORCEMENT")] == ["REB-4"]
        assert [p.sku for p in repo.list_visible(search="reb-")] == ["REB-4"]


class TestPriceRepositories:
    def test_one_active_default_price_per_product(self, db_session: Session):
        supplier = add_tenant(db_session)
        product = add_product(db_session, supplier)
        repo = DefaultPriceRepository(db_session)
        repo.create(DefaultPrice(product_id=product.id, price=Decimal("10.00")))
        db_session.commit()

        with pytest.raises(IntegrityError):
            repo.create(DefaultPrice(product_id=product.id, price=Decimal("12.00")))
        db_session.rollback()

    def test_deactivate_then_replace(self, db_session: Session):
        supplier = add_tenant(db_session)
        product = add_product(db_session, supplier)
        repo = DefaultPriceRepository(db_session)
        repo.create(DefaultPrice(product_id=product.id, price=Decimal("10.00")))
        db_session.commit()

        previous = repo.deactivate_for_product(product.id)
        repo.create(DefaultPrice(product_id=product.id, price=Decimal("12.50")))
        db_session.commit()

        assert previous is not None
        assert previous.price == Decimal("10.00")
        assert repo.get_active(product.id).price == Decimal("12.50")
        assert repo.deactivate_for_product("missing") is None

    def test_private_prices_per_company(self, db_session: Session):
        supplier = add_tenant(db_session)
        company = add_tenant(db_session, email="co@example.com", type=TenantType.COMPANY)
        product = add_product(db_session, supplier)
        repo = PrivatePriceRepository(db_session)
        price = repo.create(
            PrivatePrice(product_id=product.id, company_id=company.id, price=Decimal("9.00"))
        )
        db_session.commit()

        assert repo.get_active(product.id, company.id).id == price.id
        assert set(repo.get_active_for_company(company.id, [product.id])) == {product.id}

        repo.deactivate(price.id)
        db_session.commit()
        assert repo.get_active(product.id, company.id) is None
        assert repo.list_active_for_product(product.id) == []
        # Deactivated prices do not block a new one
        repo.create(
            PrivatePrice(product_id=product.id, company_id=company.id, price=Decimal("8.00"))
        )
        db_session.commit()

    def test_audit_log(self, db_session: Session):
        supplier = add_tenant(db_session)
        product = add_product(db_session, supplier)
        user = UserRepository(db_session).create(
            User(
                tenant_id=supplier.id,
                email="owner@example.com",
                password_hash="hash",
                role=UserRole.SUPPLIER_ADMIN,
            )
        )
        repo = PriceAuditLogRepository(db_session)
        repo.create(
            PriceAuditLog(
                product_id=product.id,
                user_id=user.id,
                price_type=PriceType.DEFAULT,
                action=AuditAction.CREATED,
                new_price=Decimal("10.00"),
                currency="USD",
            )
        )
        db_session.commit()

        entries = repo.list_for_product(product.id)
        assert len(entries) == 1
        assert entries[0].action == AuditAction.CREATED
        assert entries[0].old_price is None
