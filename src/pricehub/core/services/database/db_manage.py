"""Schema management, demo data seeding and data wipes."""

from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger
from sqlalchemy import delete
from sqlmodel import Session, col

from src.pricehub.core.security import hash_password
from src.pricehub.entities import (
    DefaultPrice,
    DefaultPriceRepository,
    DefaultPriceTable,
    PriceAuditLogTable,
    PriceViewTable,
    PrivatePrice,
    PrivatePriceRepository,
    PrivatePriceTable,
    Product,
    ProductRepository,
    ProductTable,
    Tenant,
    TenantRepository,
    TenantStatus,
    TenantTable,
    TenantType,
    User,
    UserRepository,
    UserRole,
    UserStatus,
    UserTable,
)

from .db_session import DbSessionService

SEED_SUPER_ADMIN = ("admin@system.com", "admin123")
SEED_SUPPLIER = ("supplier@example.com", "password123")
SEED_COMPANY = ("company@example.com", "password123")

_SEED_PRODUCTS = (
    {
        "sku": "CEMENT-50KG-001",
        "name": "Portland Cement 50kg",
        "description": "Standard Portland cement bag",
        "category": "Cement",
        "unit": "bag",
        "price": Decimal("25.99"),
    },
    {
        "sku": "STEEL-REBAR-004",
        "name": "Steel Rebar #4",
        "description": "Steel reinforcement bar #4",
        "category": "Steel",
        "unit": "piece",
        "price": Decimal("45.00"),
    },
)


@dataclass
class SeedReport:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class DbManageService:
    def __init__(self, db_service: DbSessionService | None = None):
        self._db_service = db_service or DbSessionService()

    def create_all(self) -> None:
        """Create all database tables."""
        self._db_service.create_all()

    def create_super_admin(
        self, session: Session, email: str, password: str
    ) -> User | None:
        """Create an active super admin unless the email is taken.

        Returns the new user, or None when it already existed.
        """
        users = UserRepository(session)
        if users.get_by_email(email) is not None:
            return None
        return users.create(
            User(
                email=email,
                password_hash=hash_password(password),
                first_name="Super",
                last_name="Admin",
                role=UserRole.SUPER_ADMIN,
                status=UserStatus.ACTIVE,
                is_active=True,
            )
        )

    def _ensure_tenant(
        self,
        session: Session,
        report: SeedReport,
        *,
        name: str,
        tenant_type: TenantType,
        credentials: tuple[str, str],
        phone: str,
        address: str,
    ) -> Tenant:
        email, password = credentials
        tenants = TenantRepository(session)
        tenant = tenants.get_by_email(email)
        if tenant is None:
            tenant = tenants.create(
                Tenant(
                    name=name,
                    type=tenant_type,
                    email=email,
                    phone=phone,
                    address=address,
                    status=TenantStatus.ACTIVE,
                    is_active=True,
                )
            )
            report.created.append(f"{tenant_type} tenant {name}")
        else:
            report.skipped.append(f"{tenant_type} tenant {name}")

        users = UserRepository(session)
        if users.get_by_email(email) is None:
            role = (
                UserRole.SUPPLIER_ADMIN
                if tenant_type == TenantType.SUPPLIER
                else UserRole.COMPANY_ADMIN
            )
            users.create(
                User(
                    tenant_id=tenant.id,
                    email=email,
                    password_hash=hash_password(password),
                    first_name=tenant_type.value.capitalize(),
                    last_name="Admin",
                    role=role,
                    status=UserStatus.ACTIVE,
                    is_active=True,
                )
            )
            report.created.append(f"{role} {email}")
        else:
            report.skipped.append(f"user {email}")
        return tenant

    def seed(self) -> SeedReport:
        """Load demo tenants, users, products and prices.

        Safe to run repeatedly: existing records are left untouched.
        """
        report = SeedReport()
        with self._db_service.session_scope() as session:
            email, password = SEED_SUPER_ADMIN
            if self.create_super_admin(session, email, password):
                report.created.append(f"super_admin {email}")
            else:
                report.skipped.append(f"user {email}")

            supplier = self._ensure_tenant(
                session,
                report,
                name="ABC Materials Supplier",
                tenant_type=TenantType.SUPPLIER,
                credentials=SEED_SUPPLIER,
                phone="+1234567890",
                address="123 Supplier St, City, State",
            )
            company = self._ensure_tenant(
                session,
                report,
                name="XYZ Construction Company",
                tenant_type=TenantType.COMPANY,
                credentials=SEED_COMPANY,
                phone="+1234567891",
                address="456 Company Ave, City, State",
            )

            products = ProductRepository(session)
            default_prices = DefaultPriceRepository(session)
            seeded: list[Product] = []
            for item in _SEED_PRODUCTS:
                product = products.get_by_sku(supplier.id, item["sku"])
                if product is None:
                    product = products.create(
                        Product(
                            supplier_id=supplier.id,
                            sku=item["sku"],
                            name=item["name"],
                            description=item["description"],
                            category=item["category"],
                            unit=item["unit"],
                        )
                    )
                    report.created.append(f"product {product.sku}")
                else:
                    report.skipped.append(f"product {product.sku}")

                if default_prices.get_active(product.id) is None:
                    default_prices.create(
                        DefaultPrice(product_id=product.id, price=item["price"])
                    )
                    report.created.append(f"default price {product.sku}")
                seeded.append(product)

            private_prices = PrivatePriceRepository(session)
            cement = seeded[0]
            if private_prices.get_active(cement.id, company.id) is None:
                private_prices.create(
                    PrivatePrice(
                        product_id=cement.id,
                        company_id=company.id,
                        price=Decimal("22.50"),
                        notes="Negotiated volume discount",
                    )
                )
                report.created.append(f"private price {cement.sku}")

        logger.info(
            "Seed finished: {} created, {} skipped",
            len(report.created),
            len(report.skipped),
        )
        return report

    def clear(self, keep_email: str, keep_password: str = "admin123") -> dict[str, int]:
        """Delete every record except the super admin ``keep_email``.

        The super admin is created first when it does not exist yet.

        Returns:
            Number of deleted rows per table, in deletion order

        Raises:
            ValueError: ``keep_email`` belongs to a tenant user
        """
        deleted: dict[str, int] = {}
        with self._db_service.session_scope() as session:
            existing = UserRepository(session).get_by_email(keep_email)
            if existing is not None and existing.role != UserRole.SUPER_ADMIN:
                raise ValueError(f"{keep_email} is not a super admin")
            if self.create_super_admin(session, keep_email, keep_password):
                logger.info("Created super admin {}", keep_email)

            # Children before parents
            for name, table in (
                ("price_views", PriceViewTable),
                ("price_audit_logs", PriceAuditLogTable),
                ("private_prices", PrivatePriceTable),
                ("default_prices", DefaultPriceTable),
                ("products", ProductTable),
            ):
                deleted[name] = session.exec(delete(table)).rowcount  # type: ignore[call-overload]

            deleted["users"] = session.exec(  # type: ignore[call-overload]
                delete(UserTable).where(col(UserTable.email) != keep_email)
            ).rowcount
            deleted["tenants"] = session.exec(delete(TenantTable)).rowcount  # type: ignore[call-overload]

        logger.warning("Database cleared, kept super admin {}", keep_email)
        return deleted
