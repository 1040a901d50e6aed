"""Integration tests for supplier products and the company catalogue."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.pricehub.entities import (
    PriceViewRepository,
    PrivatePrice,
    PrivatePriceRepository,
    TenantStatus,
    TenantType,
    UserRole,
)
from tests.fixtures.core import API

PRODUCT = {
    "sku": "CEM-50",
    "name": "Portland Cement 50kg",
    "description": "Standard bag",
    "category": "Cement",
    "unit": "bag",
}


class TestSupplierProducts:
    def test_create_product(self, client: TestClient, supplier_admin, supplier, auth_headers):
        response = client.post(
            f"{API}/products", json=PRODUCT, headers=auth_headers(supplier_admin)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["supplierId"] == supplier.id
        assert body["sku"] == "CEM-50"
        assert body["isActive"] is True

    def test_duplicate_sku(self, client: TestClient, supplier_admin, auth_headers):
        client.post(f"{API}/products", json=PRODUCT, headers=auth_headers(supplier_admin))
        response = client.post(
            f"{API}/products", json=PRODUCT, headers=auth_headers(supplier_admin)
        )
        assert response.status_code == 409

    def test_same_sku_for_another_supplier(
        self, client: TestClient, supplier_admin, make_tenant, make_user, auth_headers
    ):
        other_admin = make_user(make_tenant(TenantType.SUPPLIER))
        client.post(f"{API}/products", json=PRODUCT, headers=auth_headers(supplier_admin))
        response = client.post(f"{API}/products", json=PRODUCT, headers=auth_headers(other_admin))
        assert response.status_code == 201

    def test_companies_cannot_create_products(
        self, client: TestClient, company_admin, auth_headers
    ):
        response = client.post(
            f"{API}/products", json=PRODUCT, headers=auth_headers(company_admin)
        )
        assert response.status_code == 403

    @pytest.mark.parametrize(
        ("permissions", "expected_status"),
        [
            ({}, 403),
            ({"products": {"create": False}}, 403),
            ({"products": {"create": True}}, 201),
        ],
    )
    def test_staff_need_create_permission(
        self, client: TestClient, make_user, supplier, auth_headers, permissions, expected_status
    ):
        staff = make_user(supplier, role=UserRole.SUPPLIER_STAFF, permissions=permissions)
        response = client.post(f"{API}/products", json=PRODUCT, headers=auth_headers(staff))
        assert response.status_code == expected_status

    def test_invalid_product(self, client: TestClient, supplier_admin, auth_headers):
        response = client.post(
            f"{API}/products", json={"sku": "", "name": "x"}, headers=auth_headers(supplier_admin)
        )
        assert response.status_code == 400

    def test_list_mine_with_default_price(
        self, client: TestClient, supplier_admin, supplier, make_product, auth_headers
    ):
        priced = make_product(supplier, default_price="25.99", name="A cement")
        unpriced = make_product(supplier, name="B rebar")

        response = client.get(f"{API}/products/mine", headers=auth_headers(supplier_admin))

        assert response.status_code == 200
        products = {p["id"]: p for p in response.json()}
        assert Decimal(products[priced.id]["defaultPrice"]["price"]) == Decimal("25.99")
        assert products[unpriced.id]["defaultPrice"] is None

    def test_update_product(
        self, client: TestClient, supplier_admin, supplier, make_product, auth_headers
    ):
        product = make_product(supplier, description="old")

        response = client.put(
            f"{API}/products/{product.id}",
            json={"name": "Renamed", "description": None},
            headers=auth_headers(supplier_admin),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["description"] is None
        assert response.json()["sku"] == product.sku

    def test_update_to_existing_sku(
        self, client: TestClient, supplier_admin, supplier, make_product, auth_headers
    ):
        first = make_product(supplier, sku="ONE")
        make_product(supplier, sku="TWO")
        response = client.put(
            f"{API}/products/{first.id}",
            json={"sku": "TWO"},
            headers=auth_headers(supplier_admin),
        )
        assert response.status_code == 409

    def test_cannot_touch_other_suppliers_products(
        self, client: TestClient, supplier_admin, make_tenant, make_product, auth_headers
    ):
        foreign = make_product(make_tenant(TenantType.SUPPLIER))
        response = client.put(
            f"{API}/products/{foreign.id}",
            json={"name": "Mine now"},
            headers=auth_headers(supplier_admin),
        )
        assert response.status_code == 404

    def test_delete_is_soft(
        self, client: TestClient, supplier_admin, supplier, make_product, auth_headers
    ):
        product = make_product(supplier)

        response = client.delete(
            f"{API}/products/{product.id}", headers=auth_headers(supplier_admin)
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        mine = client.get(f"{API}/products/mine", headers=auth_headers(supplier_admin)).json()
        assert [(p["id"], p["isActive"]) for p in mine] == [(product.id, False)]


class TestCatalog:
    @pytest.fixture
    def catalog(self, db_service, supplier, company, make_product):
        cement = make_product(
            supplier, default_price="25.99", sku="CEM", name="Cement", category="Cement"
        )
        rebar = make_product(
            supplier, default_price="45.00", sku="REB", name="Rebar", category="Steel"
        )
        with db_service.session_scope() as session:
            PrivatePriceRepository(session).create(
                PrivatePrice(
                    product_id=cement.id, company_id=company.id, price=Decimal("22.50")
                )
            )
        return {"cement": cement, "rebar": rebar}

    def test_company_sees_its_private_price(
        self, client: TestClient, company_admin, catalog, auth_headers
    ):
        response = client.get(f"{API}/products", headers=auth_headers(company_admin))

        assert response.status_code == 200
        prices = {p["sku"]: p["price"] for p in response.json()}
        assert Decimal(prices["CEM"]["price"]) == Decimal("22.50")
        assert prices["CEM"]["priceType"] == "private"
        assert Decimal(prices["REB"]["price"]) == Decimal("45.00")
        assert prices["REB"]["priceType"] == "default"

    def test_other_companies_see_default_price(
        self, client: TestClient, make_tenant, make_user, catalog, auth_headers
    ):
        other = make_user(make_tenant(TenantType.COMPANY))
        response = client.get(f"{API}/products", headers=auth_headers(other))
        prices = {p["sku"]: p["price"] for p in response.json()}
        assert Decimal(prices["CEM"]["price"]) == Decimal("25.99")
        assert prices["CEM"]["priceType"] == "default"

    def test_filters(self, client: TestClient, company_admin, catalog, auth_headers):
        by_category = client.get(
            f"{API}/products", params={"category": "Steel"}, headers=auth_headers(company_admin)
        ).json()
        assert [p["sku"] for p in by_category] == ["REB"]

        by_search = client.get(
            f"{API}/products", params={"search": "cem"}, headers=auth_headers(company_admin)
        ).json()
        assert [p["sku"] for p in by_search] == ["CEM"]

    def test_hidden_products(
        self, client: TestClient, company_admin, make_tenant, make_product, auth_headers
    ):
        pending_supplier = make_tenant(TenantType.SUPPLIER, status=TenantStatus.PENDING)
        make_product(pending_supplier, sku="HIDDEN")
        inactive = make_product(make_tenant(TenantType.SUPPLIER), sku="OFF", is_active=False)

        response = client.get(f"{API}/products", headers=auth_headers(company_admin))
        assert response.json() == []

        detail = client.get(f"{API}/products/{inactive.id}", headers=auth_headers(company_admin))
        assert detail.status_code == 404

    def test_product_detail_records_price_view(
        self, client: TestClient, db_service, company_admin, company, catalog, auth_headers
    ):
        cement = catalog["cement"]

        response = client.get(f"{API}/products/{cement.id}", headers=auth_headers(company_admin))

        assert response.status_code == 200
        assert response.json()["price"]["priceType"] == "private"
        with db_service.session_scope() as session:
            views = PriceViewRepository(session).list_for_product(cement.id)
        assert [(v.company_id, v.user_id) for v in views] == [(company.id, company_admin.id)]

    def test_suppliers_cannot_browse_catalog(
        self, client: TestClient, supplier_admin, auth_headers
    ):
        response = client.get(f"{API}/products", headers=auth_headers(supplier_admin))
        assert response.status_code == 403
