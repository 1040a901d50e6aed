"""Supplier price management endpoints."""

from fastapi import APIRouter, Depends, status

from src.pricehub.api.http.deps import (
    authenticate,
    get_price_service,
    require_permission,
    require_tenant_type,
)
from src.pricehub.core.models.catalog import (
    AuditEntryOut,
    DefaultPriceInput,
    DefaultPriceOut,
    PriceViewOut,
    PrivatePriceInput,
    PrivatePriceOut,
)
from src.pricehub.core.services import PriceService

router = APIRouter(
    prefix="/prices",
    tags=["prices"],
    dependencies=[Depends(authenticate), Depends(require_tenant_type("supplier"))],
)


@router.put(
    "/products/{product_id}/default",
    response_model=DefaultPriceOut,
    dependencies=[Depends(require_permission("prices", "update"))],
)
def set_default_price(
    product_id: str,
    data: DefaultPriceInput,
    service: PriceService = Depends(get_price_service),
) -> DefaultPriceOut:
    return service.set_default_price(product_id, data)


@router.post(
    "/products/{product_id}/private",
    response_model=PrivatePriceOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("prices", "create"))],
)
def set_private_price(
    product_id: str,
    data: PrivatePriceInput,
    service: PriceService = Depends(get_price_service),
) -> PrivatePriceOut:
    return service.set_private_price(product_id, data)


@router.get(
    "/products/{product_id}/private",
    response_model=list[PrivatePriceOut],
    dependencies=[Depends(require_permission("prices", "read"))],
)
def list_private_prices(
    product_id: str,
    service: PriceService = Depends(get_price_service),
) -> list[PrivatePriceOut]:
    return service.list_private_prices(product_id)


@router.delete(
    "/private/{price_id}",
    dependencies=[Depends(require_permission("prices", "delete"))],
)
def delete_private_price(
    price_id: str,
    service: PriceService = Depends(get_price_service),
) -> dict[str, str]:
    service.delete_private_price(price_id)
    return {"message": "Private price removed successfully"}


@router.get(
    "/products/{product_id}/history",
    response_model=list[AuditEntryOut],
    dependencies=[Depends(require_permission("prices", "read"))],
)
def price_history(
    product_id: str,
    service: PriceService = Depends(get_price_service),
) -> list[AuditEntryOut]:
    return service.price_history(product_id)


@router.get(
    "/products/{product_id}/views",
    response_model=list[PriceViewOut],
    dependencies=[Depends(require_permission("prices", "read"))],
)
def price_views(
    product_id: str,
    service: PriceService = Depends(get_price_service),
) -> list[PriceViewOut]:
    """Which companies looked at this product's price, newest first."""
    return service.price_views(product_id)
