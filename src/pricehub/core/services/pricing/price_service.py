from datetime import datetime
from decimal import Decimal

from fastapi import HTTPException
from loguru import logger
from sqlmodel import Session

from src.pricehub.core.models.catalog import (
    AuditEntryOut,
    DefaultPriceInput,
    DefaultPriceOut,
    PriceViewOut,
    PrivatePriceInput,
    PrivatePriceOut,
)
from src.pricehub.core.models.claims import AuthContext
from src.pricehub.core.services.catalog.product_service import ProductService
from src.pricehub.entities import (
    AuditAction,
    DefaultPrice,
    DefaultPriceRepository,
    PriceAuditLog,
    PriceAuditLogRepository,
    PriceType,
    PriceViewRepository,
    PrivatePrice,
    PrivatePriceRepository,
    Product,
    TenantRepository,
    TenantType,
)
from src.pricehub.entities.core._base import utcnow

from .calculations import (
    has_valid_decimal_places,
    is_valid_currency,
    is_valid_date_range,
    is_valid_discount,
    is_valid_price,
    is_within_price_limit,
    price_from_discount,
    quantize,
)


def validate_amount(price: Decimal) -> Decimal:
    if not is_valid_price(price):
        raise HTTPException(status_code=400, detail="Price must be greater than zero")
    if not has_valid_decimal_places(price):
        raise HTTPException(
            status_code=400, detail="Price cannot have more than 2 decimal places"
        )
    if not is_within_price_limit(price):
        raise HTTPException(status_code=400, detail="Price is too large")
    return quantize(price)


def validate_terms(
    currency: str, effective_from: datetime, effective_until: datetime | None
) -> None:
    if not is_valid_currency(currency):
        raise HTTPException(
            status_code=400,
            detail="Currency must be a 3-letter ISO code in upper case (e.g. USD)",
        )
    if not is_valid_date_range(effective_from, effective_until):
        raise HTTPException(
            status_code=400, detail="effectiveFrom must not be after effectiveUntil"
        )


class PriceService:
    """Default and private price management for the calling supplier.

    Every change writes a price audit entry in the same transaction.
    """

    def __init__(self, db_session: Session, caller: AuthContext):
        self._db_session = db_session
        self._caller = caller
        self._products = ProductService(db_session, caller)
        self._tenant_repo = TenantRepository(db_session)
        self._default_repo = DefaultPriceRepository(db_session)
        self._private_repo = PrivatePriceRepository(db_session)
        self._audit_repo = PriceAuditLogRepository(db_session)
        self._view_repo = PriceViewRepository(db_session)

    def _audit(
        self,
        product: Product,
        price_type: PriceType,
        action: AuditAction,
        old_price: Decimal | None,
        new_price: Decimal | None,
        currency: str | None,
        company_id: str | None = None,
    ) -> None:
        self._audit_repo.create(
            PriceAuditLog(
                product_id=product.id,
                user_id=self._caller.user_id,
                price_type=price_type,
                action=action,
                company_id=company_id,
                old_price=old_price,
                new_price=new_price,
                currency=currency,
            )
        )

    def set_default_price(self, product_id: str, data: DefaultPriceInput) -> DefaultPriceOut:
        """Replace the active default price of a product."""
        product = self._products.get_owned_product(product_id)
        amount = validate_amount(data.price)
        effective_from = data.effective_from or utcnow()
        validate_terms(data.currency, effective_from, data.effective_until)

        new_price = DefaultPrice(
            product_id=product.id,
            price=amount,
            currency=data.currency,
            effective_from=effective_from,
            effective_until=data.effective_until,
        )
        try:
            previous = self._default_repo.deactivate_for_product(product.id)
            self._default_repo.create(new_price)
            self._audit(
                product,
                PriceType.DEFAULT,
                AuditAction.UPDATED if previous else AuditAction.CREATED,
                old_price=previous.price if previous else None,
                new_price=amount,
                currency=data.currency,
            )
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info(
            "Default price of product {} set to {} {}", product.id, amount, data.currency
        )
        return DefaultPriceOut.model_validate(new_price)

    def set_private_price(self, product_id: str, data: PrivatePriceInput) -> PrivatePriceOut:
        """Set the negotiated price of a product for one company.

        The price is either given directly or derived from a discount on the
        active default price.
        """
        product = self._products.get_owned_product(product_id)

        company = self._tenant_repo.get(data.company_id)
        if company is None:
            raise HTTPException(status_code=404, detail="Company not found")
        if company.type != TenantType.COMPANY:
            raise HTTPException(
                status_code=400, detail="Private prices can only be set for companies"
            )

        discount = data.discount_percentage
        if discount is not None:
            if not is_valid_discount(discount):
                raise HTTPException(
                    status_code=400,
                    detail="Discount percentage must be between 0 and 100",
                )
            if not has_valid_decimal_places(discount):
                raise HTTPException(
                    status_code=400,
                    detail="Discount percentage cannot have more than 2 decimal places",
                )
            discount = quantize(discount)

        if data.price is not None:
            amount = validate_amount(data.price)
        elif discount is not None:
            base = self._default_repo.get_active(product.id)
            if base is None:
                raise HTTPException(
                    status_code=400,
                    detail="A default price is required to apply a discount",
                )
            derived = price_from_discount(base.price, discount)
            # A full discount would make the product free
            if not is_valid_price(derived):
                raise HTTPException(
                    status_code=400,
                    detail="Discount percentage must leave a price above zero",
                )
            amount = validate_amount(derived)
        else:
            raise HTTPException(
                status_code=400,
                detail="Either price or discountPercentage must be provided",
            )

        effective_from = data.effective_from or utcnow()
        validate_terms(data.currency, effective_from, data.effective_until)

        new_price = PrivatePrice(
            product_id=product.id,
            company_id=company.id,
            price=amount,
            discount_percentage=discount,
            currency=data.currency,
            notes=data.notes,
            effective_from=effective_from,
            effective_until=data.effective_until,
        )
        try:
            previous = self._private_repo.get_active(product.id, company.id)
            if previous is not None:
                self._private_repo.deactivate(previous.id)
            self._private_repo.create(new_price)
            self._audit(
                product,
                PriceType.PRIVATE,
                AuditAction.UPDATED if previous else AuditAction.CREATED,
                old_price=previous.price if previous else None,
                new_price=amount,
                currency=data.currency,
                company_id=company.id,
            )
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise

        logger.info(
            "Private price of product {} for company {} set to {} {}",
            product.id,
            company.id,
            amount,
            data.currency,
        )
        return PrivatePriceOut.model_validate(new_price)

    def list_private_prices(self, product_id: str) -> list[PrivatePriceOut]:
        product = self._products.get_owned_product(product_id)
        return [
            PrivatePriceOut.model_validate(price)
            for price in self._private_repo.list_active_for_product(product.id)
        ]

    def delete_private_price(self, price_id: str) -> None:
        price = self._private_repo.get(price_id)
        if price is None or not price.is_active:
            raise HTTPException(status_code=404, detail="Private price not found")
        # Ownership goes through the product
        product = self._products.get_owned_product(price.product_id)

        try:
            self._private_repo.deactivate(price.id)
            self._audit(
                product,
                PriceType.PRIVATE,
                AuditAction.DELETED,
                old_price=price.price,
                new_price=None,
                currency=price.currency,
                company_id=price.company_id,
            )
            self._db_session.commit()
        except Exception:
            self._db_session.rollback()
            raise
        logger.info("Private price {} removed", price.id)

    def price_history(self, product_id: str) -> list[AuditEntryOut]:
        product = self._products.get_owned_product(product_id)
        return [
            AuditEntryOut.model_validate(entry)
            for entry in self._audit_repo.list_for_product(product.id)
        ]

    def price_views(self, product_id: str) -> list[PriceViewOut]:
        product = self._products.get_owned_product(product_id)
        return [
            PriceViewOut.model_validate(view)
            for view in self._view_repo.list_for_product(product.id)
        ]
