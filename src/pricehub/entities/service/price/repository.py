"""Price repositories."""

from sqlmodel import Session, col, select

from src.pricehub.entities.core._base import utcnow

from .entity import DefaultPrice, PriceAuditLog, PriceView, PrivatePrice
from .table import DefaultPriceTable, PriceAuditLogTable, PriceViewTable, PrivatePriceTable


class DefaultPriceRepository:
    """Data-access layer for default prices."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_active(self, product_id: str) -> DefaultPrice | None:
        statement = select(DefaultPriceTable).where(
            (DefaultPriceTable.product_id == product_id) & col(DefaultPriceTable.is_active)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return DefaultPrice.model_validate(row, from_attributes=True)

    def get_active_for_products(self, product_ids: list[str]) -> dict[str, DefaultPrice]:
        if not product_ids:
            return {}
        statement = select(DefaultPriceTable).where(
            col(DefaultPriceTable.product_id).in_(product_ids)
            & col(DefaultPriceTable.is_active)
        )
        rows = self._session.exec(statement).all()
        return {
            row.product_id: DefaultPrice.model_validate(row, from_attributes=True)
            for row in rows
        }

    def deactivate_for_product(self, product_id: str) -> DefaultPrice | None:
        """Switch off the active default price, returning it as it was."""
        statement = select(DefaultPriceTable).where(
            (DefaultPriceTable.product_id == product_id) & col(DefaultPriceTable.is_active)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        previous = DefaultPrice.model_validate(row, from_attributes=True)
        row.is_active = False
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        return previous

    def create(self, price: DefaultPrice) -> DefaultPrice:
        row = DefaultPriceTable(**price.model_dump())
        self._session.add(row)
        self._session.flush()
        return price


class PrivatePriceRepository:
    """Data-access layer for company-specific prices."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, price_id: str) -> PrivatePrice | None:
        row = self._session.get(PrivatePriceTable, price_id)
        if row is None:
            return None
        return PrivatePrice.model_validate(row, from_attributes=True)

    def get_active(self, product_id: str, company_id: str) -> PrivatePrice | None:
        statement = select(PrivatePriceTable).where(
            (PrivatePriceTable.product_id == product_id)
            & (PrivatePriceTable.company_id == company_id)
            & col(PrivatePriceTable.is_active)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return PrivatePrice.model_validate(row, from_attributes=True)

    def get_active_for_company(
        self, company_id: str, product_ids: list[str]
    ) -> dict[str, PrivatePrice]:
        if not product_ids:
            return {}
        statement = select(PrivatePriceTable).where(
            (PrivatePriceTable.company_id == company_id)
            & col(PrivatePriceTable.product_id).in_(product_ids)
            & col(PrivatePriceTable.is_active)
        )
        rows = self._session.exec(statement).all()
        return {
            row.product_id: PrivatePrice.model_validate(row, from_attributes=True)
            for row in rows
        }

    def list_active_for_product(self, product_id: str) -> list[PrivatePrice]:
        statement = (
            select(PrivatePriceTable)
            .where(
                (PrivatePriceTable.product_id == product_id)
                & col(PrivatePriceTable.is_active)
            )
            .order_by(col(PrivatePriceTable.created_at).desc())
        )
        rows = self._session.exec(statement).all()
        return [PrivatePrice.model_validate(row, from_attributes=True) for row in rows]

    def deactivate(self, price_id: str) -> PrivatePrice:
        row = self._session.get(PrivatePriceTable, price_id)
        if row is None:
            raise ValueError(f"Private price with id {price_id} not found")
        row.is_active = False
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        return PrivatePrice.model_validate(row, from_attributes=True)

    def create(self, price: PrivatePrice) -> PrivatePrice:
        row = PrivatePriceTable(**price.model_dump())
        self._session.add(row)
        self._session.flush()
        return price


class PriceAuditLogRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, entry: PriceAuditLog) -> PriceAuditLog:
        row = PriceAuditLogTable(**entry.model_dump())
        self._session.add(row)
        self._session.flush()
        return entry

    def list_for_product(self, product_id: str, limit: int = 100) -> list[PriceAuditLog]:
        statement = (
            select(PriceAuditLogTable)
            .where(PriceAuditLogTable.product_id == product_id)
            .order_by(col(PriceAuditLogTable.created_at).desc())
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [PriceAuditLog.model_validate(row, from_attributes=True) for row in rows]


class PriceViewRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, view: PriceView) -> PriceView:
        row = PriceViewTable(**view.model_dump())
        self._session.add(row)
        self._session.flush()
        return view

    def list_for_product(self, product_id: str, limit: int = 100) -> list[PriceView]:
        statement = (
            select(PriceViewTable)
            .where(PriceViewTable.product_id == product_id)
            .order_by(col(PriceViewTable.viewed_at).desc())
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [PriceView.model_validate(row, from_attributes=True) for row in rows]
