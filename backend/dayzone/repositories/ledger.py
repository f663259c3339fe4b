from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ValidationError
from ..models import Currency, Direction, LedgerEntry
from .base import RecordRepository, coerce_enum


class LedgerRepository(RecordRepository[LedgerEntry]):
    """
    Ledger entries of a single owner.

    The owner is fixed at construction and applied to every statement, so
    an entry of another user behaves exactly like a missing one.
    """

    model = LedgerEntry
    label = "Operation"
    writable_fields = ("counterparty_label", "direction", "amount", "currency", "source")
    required_fields = writable_fields

    def __init__(self, session: AsyncSession, owner_id: int):
        super().__init__(session)
        self.owner_id = owner_id

    def _select(self) -> Select:
        return super()._select().where(LedgerEntry.owner_id == self.owner_id)

    def _coerce(self, data: dict[str, Any]) -> dict[str, Any]:
        data["direction"] = coerce_enum(Direction, "direction", data["direction"])
        data["currency"] = coerce_enum(Currency, "currency", data["currency"])
        try:
            amount = Decimal(str(data["amount"]))
        except InvalidOperation:
            raise ValidationError.for_field("amount", "Amount must be a number") from None
        if not amount.is_finite() or amount <= 0:
            raise ValidationError.for_field("amount", "Amount must be a positive number")
        data["amount"] = amount
        return data

    def _build(self, data: dict[str, Any]) -> LedgerEntry:
        return LedgerEntry(owner_id=self.owner_id, **data)
