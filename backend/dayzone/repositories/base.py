"""Shared CRUD and search behaviour for record repositories."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic.alias_generators import to_camel
from sqlalchemy import Select, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import Conflict, NotFound, ValidationError
from ..models import Base
from ..storage import checked_ref

T = TypeVar("T", bound=Base)


def apply_dict_updates(entity: object, update_data: dict[str, Any], excluded_attrs: set[str] | None = None) -> None:
    """Copy known attributes from ``update_data`` onto an ORM entity."""
    excluded_attrs = excluded_attrs or set()
    for key, value in update_data.items():
        if key in excluded_attrs:
            continue
        if hasattr(entity, key):
            setattr(entity, key, value)


def coerce_enum(enum_cls, field: str, value: Any):
    """Convert a raw value into ``enum_cls`` or raise a field-level ValidationError."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError.for_field(field, f"Must be one of: {allowed}") from None


def coerce_photo_ref(kind: str, value: Any) -> str | None:
    """Keep a record's photo inside its own ``kind`` directory."""
    try:
        return checked_ref(kind, value)
    except ValueError as exc:
        raise ValidationError.for_field("photoRef", str(exc)) from None


class RecordRepository(Generic[T]):
    """
    CRUD over one record type.

    Subclasses declare the model, which fields are writable and required,
    which fields are globally unique, and which ``searchBy`` keys map to
    which columns. Listing is newest first.
    """

    model: ClassVar[type[Base]]
    label: ClassVar[str] = "Record"
    writable_fields: ClassVar[tuple[str, ...]] = ()
    required_fields: ClassVar[tuple[str, ...]] = ()
    unique_fields: ClassVar[tuple[str, ...]] = ()
    search_fields: ClassVar[dict[str, str]] = {}

    def __init__(self, session: AsyncSession):
        self.session = session

    # --- query helpers ---

    def _select(self) -> Select:
        """Base statement every read goes through; subclasses add scoping."""
        return select(self.model)

    def _ordered(self, stmt: Select) -> Select:
        return stmt.order_by(self.model.created_at.desc(), self.model.id.desc())

    def _search(self, stmt: Select, search_by: str | None, search_term: str | None) -> Select:
        # Unknown searchBy values fall through without filtering.
        column_name = self.search_fields.get(search_by or "")
        if not search_term or column_name is None:
            return stmt
        column = getattr(self.model, column_name)
        return stmt.where(column.icontains(search_term, autoescape=True))

    # --- validation ---

    def _validate(self, data: dict[str, Any]) -> dict[str, Any]:
        """Keep writable fields, strip strings, and check required ones."""

        cleaned: dict[str, Any] = {}
        for name in self.writable_fields:
            value = data.get(name)
            if isinstance(value, str):
                value = value.strip()
            cleaned[name] = value

        missing = [
            name for name in self.required_fields
            if cleaned.get(name) is None or cleaned.get(name) == ""
        ]
        if missing:
            raise ValidationError(
                "Missing required fields",
                errors=[{"field": to_camel(name), "message": "Field is required"} for name in missing],
            )
        return self._coerce(cleaned)

    def _coerce(self, data: dict[str, Any]) -> dict[str, Any]:
        """Hook for type conversion and range checks on validated data."""
        return data

    async def _ensure_unique(self, data: dict[str, Any], exclude_id: int | None = None) -> None:
        if not self.unique_fields:
            return
        stmt = select(self.model.id).where(
            or_(*(getattr(self.model, name) == data[name] for name in self.unique_fields))
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        if (await self.session.scalars(stmt.limit(1))).first() is not None:
            fields = ", ".join(to_camel(name) for name in self.unique_fields)
            raise Conflict(f"{self.label} with the same {fields} already exists")

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise Conflict(f"{self.label} violates a uniqueness constraint") from exc

    # --- operations ---

    async def get(self, record_id: int) -> T:
        record = (await self.session.scalars(
            self._select().where(self.model.id == record_id)
        )).one_or_none()
        if record is None:
            raise NotFound(f"{self.label} not found")
        return record

    async def list(
        self,
        search_by: str | None = None,
        search_term: str | None = None,
    ) -> Sequence[T]:
        stmt = self._search(self._select(), search_by, search_term)
        return (await self.session.scalars(self._ordered(stmt))).all()

    async def create(self, data: dict[str, Any]) -> T:
        cleaned = self._validate(data)
        await self._ensure_unique(cleaned)
        record = self._build(cleaned)
        self.session.add(record)
        await self._flush()
        await self.session.refresh(record)
        return record

    def _build(self, data: dict[str, Any]) -> T:
        return self.model(**data)

    async def update(self, record_id: int, data: dict[str, Any]) -> T:
        record = await self.get(record_id)
        cleaned = self._validate(data)
        await self._ensure_unique(cleaned, exclude_id=record.id)
        apply_dict_updates(record, cleaned)
        await self._flush()
        await self.session.refresh(record)
        return record

    async def photo_in_use(self, ref: str) -> bool:
        """Whether any record of this type, in any scope, still holds ``ref``."""

        stmt = select(self.model.id).where(self.model.photo_ref == ref).limit(1)
        return (await self.session.scalars(stmt)).first() is not None

    async def delete(self, record_id: int) -> T:
        """Remove a record and return it so the caller can release its photo."""

        record = await self.get(record_id)
        await self.session.delete(record)
        await self.session.flush()
        return record
