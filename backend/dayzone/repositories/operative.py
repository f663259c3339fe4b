from collections.abc import Sequence
from typing import Any

from ..models import Operative, Role
from .base import RecordRepository, coerce_enum, coerce_photo_ref

SEARCH_FIELDS = {"callsign": "callsign", "faceId": "face_id", "fullName": "full_name"}


class OperativeRepository(RecordRepository[Operative]):
    """Operative profiles; callsign and face id are unique across all roles."""

    model = Operative
    label = "Operative"
    writable_fields = ("callsign", "full_name", "face_id", "role", "note", "photo_ref")
    required_fields = ("callsign", "full_name", "face_id", "role")
    unique_fields = ("callsign", "face_id")
    search_fields = SEARCH_FIELDS

    def _coerce(self, data: dict[str, Any]) -> dict[str, Any]:
        data["role"] = coerce_enum(Role, "role", data["role"])
        data["photo_ref"] = coerce_photo_ref("stalkers", data["photo_ref"])
        return data

    async def list(
        self,
        search_by: str | None = None,
        search_term: str | None = None,
        role: Role | None = None,
    ) -> Sequence[Operative]:
        """List operatives of one role, or of every role when ``role`` is None."""

        stmt = self._select()
        if role is not None:
            stmt = stmt.where(Operative.role == role)
        stmt = self._search(stmt, search_by, search_term)
        return (await self.session.scalars(self._ordered(stmt))).all()
