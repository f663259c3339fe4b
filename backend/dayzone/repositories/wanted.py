from decimal import Decimal, InvalidOperation
from typing import Any

from ..errors import ValidationError
from ..models import Role, WantedRecord
from .base import RecordRepository, coerce_enum, coerce_photo_ref
from .operative import SEARCH_FIELDS


class WantedRepository(RecordRepository[WantedRecord]):
    """Wanted list; face ids are unique among wanted records only."""

    model = WantedRecord
    label = "Wanted record"
    writable_fields = (
        "callsign", "full_name", "face_id", "reward", "last_seen", "reason", "role", "photo_ref",
    )
    required_fields = ("callsign", "full_name", "face_id", "reward", "last_seen", "reason")
    unique_fields = ("face_id",)
    search_fields = SEARCH_FIELDS

    def _coerce(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            reward = Decimal(str(data["reward"]))
        except InvalidOperation:
            raise ValidationError.for_field("reward", "Reward must be a number") from None
        if not reward.is_finite() or reward < 0:
            raise ValidationError.for_field("reward", "Reward must be a non-negative number")
        data["reward"] = reward
        data["role"] = coerce_enum(Role, "role", data["role"] or Role.NEUTRAL)
        data["photo_ref"] = coerce_photo_ref("wanted", data["photo_ref"])
        return data
