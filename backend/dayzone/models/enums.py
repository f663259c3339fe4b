"""Closed value sets shared by models, policy and schemas."""
from enum import Enum


class Role(str, Enum):
    """Faction tags plus the administrator role."""

    ADMIN = "Admin"
    FREEDOM = "Freedom"
    DUTY = "Duty"
    NEUTRAL = "Neutral"
    MERCENARY = "Mercenary"
    MONOLITH = "Monolith"
    BANDIT = "Bandit"
    CLEAR_SKY = "ClearSky"
    LONER = "Loner"


# Display metadata for the faction picker: (label, colour)
FACTION_DISPLAY: dict[Role, tuple[str, str]] = {
    Role.FREEDOM: ("Freedom", "#00ff00"),
    Role.DUTY: ("Duty", "#ff0000"),
    Role.NEUTRAL: ("Neutral", "#ffff00"),
    Role.MERCENARY: ("Mercenary", "#ff6600"),
    Role.MONOLITH: ("Monolith", "#6600ff"),
    Role.BANDIT: ("Bandit", "#ff0066"),
    Role.CLEAR_SKY: ("Clear Sky", "#00ffff"),
    Role.LONER: ("Loner", "#666666"),
}


class Direction(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class Currency(str, Enum):
    RUB = "RUB"
    USD = "USD"
    EUR = "EUR"


class Period(str, Enum):
    """Lookback windows for ledger statistics."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @property
    def days(self) -> int | None:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    Period.WEEK: 7,
    Period.MONTH: 30,
    Period.YEAR: 365,
    Period.ALL: None,
}
