"""Schema creation and baseline data."""
from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from . import models
from .config import Settings
from .database import Database
from .models import Operative, Role, User, WantedRecord
from .security import hash_password

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"

# (callsign, full_name, face_id, role, note)
SAMPLE_OPERATIVES: list[tuple[str, str, str, Role, str]] = [
    ("Sniper", "Ivan Ivanovich Ivanov", "ST001", Role.FREEDOM, "Veteran, specialises in long crossings"),
    ("Wolf", "Petr Petrovich Petrov", "ST002", Role.DUTY, "Former soldier, knows the Zone by heart"),
    ("Shadow", "Sidor Sidorovich Sidorov", "ST003", Role.NEUTRAL, "Stealth specialist, works alone"),
    ("Hunter", "Kozel Kozlovich Kozlov", "ST004", Role.MERCENARY, "Artifact specialist with contacts among scientists"),
]

# (callsign, full_name, face_id, role, reward, last_seen, reason)
SAMPLE_WANTED: list[tuple[str, str, str, Role, Decimal, str, str]] = [
    ("Raider", "Kriminal Kriminalovich", "W001", Role.BANDIT, Decimal("50000.00"), "Bandit territory", "Attacks on traders"),
    ("Traitor", "Izmen Izmenovich", "W002", Role.NEUTRAL, Decimal("25000.00"), "100 Rads bar", "Artifact theft"),
    ("Killer", "Kholod Kholodovich", "W003", Role.MERCENARY, Decimal("75000.00"), "Abandoned laboratory", "Murder of stalkers"),
    ("Spy", "Sekret Sekretovich", "W004", Role.DUTY, Decimal("30000.00"), "Military base", "Espionage for Freedom"),
]


async def _count(session: AsyncSession, model) -> int:
    return await session.scalar(select(func.count()).select_from(model)) or 0


async def seed(session: AsyncSession, settings: Settings) -> None:
    """Insert the default admin and, optionally, sample records. Idempotent."""

    admin = (await session.scalars(select(User).where(User.username == ADMIN_USERNAME))).first()
    if admin is None:
        session.add(
            User(
                username=ADMIN_USERNAME,
                password_hash=hash_password(settings.admin_password),
                role=Role.ADMIN,
            )
        )
        logger.info("created default administrator %r", ADMIN_USERNAME)

    if not settings.seed_sample_data:
        return

    if await _count(session, Operative) == 0:
        session.add_all(
            Operative(callsign=callsign, full_name=full_name, face_id=face_id, role=role, note=note)
            for callsign, full_name, face_id, role, note in SAMPLE_OPERATIVES
        )
        logger.info("added %d sample operatives", len(SAMPLE_OPERATIVES))

    if await _count(session, WantedRecord) == 0:
        session.add_all(
            WantedRecord(
                callsign=callsign,
                full_name=full_name,
                face_id=face_id,
                role=role,
                reward=reward,
                last_seen=last_seen,
                reason=reason,
            )
            for callsign, full_name, face_id, role, reward, last_seen, reason in SAMPLE_WANTED
        )
        logger.info("added %d sample wanted records", len(SAMPLE_WANTED))


async def initialize_database(database: Database, settings: Settings) -> None:
    """
    Create missing tables and seed baseline data in one transaction.

    Any failure rolls the whole step back before the error propagates.
    """
    async with database.sessionmaker() as session:
        async with session.begin():
            conn = await session.connection()
            await conn.run_sync(models.Base.metadata.create_all)
            await seed(session, settings)
    logger.info("database ready")
