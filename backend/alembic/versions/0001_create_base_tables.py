"""create users, stalkers, wanted and ledger tables

Revision ID: 0001_create_base_tables
Revises:
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_create_base_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("Admin", "Freedom", "Duty", "Neutral", "Mercenary", "Monolith", "Bandit", "ClearSky", "Loner")


def _role() -> sa.Enum:
    return sa.Enum(*ROLES, name="role", native_enum=False, length=20)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", _role(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "stalkers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("callsign", sa.String(length=100), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("face_id", sa.String(length=50), nullable=False),
        sa.Column("role", _role(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("photo_ref", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_stalkers"),
    )
    op.create_index("ix_stalkers_callsign", "stalkers", ["callsign"], unique=True)
    op.create_index("ix_stalkers_face_id", "stalkers", ["face_id"], unique=True)
    op.create_index("ix_stalkers_full_name", "stalkers", ["full_name"])
    op.create_index("ix_stalkers_role", "stalkers", ["role"])
    op.create_index("ix_stalkers_created_at", "stalkers", ["created_at"])

    op.create_table(
        "wanted_stalkers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("callsign", sa.String(length=100), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("face_id", sa.String(length=50), nullable=False),
        sa.Column("role", _role(), nullable=False),
        sa.Column("reward", sa.Numeric(15, 2), nullable=False),
        sa.Column("last_seen", sa.String(length=255), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("photo_ref", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_wanted_stalkers"),
    )
    op.create_index("ix_wanted_stalkers_callsign", "wanted_stalkers", ["callsign"])
    op.create_index("ix_wanted_stalkers_face_id", "wanted_stalkers", ["face_id"], unique=True)
    op.create_index("ix_wanted_stalkers_created_at", "wanted_stalkers", ["created_at"])

    op.create_table(
        "financial_operations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("counterparty_label", sa.String(length=100), nullable=False),
        sa.Column("direction", sa.Enum("credit", "debit", name="direction", native_enum=False, length=10), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("currency", sa.Enum("RUB", "USD", "EUR", name="currency", native_enum=False, length=10), nullable=False),
        sa.Column("source", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_financial_operations_amount_positive"),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["users.id"],
            name="fk_financial_operations_owner_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_financial_operations"),
    )
    op.create_index("ix_financial_operations_owner_id", "financial_operations", ["owner_id"])
    op.create_index("ix_financial_operations_created_at", "financial_operations", ["created_at"])
    op.create_index("ix_financial_owner_created", "financial_operations", ["owner_id", "created_at"])


def downgrade() -> None:
    op.drop_table("financial_operations")
    op.drop_table("wanted_stalkers")
    op.drop_table("stalkers")
    op.drop_table("users")
