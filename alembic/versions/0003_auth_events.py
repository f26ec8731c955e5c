"""Create append-only auth_events login audit table."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0003_auth_events"
down_revision = "0002_questions"
branch_labels = None
depends_on = None

sqlite_bigint = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "auth_events",
        sa.Column("id", sqlite_bigint, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("ip_address", sa.Text(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column(
            "occurred_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index(
        "ix_auth_events_user_id_occurred_at",
        "auth_events",
        ["user_id", "occurred_at"],
        unique=False,
    )
    op.create_index(
        "ix_auth_events_event_type_occurred_at",
        "auth_events",
        ["event_type", "occurred_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_auth_events_event_type_occurred_at", table_name="auth_events")
    op.drop_index("ix_auth_events_user_id_occurred_at", table_name="auth_events")
    op.drop_table("auth_events")
