"""Initial schema: sessions, attendances.

Revision ID: 0001_init
Revises:
Create Date: 2026-10-18 10:00:00
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ---------------------------------------------
    # sessions
    # ---------------------------------------------
    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("date", sa.String(length=32), nullable=False),
        sa.Column("time", sa.String(length=32), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("visibility", sa.String(length=16), nullable=False),
        sa.Column("management_code", sa.String(length=128), nullable=False),
        sa.Column("invite_token", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "max_participants IS NULL OR max_participants > 0",
            name="ck_sessions_max_participants_positive",
        ),
        sa.CheckConstraint(
            "(visibility = 'private' AND invite_token IS NOT NULL)"
            " OR (visibility = 'public' AND invite_token IS NULL)",
            name="ck_sessions_invite_token_iff_private",
        ),
    )
    op.create_index("ix_sessions_management_code", "sessions", ["management_code"], unique=True)
    op.create_index("ix_sessions_invite_token", "sessions", ["invite_token"], unique=True)

    # ---------------------------------------------
    # attendances
    # ---------------------------------------------
    op.create_table(
        "attendances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("attendance_code", sa.String(length=128), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["session_id"], ["sessions.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_attendances_session_id", "attendances", ["session_id"], unique=False)
    op.create_index("ix_attendances_attendance_code", "attendances", ["attendance_code"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_attendances_attendance_code", table_name="attendances")
    op.drop_index("ix_attendances_session_id", table_name="attendances")
    op.drop_table("attendances")

    op.drop_index("ix_sessions_invite_token", table_name="sessions")
    op.drop_index("ix_sessions_management_code", table_name="sessions")
    op.drop_table("sessions")
