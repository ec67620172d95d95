"""personal records and daily check-ins

Revision ID: 0002_records_and_checkins
Revises: 0001_initial_programs
Create Date: 2026-10-25 10:30:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002_records_and_checkins"
down_revision: Union[str, None] = "0001_initial_programs"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "personal_records",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.String(length=255), nullable=False, index=True),
        sa.Column(
            "exercise_id",
            sa.Integer,
            sa.ForeignKey("exercises.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("exercise_name", sa.String(length=120), nullable=False),
        sa.Column("weight", sa.Float, nullable=False),
        sa.Column("reps", sa.Integer, nullable=False),
        sa.Column("previous_weight", sa.Float, nullable=True),
        sa.Column("achieved_at", sa.DateTime, nullable=False, index=True),
        sa.Column(
            "session_id",
            sa.Integer,
            sa.ForeignKey("workout_sessions.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    op.create_table(
        "daily_checkins",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.String(length=255), nullable=False, index=True),
        sa.Column("checkin_date", sa.Date, nullable=False, index=True),
        sa.Column("mood", sa.String(length=32), nullable=False),
        sa.Column("energy_level", sa.Integer, nullable=True),
        sa.Column("stress_level", sa.Integer, nullable=True),
        sa.Column("soreness_level", sa.Integer, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("user_id", "checkin_date", name="uq_daily_checkin_user_date"),
    )


def downgrade() -> None:
    op.drop_table("daily_checkins")
    op.drop_table("personal_records")
