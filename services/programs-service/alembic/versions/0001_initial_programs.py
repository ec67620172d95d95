"""initial programs schema

Revision ID: 0001_initial_programs
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_programs"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(length=120), nullable=False, index=True),
        sa.Column("muscle_group", sa.String(length=32), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("difficulty", sa.String(length=32), nullable=False),
        sa.Column("equipment", sa.String(length=32), nullable=False),
        sa.Column("location", sa.String(length=32), nullable=False),
        sa.Column("is_favorite", sa.Boolean, nullable=False),
        sa.Column("instructions", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "program_templates",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("difficulty", sa.String(length=32), nullable=False),
        sa.Column("goal", sa.String(length=32), nullable=False),
        sa.Column("duration_weeks", sa.Integer, nullable=False),
        sa.Column("workouts_per_week", sa.Integer, nullable=False),
        sa.Column("estimated_minutes_per_session", sa.Integer, nullable=False),
        sa.Column("equipment_required", sa.JSON, nullable=False),
        sa.Column("schedule", sa.JSON, nullable=False),
        sa.Column("workout_definitions", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "user_programs",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.String(length=255), nullable=False, index=True),
        sa.Column(
            "template_id",
            sa.Integer,
            sa.ForeignKey("program_templates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=32), nullable=False, index=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("target_end_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.DateTime, nullable=True),
        sa.Column("current_week", sa.Integer, nullable=False),
        sa.Column("current_day", sa.Integer, nullable=False),
        sa.Column("completed_workouts", sa.Integer, nullable=False),
        sa.Column("completed_days", sa.JSON, nullable=False),
        sa.Column("notes", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.String(length=255), nullable=False, index=True),
        sa.Column("name", sa.String(length=255), nullable=False, index=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("estimated_duration", sa.Integer, nullable=False),
        sa.Column("difficulty", sa.String(length=32), nullable=False),
        sa.Column("goal", sa.String(length=32), nullable=False),
        sa.Column("creation_type", sa.String(length=32), nullable=False),
        sa.Column("workout_type", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, nullable=False, index=True),
        sa.Column("scheduled_date", sa.Date, nullable=True),
        sa.Column("completed_at", sa.DateTime, nullable=True),
        sa.Column(
            "source_program_id",
            sa.Integer,
            sa.ForeignKey("user_programs.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
        sa.Column("source_program_name", sa.String(length=255), nullable=True),
        sa.Column("program_week_number", sa.Integer, nullable=True),
        sa.Column("program_day_number", sa.Integer, nullable=True),
        sa.Column("program_session_number", sa.Integer, nullable=True),
        sa.Column("total_weeks", sa.Integer, nullable=True),
        sa.Column("total_days", sa.Integer, nullable=True),
        sa.Column("total_sessions", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "workout_exercises",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column(
            "workout_id",
            sa.Integer,
            sa.ForeignKey("workouts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("exercise_id", sa.Integer, sa.ForeignKey("exercises.id"), nullable=False),
        sa.Column("order_index", sa.Integer, nullable=False),
        sa.Column("target_sets", sa.Integer, nullable=False),
        sa.Column("target_reps", sa.Integer, nullable=False),
        sa.Column("target_weight", sa.Float, nullable=True),
        sa.Column("rest_seconds", sa.Integer, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.UniqueConstraint("workout_id", "order_index", name="uq_workout_exercise_order"),
    )

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("user_id", sa.String(length=255), nullable=False, index=True),
        sa.Column(
            "workout_id",
            sa.Integer,
            sa.ForeignKey("workouts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "user_program_id",
            sa.Integer,
            sa.ForeignKey("user_programs.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(length=32), nullable=False, index=True),
        sa.Column("started_at", sa.DateTime, nullable=False),
        sa.Column("paused_at", sa.DateTime, nullable=True),
        sa.Column("paused_seconds", sa.Integer, nullable=False),
        sa.Column("completed_at", sa.DateTime, nullable=True),
        sa.Column("total_duration_seconds", sa.Integer, nullable=True),
        sa.Column("calories_burned", sa.Integer, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    )

    op.create_table(
        "completed_sets",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column(
            "session_id",
            sa.Integer,
            sa.ForeignKey("workout_sessions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "workout_exercise_id",
            sa.Integer,
            sa.ForeignKey("workout_exercises.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("set_number", sa.Integer, nullable=False),
        sa.Column("reps", sa.Integer, nullable=False),
        sa.Column("weight", sa.Float, nullable=False),
        sa.Column("rpe", sa.Integer, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("completed_at", sa.DateTime, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("completed_sets")
    op.drop_table("workout_sessions")
    op.drop_table("workout_exercises")
    op.drop_table("workouts")
    op.drop_table("user_programs")
    op.drop_table("program_templates")
    op.drop_table("exercises")
