from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from programs_service.models import UserProgram, Workout
from programs_service.schemas.program import ProgramTemplateCreate
from programs_service.services.enrollment_service import EnrollmentCoordinator
from programs_service.services.progress_service import (
    ProgramProgressService,
    completed_days_by_week,
    compute_progress,
    session_streaks,
)
from programs_service.services.session_service import SessionService
from programs_service.services.template_service import TemplateService

USER_ID = "user-1"
TWELVE_BY_SIX = SimpleNamespace(duration_weeks=12, workouts_per_week=6)


def _program(**overrides) -> UserProgram:
    values = dict(
        id=7,
        user_id=USER_ID,
        template_id=1,
        status="active",
        start_date=date(2024, 1, 1),
        target_end_date=date(2024, 3, 25),
        current_week=1,
        current_day=1,
        completed_workouts=0,
        completed_days={},
    )
    values.update(overrides)
    return UserProgram(**values)


def _session(number, status="scheduled", scheduled=None) -> Workout:
    return Workout(
        id=100 + number,
        user_id=USER_ID,
        name=f"Session {number}",
        status=status,
        program_session_number=number,
        scheduled_date=scheduled,
    )


@pytest.mark.parametrize("completed, expected", [(0, 0.0), (1, 1 / 72), (36, 0.5), (72, 1.0)])
def test_overall_progress_is_completed_over_total(completed, expected):
    progress = compute_progress(_program(completed_workouts=completed), TWELVE_BY_SIX, [], date(2024, 1, 1))

    assert progress.total_workouts == 72
    assert progress.completed_workouts == completed
    assert progress.overall_progress == pytest.approx(expected)


def test_overall_progress_is_clamped_but_raw_count_kept():
    progress = compute_progress(_program(completed_workouts=80), TWELVE_BY_SIX, [], date(2024, 1, 1))

    assert progress.overall_progress == 1.0
    assert progress.completed_workouts == 80


def test_week_progress_reads_current_week_bucket():
    program = _program(current_week=2, completed_days={"week1": [1, 2, 3, 4, 5, 6], "week2": [1, 2, 3]})

    progress = compute_progress(program, TWELVE_BY_SIX, [], date(2024, 1, 10))

    assert progress.workouts_this_week == 3
    assert progress.week_progress == pytest.approx(0.5)
    assert progress.completed_days_by_week == {1: [1, 2, 3, 4, 5, 6], 2: [1, 2, 3]}


def test_week_progress_without_entries_is_zero():
    progress = compute_progress(_program(current_week=5), TWELVE_BY_SIX, [], date(2024, 2, 1))

    assert progress.workouts_this_week == 0
    assert progress.week_progress == 0.0


def test_completed_days_by_week_ignores_foreign_keys():
    assert completed_days_by_week({"week3": [2, 1, 2], "notes": [1], "weekX": [4]}) == {3: [1, 2]}
    assert completed_days_by_week(None) == {}


def test_streak_broken_by_missed_session_but_not_by_upcoming_ones():
    today = date(2024, 1, 10)
    sessions = [
        _session(1, "completed", today - timedelta(days=9)),
        _session(2, "completed", today - timedelta(days=8)),
        _session(3, "scheduled", today - timedelta(days=7)),
        _session(4, "completed", today - timedelta(days=6)),
        _session(5, "scheduled", today),
        _session(6, "scheduled", today + timedelta(days=1)),
    ]

    assert session_streaks(sessions, today) == (1, 2)


def test_progress_points_at_first_unfinished_session_and_skips_deleted():
    today = date(2024, 1, 3)
    sessions = [
        _session(2, "scheduled", date(2024, 1, 2)),
        _session(1, "completed", date(2024, 1, 1)),
        _session(3, "deleted", date(2024, 1, 3)),
    ]

    progress = compute_progress(_program(completed_workouts=1), TWELVE_BY_SIX, sessions, today)

    assert progress.next_workout_id == 102
    assert progress.days_remaining == (date(2024, 3, 25) - today).days


def test_days_remaining_is_zero_once_completed():
    program = _program(status="completed")

    assert compute_progress(program, TWELVE_BY_SIX, [], date(2024, 1, 2)).days_remaining == 0


async def _enroll(db, payload, start=date(2024, 1, 1)):
    template = await TemplateService(db).create_template(ProgramTemplateCreate(**payload))
    result = await EnrollmentCoordinator(db, USER_ID).enroll(template, start)
    return result.user_program


async def _finish(db, workout_id):
    sessions = SessionService(db, USER_ID)
    session = await sessions.start_session(workout_id)
    return await sessions.complete_session(session.id)


@pytest.mark.asyncio
async def test_completing_a_session_updates_program_progress(db, ppl_payload):
    program = await _enroll(db, ppl_payload)
    progress_service = ProgramProgressService(db, USER_ID)
    first, second = (await progress_service.program_sessions(program.id))[:2]

    await _finish(db, first.id)

    assert program.completed_workouts == 1
    assert program.completed_days == {"week1": [1]}
    assert (program.current_week, program.current_day) == (1, 2)
    assert first.status == "completed"
    assert first.is_active is False
    assert second.is_active is True

    progress = await progress_service.get_progress(program.id, today=date(2024, 1, 2))
    assert progress.completed_workouts == 1
    assert progress.overall_progress == pytest.approx(1 / 72)
    assert progress.workouts_this_week == 1
    assert progress.week_progress == pytest.approx(1 / 6)
    assert progress.next_workout_id == second.id
    assert progress.current_streak == 1


@pytest.mark.asyncio
async def test_each_session_counts_once(db, ppl_payload):
    program = await _enroll(db, ppl_payload)
    progress_service = ProgramProgressService(db, USER_ID)
    first = (await progress_service.program_sessions(program.id))[0]
    await _finish(db, first.id)

    update = await progress_service.record_completion(first)

    assert update.counted is False
    assert program.completed_workouts == 1


@pytest.mark.asyncio
async def test_finishing_last_session_completes_and_freezes_program(db, short_payload):
    program = await _enroll(db, short_payload)
    progress_service = ProgramProgressService(db, USER_ID)
    first, last = await progress_service.program_sessions(program.id)

    await _finish(db, first.id)
    await _finish(db, last.id)

    assert program.status == "completed"
    assert program.end_date is not None
    assert program.completed_workouts == 2
    assert program.completed_days == {"week1": [1, 3]}

    progress = await progress_service.get_progress(program.id, today=date(2024, 1, 4))
    assert progress.overall_progress == 1.0
    assert progress.next_workout_id is None
    assert progress.best_streak == 2

    update = await progress_service.record_completion(last)
    assert update.counted is False
    assert program.completed_workouts == 2
