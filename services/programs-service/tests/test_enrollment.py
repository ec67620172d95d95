from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from programs_service.exceptions import ActiveProgramConflictException, InvalidStateException
from programs_service.models import Exercise, UserProgram, Workout
from programs_service.schemas.program import ProgramTemplateCreate
from programs_service.schemas.workout import WorkoutCreate
from programs_service.services.enrollment_service import EnrollmentCoordinator
from programs_service.services.program_events import ProgramEventBus
from programs_service.services.template_service import TemplateService
from programs_service.services.workout_service import WorkoutService

USER_ID = "user-1"
START = date(2024, 1, 1)


async def _template(db, payload):
    return await TemplateService(db).create_template(ProgramTemplateCreate(**payload))


async def _workouts(db, user_program_id):
    result = await db.execute(
        select(Workout).where(Workout.source_program_id == user_program_id).order_by(Workout.program_session_number)
    )
    return list(result.scalars().all())


@pytest.mark.asyncio
async def test_enroll_materializes_every_session(db, ppl_payload):
    template = await _template(db, ppl_payload)

    result = await EnrollmentCoordinator(db, USER_ID).enroll(template, START)

    assert result.success is True
    assert result.workouts_created == 72
    assert result.replaced_program_id is None
    program = result.user_program
    assert program.status == "active"
    assert program.start_date == START
    assert program.target_end_date == date(2024, 3, 25)
    assert (program.current_week, program.current_day, program.completed_workouts) == (1, 1, 0)

    workouts = await _workouts(db, program.id)
    assert [w.program_session_number for w in workouts] == list(range(1, 73))
    assert all(w.total_sessions == 72 and w.total_days == 6 and w.total_weeks == 12 for w in workouts)
    assert all(w.is_active is False for w in workouts)
    assert workouts[0].scheduled_date == START
    assert workouts[-1].scheduled_date == date(2024, 3, 23)
    assert workouts[0].goal == "strength"

    bench = workouts[0].exercises[0]
    assert (bench.exercise.name, bench.target_sets, bench.target_reps, bench.target_weight) == (
        "Bench Press",
        4,
        8,
        135.0,
    )


@pytest.mark.asyncio
async def test_enroll_reuses_catalog_entries_across_sessions(db, ppl_payload):
    template = await _template(db, ppl_payload)

    await EnrollmentCoordinator(db, USER_ID).enroll(template, START)

    names = (await db.execute(select(Exercise.name))).scalars().all()
    assert sorted(names) == sorted(
        ["Bench Press", "Overhead Press", "Pull-Ups", "Barbell Row", "Back Squat", "Romanian Deadlift"]
    )


@pytest.mark.asyncio
async def test_enroll_clears_active_workout_flags(db, ppl_payload):
    workouts = WorkoutService(db, USER_ID)
    custom = await workouts.create_custom_workout(WorkoutCreate(name="Morning run"))
    await workouts.active.set_active_workout(custom.id)
    template = await _template(db, ppl_payload)

    await EnrollmentCoordinator(db, USER_ID).enroll(template, START)

    active = await db.scalar(
        select(func.count()).select_from(Workout).where(Workout.user_id == USER_ID, Workout.is_active.is_(True))
    )
    assert active == 0


@pytest.mark.asyncio
async def test_second_enrollment_without_replace_conflicts(db, ppl_payload, short_payload):
    coordinator = EnrollmentCoordinator(db, USER_ID)
    first = await coordinator.enroll(await _template(db, ppl_payload), START)

    with pytest.raises(ActiveProgramConflictException) as excinfo:
        await coordinator.enroll(await _template(db, short_payload), START)

    assert excinfo.value.status_code == 409
    assert str(first.user_program.id) in excinfo.value.detail


@pytest.mark.asyncio
async def test_replacing_completes_old_program_and_cancels_its_sessions(db, ppl_payload, short_payload):
    coordinator = EnrollmentCoordinator(db, USER_ID)
    old = (await coordinator.enroll(await _template(db, ppl_payload), START)).user_program

    result = await coordinator.enroll(await _template(db, short_payload), date(2024, 2, 5), replacing=old)

    assert result.success is True
    assert result.replaced_program_id == old.id
    assert result.workouts_created == 2
    assert old.status == "completed"
    assert old.end_date is not None
    assert old.completed_workouts == 0

    statuses = {w.status for w in await _workouts(db, old.id)}
    assert statuses == {"deleted"}

    active = (
        await db.execute(select(UserProgram).where(UserProgram.user_id == USER_ID, UserProgram.status == "active"))
    ).scalars().all()
    assert [p.id for p in active] == [result.user_program.id]


@pytest.mark.asyncio
async def test_active_program_is_per_user(db, ppl_payload):
    template = await _template(db, ppl_payload)

    mine = await EnrollmentCoordinator(db, USER_ID).enroll(template, START)
    theirs = await EnrollmentCoordinator(db, "user-2").enroll(template, START)

    assert mine.success and theirs.success
    assert mine.user_program.id != theirs.user_program.id


@pytest.mark.asyncio
async def test_queue_then_start(db, short_payload):
    coordinator = EnrollmentCoordinator(db, USER_ID)
    template = await _template(db, short_payload)

    queued = await coordinator.queue(template.id, notes="after vacation")
    assert queued.status == "queued"
    assert queued.start_date is None
    assert await _workouts(db, queued.id) == []

    result = await coordinator.start_queued(queued.id, date(2024, 6, 3))

    assert result.success is True
    assert result.user_program.id == queued.id
    assert result.user_program.status == "active"
    assert [w.scheduled_date for w in await _workouts(db, queued.id)] == [date(2024, 6, 3), date(2024, 6, 5)]

    with pytest.raises(InvalidStateException):
        await coordinator.start_queued(queued.id, date(2024, 6, 3))


@pytest.mark.asyncio
async def test_end_program_freezes_it(db, short_payload):
    coordinator = EnrollmentCoordinator(db, USER_ID)
    program = (await coordinator.enroll(await _template(db, short_payload), START)).user_program

    ended = await coordinator.end_program(program.id)

    assert ended.status == "completed"
    assert ended.end_date is not None
    assert await coordinator.get_active_program() is None
    with pytest.raises(InvalidStateException):
        await coordinator.end_program(program.id)


@pytest.mark.asyncio
async def test_persistence_failure_is_reported_and_rolled_back(db, ppl_payload, monkeypatch):
    template = await _template(db, ppl_payload)
    template_id = template.id

    async def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)

    result = await EnrollmentCoordinator(db, USER_ID).enroll(template, START)

    assert result.success is False
    assert result.user_program is None
    assert "OperationalError" in result.error
    monkeypatch.undo()
    assert await db.scalar(select(func.count()).select_from(UserProgram)) == 0
    assert await db.scalar(select(func.count()).select_from(Workout)) == 0
    assert template_id is not None


@pytest.mark.asyncio
async def test_program_changes_are_published(db, ppl_payload, short_payload):
    bus = ProgramEventBus()
    seen = []

    async def listener(event):
        seen.append((event.user_id, event.reason))

    bus.subscribe(listener)
    coordinator = EnrollmentCoordinator(db, USER_ID, events=bus)

    first = await coordinator.enroll(await _template(db, ppl_payload), START)
    await coordinator.enroll(await _template(db, short_payload), START, replacing=first.user_program)

    assert seen == [(USER_ID, "enrolled"), (USER_ID, "replaced")]
