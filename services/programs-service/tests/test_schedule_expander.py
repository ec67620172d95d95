import random
from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from programs_service.exceptions import ScheduleReferenceError
from programs_service.schemas.program import ProgramDaySchedule, ProgramTemplateBase
from programs_service.services.schedule_expander import expand_schedule


def test_push_pull_legs_expands_to_72_sessions(ppl_payload):
    blueprint = ProgramTemplateBase(**ppl_payload)

    entries = expand_schedule(blueprint, date(2024, 1, 1))

    assert len(entries) == 72
    first, last = entries[0], entries[-1]
    assert (first.week_number, first.day_of_week, first.workout_name) == (1, 1, "Push")
    assert first.scheduled_date == date(2024, 1, 1)
    assert (last.week_number, last.day_of_week, last.workout_name) == (12, 6, "Legs")
    assert last.scheduled_date == date(2024, 3, 23)


def test_entries_are_week_major_day_minor_with_unique_dates(ppl_payload):
    entries = expand_schedule(ProgramTemplateBase(**ppl_payload), date(2024, 1, 1))

    keys = [(e.week_number, e.day_of_week) for e in entries]
    assert keys == sorted(keys)
    assert len({e.scheduled_date for e in entries}) == len(entries)
    assert all(e.day_of_week != 7 for e in entries)
    assert all(not e.is_rest for e in entries)


def test_week_and_day_offsets_follow_start_date_not_weekday(ppl_payload):
    # 2024-01-03 is a Wednesday; day 1 still lands on the start date
    entries = expand_schedule(ProgramTemplateBase(**ppl_payload), date(2024, 1, 3))

    by_key = {(e.week_number, e.day_of_week): e.scheduled_date for e in entries}
    assert by_key[(1, 1)] == date(2024, 1, 3)
    assert by_key[(1, 6)] == date(2024, 1, 8)
    assert by_key[(2, 1)] == date(2024, 1, 10)
    for (week, day), scheduled in by_key.items():
        assert scheduled == date(2024, 1, 3) + timedelta(weeks=week - 1, days=day - 1)


def test_rest_days_included_on_request(ppl_payload):
    entries = expand_schedule(ProgramTemplateBase(**ppl_payload), date(2024, 1, 1), include_rest_days=True)

    assert len(entries) == 84
    rest = [e for e in entries if e.is_rest]
    assert len(rest) == 12
    assert all(e.day_of_week == 7 and e.workout_name is None for e in rest)
    assert rest[0].scheduled_date == date(2024, 1, 7)


def test_schedule_order_in_template_does_not_matter(ppl_payload):
    shuffled = dict(ppl_payload)
    shuffled["schedule"] = list(ppl_payload["schedule"])
    random.Random(7).shuffle(shuffled["schedule"])

    ordered = expand_schedule(ProgramTemplateBase(**ppl_payload), date(2024, 1, 1))
    from_shuffled = expand_schedule(ProgramTemplateBase(**shuffled), date(2024, 1, 1))

    assert ordered == from_shuffled


def test_expansion_is_deterministic(ppl_payload):
    blueprint = ProgramTemplateBase(**ppl_payload)
    assert expand_schedule(blueprint, date(2024, 5, 6)) == expand_schedule(blueprint, date(2024, 5, 6))


def test_unresolved_workout_reference_raises(ppl_payload):
    blueprint = ProgramTemplateBase(**ppl_payload)
    # Bypass validation to simulate a template stored before it was enforced
    blueprint.schedule[2] = ProgramDaySchedule(day_of_week=3, workout_name="Arms")

    with pytest.raises(ScheduleReferenceError) as excinfo:
        expand_schedule(blueprint, date(2024, 1, 1))

    assert excinfo.value.status_code == 422
    assert excinfo.value.day_of_week == 3
    assert excinfo.value.workout_name == "Arms"


def test_template_rejects_unknown_workout_name(ppl_payload):
    ppl_payload["schedule"][0] = {"day_of_week": 1, "workout_name": "Chest"}

    with pytest.raises(ValidationError, match="unknown workout definition 'Chest'"):
        ProgramTemplateBase(**ppl_payload)


def test_template_requires_each_weekday_once(ppl_payload):
    ppl_payload["schedule"][6] = {"day_of_week": 6, "workout_name": "Legs"}

    with pytest.raises(ValidationError, match="exactly once"):
        ProgramTemplateBase(**ppl_payload)


def test_training_day_must_name_a_workout(ppl_payload):
    ppl_payload["schedule"][0] = {"day_of_week": 1}

    with pytest.raises(ValidationError, match="names no workout"):
        ProgramTemplateBase(**ppl_payload)


@pytest.mark.parametrize("field", ["duration_weeks", "workouts_per_week"])
def test_template_counts_must_be_positive(ppl_payload, field):
    ppl_payload[field] = 0

    with pytest.raises(ValidationError):
        ProgramTemplateBase(**ppl_payload)


def test_workouts_per_week_must_match_training_days(short_payload):
    short_payload["workouts_per_week"] = 1

    with pytest.raises(ValidationError, match="schedule has 2 training days"):
        ProgramTemplateBase(**short_payload)
