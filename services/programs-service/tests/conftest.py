import os
import sys
import tempfile
from pathlib import Path

SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="programs_service_")) / "test_programs.db"
os.environ["PROGRAMS_DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402

USER_ID = "user-1"


def _alembic_upgrade_head() -> None:
    cfg = Config(str(SERVICE_ROOT / "alembic.ini"))
    # Pin script_location so running from the repo root finds these migrations
    cfg.set_main_option("script_location", str(SERVICE_ROOT / "alembic"))
    command.upgrade(cfg, "head")


@pytest.fixture(scope="session", autouse=True)
def migrated_db():
    _alembic_upgrade_head()
    yield TEST_DB_PATH


@pytest.fixture(autouse=True)
def auto_clean_tables(migrated_db):
    """Empty every table and the watch outboxes after each test."""
    yield
    from programs_service.database import Base
    from programs_service.services.watch_relay import watch_relay

    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())
    engine.dispose()
    watch_relay.reset()


@pytest_asyncio.fixture()
async def db():
    from programs_service.database import AsyncSessionLocal

    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture()
def client():
    from programs_service.database import AsyncSessionLocal, get_db
    from programs_service.main import app

    async def override_get_db():
        async with AsyncSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, headers={"X-User-Id": USER_ID}) as c:
        yield c

    app.dependency_overrides.clear()


def _exercise(name, sets=3, reps="10", weight=None, rest_seconds=90):
    return {"exercise_name": name, "sets": sets, "reps": reps, "weight": weight, "rest_seconds": rest_seconds}


@pytest.fixture()
def ppl_payload() -> dict:
    """Twelve week push/pull/legs split, six sessions a week, Sunday off."""
    return {
        "name": "Push Pull Legs",
        "description": "Classic six day split",
        "category": "strength",
        "difficulty": "intermediate",
        "goal": "muscle_building",
        "duration_weeks": 12,
        "workouts_per_week": 6,
        "estimated_minutes_per_session": 60,
        "equipment_required": ["barbell", "dumbbell"],
        "schedule": [
            {"day_of_week": 1, "workout_name": "Push"},
            {"day_of_week": 2, "workout_name": "Pull"},
            {"day_of_week": 3, "workout_name": "Legs"},
            {"day_of_week": 4, "workout_name": "Push"},
            {"day_of_week": 5, "workout_name": "Pull"},
            {"day_of_week": 6, "workout_name": "Legs"},
            {"day_of_week": 7, "is_rest": True, "notes": "Recover"},
        ],
        "workout_definitions": [
            {
                "name": "Push",
                "estimated_minutes": 60,
                "exercises": [
                    _exercise("Bench Press", sets=4, reps="8-12", weight="135 lbs"),
                    _exercise("Overhead Press", reps="10", weight="RPE 7"),
                ],
            },
            {
                "name": "Pull",
                "estimated_minutes": 55,
                "exercises": [
                    _exercise("Pull-Ups", reps="AMRAP", weight="Bodyweight"),
                    _exercise("Barbell Row", sets=4, reps="8", weight="115"),
                ],
            },
            {
                "name": "Legs",
                "estimated_minutes": 65,
                "exercises": [
                    _exercise("Back Squat", sets=5, reps="5", weight="185 lbs", rest_seconds=180),
                    _exercise("Romanian Deadlift", reps="10-12", weight="135 lbs"),
                ],
            },
        ],
    }


@pytest.fixture()
def short_payload() -> dict:
    """One week, two sessions: small enough to finish inside a test."""
    return {
        "name": "Starter Week",
        "category": "yoga",
        "difficulty": "beginner",
        "duration_weeks": 1,
        "workouts_per_week": 2,
        "schedule": [
            {"day_of_week": 1, "workout_name": "Flow"},
            {"day_of_week": 2, "is_rest": True},
            {"day_of_week": 3, "workout_name": "Flow"},
            {"day_of_week": 4, "is_rest": True},
            {"day_of_week": 5, "is_rest": True},
            {"day_of_week": 6, "is_rest": True},
            {"day_of_week": 7, "is_rest": True},
        ],
        "workout_definitions": [
            {
                "name": "Flow",
                "estimated_minutes": 30,
                "exercises": [_exercise("Sun Salutation", sets=2, reps="5")],
            }
        ],
    }
