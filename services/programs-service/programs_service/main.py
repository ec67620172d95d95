import structlog
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import Base, engine
from .exceptions import NotFoundException
from .fastapi_app import create_service_app
from .logging_config import configure_logging
from .routers.checkins import router as checkins_router
from .routers.exercises import router as exercises_router
from .routers.programs import router as programs_router
from .routers.records import router as records_router
from .routers.sessions import router as sessions_router
from .routers.templates import router as templates_router
from .routers.watch import router as watch_router
from .routers.workouts import router as workouts_router
from .services.program_events import ProgramChanged, program_events

settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger(__name__)

app = create_service_app(
    title=settings.SERVICE_NAME,
    version="0.1.0",
    description="Training program enrollment, generated workouts and progress",
    cors_origins=settings.CORS_ORIGINS,
)


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request, exc: NotFoundException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


async def log_program_change(event: ProgramChanged) -> None:
    logger.info(
        "active_program_changed",
        user_id=event.user_id,
        user_program_id=event.user_program_id,
        reason=event.reason,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    program_events.subscribe(log_program_change)
    logger.info("programs_service_started", environment=settings.ENVIRONMENT)


@app.on_event("shutdown")
async def shutdown_event():
    program_events.unsubscribe(log_program_change)
    await engine.dispose()


app.include_router(templates_router, prefix="/api/v1")
app.include_router(programs_router, prefix="/api/v1")
app.include_router(workouts_router, prefix="/api/v1")
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(exercises_router, prefix="/api/v1")
app.include_router(watch_router, prefix="/api/v1")
app.include_router(records_router, prefix="/api/v1")
app.include_router(checkins_router, prefix="/api/v1")
