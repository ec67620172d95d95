from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from ..database import utcnow
from ..metrics import PROGRAM_CHANGE_EVENTS_TOTAL

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProgramChanged:
    user_id: str
    user_program_id: int
    reason: str  # enrolled | replaced | started | ended | completed
    occurred_at: datetime = field(default_factory=utcnow)


ProgramListener = Callable[[ProgramChanged], Awaitable[None]]


class ProgramEventBus:
    """Tells interested parties that a user's active program changed.

    Publishing happens after the change is committed. A failing listener is
    logged and skipped; it never undoes the change or stops other listeners.
    """

    def __init__(self):
        self._listeners: list[ProgramListener] = []

    def subscribe(self, listener: ProgramListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: ProgramListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, event: ProgramChanged) -> None:
        PROGRAM_CHANGE_EVENTS_TOTAL.labels(reason=event.reason).inc()
        for listener in list(self._listeners):
            try:
                await listener(event)
            except Exception:
                logger.exception(
                    "program_change_listener_failed",
                    user_id=event.user_id,
                    user_program_id=event.user_program_id,
                    reason=event.reason,
                )


program_events = ProgramEventBus()


def get_program_events() -> ProgramEventBus:
    return program_events
