from collections import defaultdict, deque
from collections.abc import Callable

import structlog

from ..config import get_settings
from ..database import utcnow
from ..metrics import WATCH_MESSAGES_RELAYED_TOTAL
from ..schemas.watch import HealthDataUpdate, HealthSnapshot, WatchMessageBase

logger = structlog.get_logger(__name__)

WatchListener = Callable[[str, WatchMessageBase], None]


class WatchRelay:
    """Fire-and-forget channel between workout sessions and the companion watch.

    Outbound messages queue per user in a bounded outbox that the watch
    drains by polling; when the outbox is full the oldest message is
    dropped. Delivery problems are logged and never reach the caller.
    """

    def __init__(self, outbox_size: int = 100):
        self.outbox_size = outbox_size
        self._outboxes: dict[str, deque] = defaultdict(lambda: deque(maxlen=self.outbox_size))
        self._health: dict[str, HealthSnapshot] = {}
        self._listeners: list[WatchListener] = []

    def subscribe(self, listener: WatchListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def send(self, user_id: str, message: WatchMessageBase) -> None:
        message_type = getattr(message, "type", "unknown")
        try:
            self._outboxes[user_id].append(message)
            WATCH_MESSAGES_RELAYED_TOTAL.labels(type=message_type).inc()
        except Exception:
            logger.exception("watch_message_enqueue_failed", user_id=user_id, type=message_type)
            return
        self._notify(user_id, message)

    def drain(self, user_id: str) -> list[WatchMessageBase]:
        outbox = self._outboxes.pop(user_id, None)
        return list(outbox) if outbox else []

    def pending(self, user_id: str) -> int:
        outbox = self._outboxes.get(user_id)
        return len(outbox) if outbox else 0

    def receive(self, user_id: str, message: WatchMessageBase) -> None:
        """Handle a message sent up from the watch."""
        if isinstance(message, HealthDataUpdate):
            self._health[user_id] = HealthSnapshot(heart_rate=message.heart_rate, received_at=utcnow())
            logger.debug("watch_health_update", user_id=user_id, heart_rate=message.heart_rate)
        else:
            logger.info("watch_message_received", user_id=user_id, type=getattr(message, "type", "unknown"))
        self._notify(user_id, message)

    def latest_health(self, user_id: str) -> HealthSnapshot:
        return self._health.get(user_id) or HealthSnapshot()

    def reset(self) -> None:
        self._outboxes.clear()
        self._health.clear()

    def _notify(self, user_id: str, message: WatchMessageBase) -> None:
        for listener in list(self._listeners):
            try:
                listener(user_id, message)
            except Exception:
                logger.exception(
                    "watch_listener_failed",
                    user_id=user_id,
                    type=getattr(message, "type", "unknown"),
                )


watch_relay = WatchRelay(outbox_size=get_settings().WATCH_OUTBOX_SIZE)


def get_watch_relay() -> WatchRelay:
    return watch_relay
