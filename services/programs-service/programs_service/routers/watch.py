from fastapi import APIRouter, Depends, status

from .. import schemas as sm
from ..dependencies import get_current_user_id
from ..services.watch_relay import WatchRelay, get_watch_relay

router = APIRouter(prefix="/watch")


@router.get("/messages", response_model=list[sm.WatchPayload])
async def drain_messages(
    user_id: str = Depends(get_current_user_id),
    relay: WatchRelay = Depends(get_watch_relay),
):
    """Hand the watch everything queued for it since its last poll."""
    return [sm.WatchPayload(message) for message in relay.drain(user_id)]


@router.post("/messages", status_code=status.HTTP_202_ACCEPTED)
async def receive_message(
    payload: sm.WatchPayload,
    user_id: str = Depends(get_current_user_id),
    relay: WatchRelay = Depends(get_watch_relay),
):
    message = payload.root
    relay.receive(user_id, message)
    return {"status": "accepted", "type": message.type}


@router.get("/health", response_model=sm.HealthSnapshot)
async def latest_health(
    user_id: str = Depends(get_current_user_id),
    relay: WatchRelay = Depends(get_watch_relay),
):
    return relay.latest_health(user_id)
