import pytest

from programs_service.services.program_events import ProgramChanged, ProgramEventBus


@pytest.mark.asyncio
async def test_publish_reaches_every_listener_even_if_one_fails():
    bus = ProgramEventBus()
    seen = []

    async def broken(event):
        raise RuntimeError("listener down")

    async def recorder(event):
        seen.append(event.reason)

    bus.subscribe(broken)
    bus.subscribe(recorder)

    await bus.publish(ProgramChanged(user_id="u1", user_program_id=3, reason="enrolled"))

    assert seen == ["enrolled"]


@pytest.mark.asyncio
async def test_unsubscribe_handle_detaches_listener():
    bus = ProgramEventBus()
    seen = []

    async def recorder(event):
        seen.append(event.user_program_id)

    unsubscribe = bus.subscribe(recorder)
    await bus.publish(ProgramChanged(user_id="u1", user_program_id=1, reason="enrolled"))
    unsubscribe()
    await bus.publish(ProgramChanged(user_id="u1", user_program_id=2, reason="ended"))

    assert seen == [1]
    assert bus.listener_count == 0
    # Detaching twice is harmless
    unsubscribe()
