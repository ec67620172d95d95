from fastapi.testclient import TestClient

from programs_service.schemas.watch import HealthDataUpdate, RestTimerEnded, RestTimerStarted, WorkoutStarted
from programs_service.services.watch_relay import WatchRelay


def test_outbox_is_bounded_and_drops_oldest():
    relay = WatchRelay(outbox_size=3)
    for seconds in range(5):
        relay.send("u1", RestTimerStarted(duration=seconds))

    drained = relay.drain("u1")

    assert [m.duration for m in drained] == [2, 3, 4]
    assert relay.drain("u1") == []


def test_outboxes_are_per_user():
    relay = WatchRelay()
    relay.send("u1", RestTimerEnded())

    assert relay.pending("u1") == 1
    assert relay.pending("u2") == 0
    assert relay.drain("u2") == []


def test_failing_listener_does_not_reach_sender():
    relay = WatchRelay()
    received = []

    def broken(user_id, message):
        raise RuntimeError("watch unreachable")

    relay.subscribe(broken)
    relay.subscribe(lambda user_id, message: received.append((user_id, message.type)))

    relay.send("u1", WorkoutStarted(workout_name="Push"))

    assert received == [("u1", "workout_started")]
    assert relay.pending("u1") == 1


def test_unsubscribe_stops_delivery():
    relay = WatchRelay()
    received = []
    unsubscribe = relay.subscribe(lambda user_id, message: received.append(message))

    unsubscribe()
    relay.send("u1", RestTimerEnded())

    assert received == []


def test_health_updates_keep_latest_reading():
    relay = WatchRelay()
    assert relay.latest_health("u1").heart_rate is None

    relay.receive("u1", HealthDataUpdate(heart_rate=120))
    relay.receive("u1", HealthDataUpdate(heart_rate=134))

    snapshot = relay.latest_health("u1")
    assert snapshot.heart_rate == 134
    assert snapshot.received_at is not None


def test_watch_api_round_trip(client: TestClient):
    r_post = client.post("/api/v1/watch/messages", json={"type": "health_data_update", "heart_rate": 141})
    assert r_post.status_code == 202
    assert r_post.json() == {"status": "accepted", "type": "health_data_update"}

    r_health = client.get("/api/v1/watch/health")
    assert r_health.json()["heart_rate"] == 141

    assert client.get("/api/v1/watch/messages").json() == []


def test_watch_api_rejects_unknown_payloads(client: TestClient):
    assert client.post("/api/v1/watch/messages", json={"type": "teleport"}).status_code == 422
    assert (
        client.post(
            "/api/v1/watch/messages", json={"type": "health_data_update", "heart_rate": 90, "version": 2}
        ).status_code
        == 422
    )
