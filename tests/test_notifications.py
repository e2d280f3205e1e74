import uuid

from finance_api.models.notification import Notification
from finance_api.utils import notifications as notify
from finance_api.utils.goal_planning import utcnow


class FakeWebSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


def test_format_currency():
    assert notify.format_currency(1234.5, "USD") == "$1,234.50"
    assert notify.format_currency(-20, "gbp") == "-£20.00"
    assert notify.format_currency(99, "CHF") == "CHF 99.00"


async def test_push_reaches_open_sockets_and_drops_dead_ones():
    user_id = uuid.uuid4()
    alive, dead = FakeWebSocket(), FakeWebSocket(fail=True)
    notify.connect_user(alive, user_id)
    notify.connect_user(dead, user_id)

    notification = Notification(
        id=uuid.uuid4(),
        user_id=user_id,
        title="Goal Added",
        message='Successfully added the "Bike" goal.',
        type="info",
        status="info",
        is_read=False,
        created_at=utcnow(),
    )
    try:
        await notify.push_notifications(user_id, [notification])

        assert alive.sent[0]["type"] == "notification"
        assert alive.sent[0]["data"]["title"] == "Goal Added"
        assert notify.active_connections[user_id] == [alive]
    finally:
        notify.disconnect_user(alive, user_id)
    assert user_id not in notify.active_connections


async def test_push_without_connections_is_a_no_op():
    await notify.send_realtime_notification(uuid.uuid4(), Notification(title="t", message="m"))


async def _seed(client):
    await client.post(
        "/api/v1/goals",
        json={"name": "Bike", "target_amount": 300, "saving_strategy": "self-dependent"},
    )
    await client.post(
        "/api/v1/goals",
        json={"name": "Boat", "target_amount": 3000, "saving_strategy": "self-dependent"},
    )
    return (await client.get("/api/v1/notification/")).json()


async def test_list_read_and_delete_notifications(client):
    notifications = await _seed(client)
    assert len(notifications) == 2
    assert (await client.get("/api/v1/notification/unread-count")).json() == 2

    first = notifications[0]
    resp = await client.post(f"/api/v1/notification/{first['id']}/read")
    assert resp.status_code == 200
    assert resp.json()["is_read"] is True
    assert (await client.get("/api/v1/notification/unread-count")).json() == 1

    unread = (await client.get("/api/v1/notification/", params={"unread_only": True})).json()
    assert [n["id"] for n in unread] == [notifications[1]["id"]]

    assert (await client.post("/api/v1/notification/read_all")).json() == 1
    assert (await client.get("/api/v1/notification/unread-count")).json() == 0

    assert (await client.get(f"/api/v1/notification/{first['id']}")).status_code == 200
    assert (await client.delete(f"/api/v1/notification/{first['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/notification/{first['id']}")).status_code == 404
    assert (await client.delete(f"/api/v1/notification/{first['id']}")).status_code == 404


async def test_unknown_notification_is_404(client):
    missing = "00000000-0000-0000-0000-000000000000"
    assert (await client.post(f"/api/v1/notification/{missing}/read")).status_code == 404
