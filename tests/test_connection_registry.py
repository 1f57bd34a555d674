import pytest
from starlette.websockets import WebSocketDisconnect

from app.services.connection_registry import ConnectionRegistry


class FakeSocket:
    def __init__(self, broken=False):
        self.accepted = False
        self.sent = []
        self.broken = broken

    async def accept(self):
        self.accepted = True

    async def send_json(self, payload):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(payload)


async def test_connect_and_disconnect_multi_device():
    registry = ConnectionRegistry()
    phone, web = FakeSocket(), FakeSocket()

    await registry.connect("u1", phone)
    await registry.connect("u1", web)
    assert phone.accepted and web.accepted
    assert registry.online_user_ids() == ["u1"]

    registry.disconnect("u1", phone)
    assert registry.is_online("u1")

    registry.disconnect("u1", web)
    assert not registry.is_online("u1")
    assert registry.online_user_ids() == []


async def test_send_to_user_reaches_every_socket():
    registry = ConnectionRegistry()
    phone, web, other = FakeSocket(), FakeSocket(), FakeSocket()
    await registry.connect("u1", phone)
    await registry.connect("u1", web)
    await registry.connect("u2", other)

    delivered = await registry.send_to_user("u1", {"event": "newMessage"})

    assert delivered == 2
    assert phone.sent == [{"event": "newMessage"}]
    assert web.sent == [{"event": "newMessage"}]
    assert other.sent == []


async def test_send_to_offline_user():
    assert await ConnectionRegistry().send_to_user("ghost", {"event": "x"}) == 0


async def test_dead_sockets_are_dropped():
    registry = ConnectionRegistry()
    await registry.connect("u1", FakeSocket(broken=True))

    assert await registry.send_to_user("u1", {"event": "x"}) == 0
    assert not registry.is_online("u1")


async def test_broadcast_online_users():
    registry = ConnectionRegistry()
    a, b = FakeSocket(), FakeSocket()
    await registry.connect("u1", a)
    await registry.connect("u2", b)

    await registry.broadcast_online_users()

    for sock in (a, b):
        assert sock.sent[-1]["event"] == "getOnlineUsers"
        assert sorted(sock.sent[-1]["data"]) == ["u1", "u2"]


def test_websocket_connect_publishes_online_users(client, make_user):
    user, headers = make_user("Alice")
    token = headers["Authorization"].split(" ", 1)[1]

    with client.websocket_connect(f"/ws?token={token}") as ws:
        event = ws.receive_json()
        assert event == {"event": "getOnlineUsers", "data": [user["_id"]]}


def test_websocket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws?token=bogus"):
            pass
    assert exc.value.code == 1008
