import asyncio
from typing import Any

import pytest
from socketio.exceptions import ConnectionError as SocketConnectionError

from frontdesk.gateway import SocketIOGateway, SyncGateway, event_name


class StubClient:
    """Just enough of socketio.AsyncClient for the gateway."""

    def __init__(self, connected: bool = True, refuse: int = 0, send_delay: float = 0) -> None:
        self.connected = connected
        self.refuse = refuse
        self.send_delay = send_delay
        self.handlers: dict[str, Any] = {}
        self.emitted: list[tuple[str, Any]] = []
        self.connect_calls: list[dict[str, Any]] = []

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    async def emit(self, event, data=None, namespace=None, callback=None):
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        self.emitted.append((event, data))

    async def connect(self, url, **kwargs):
        self.connect_calls.append(kwargs)
        if self.refuse:
            self.refuse -= 1
            raise SocketConnectionError("Connection refused")
        self.connected = True

    async def disconnect(self):
        self.connected = False


def test_event_names():
    assert event_name("nuevo", "mesas") == "nuevo_mesas"
    assert event_name("update", "arribo") == "update_arribo"


def test_emit_is_fire_and_forget():
    client = StubClient()
    gateway = SocketIOGateway("http://backend", client=client)

    async def scenario():
        gateway.emit("eliminar_mesas", "row-1")
        assert client.emitted == []
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert client.emitted == [("eliminar_mesas", "row-1")]


def test_emit_dropped_when_disconnected():
    client = StubClient(connected=False)
    gateway = SocketIOGateway("http://backend", client=client)

    async def scenario():
        gateway.emit("get_mesas")
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert client.emitted == []


def test_inbound_messages_reach_subscribers():
    client = StubClient()
    gateway = SocketIOGateway("http://backend", client=client)
    received = []
    gateway.subscribe("update_mesas", received.append)

    asyncio.run(client.handlers["*"]("update_mesas", [{"id": "a"}]))
    asyncio.run(client.handlers["*"]("update_arribo", [{"id": "b"}]))
    gateway.unsubscribe("update_mesas")
    asyncio.run(client.handlers["*"]("update_mesas", []))

    assert received == [[{"id": "a"}]]


def test_connect_event_is_forwarded():
    client = StubClient()
    gateway = SocketIOGateway("http://backend", client=client)
    calls = []
    gateway.subscribe("connect", calls.append)

    asyncio.run(client.handlers["connect"]())

    assert calls == [None]


def test_open_and_close():
    client = StubClient(connected=False)
    gateway = SocketIOGateway("http://backend", client=client)

    asyncio.run(gateway.open())
    assert gateway.connected

    asyncio.run(gateway.close())
    assert not gateway.connected


def test_offline_start_keeps_retrying_in_background():
    client = StubClient(connected=False, refuse=1)
    gateway = SocketIOGateway("http://backend", client=client)

    async def scenario():
        await gateway.open()
        assert not gateway.connected
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert gateway.connected
        await gateway.close()

    asyncio.run(scenario())

    assert client.connect_calls == [{}, {"retry": True}]


def test_close_lets_pending_emits_finish():
    client = StubClient(send_delay=0.01)
    gateway = SocketIOGateway("http://backend", client=client)

    async def scenario():
        gateway.emit("guardar_mesas", {"id": "row-1"})
        gateway.emit("eliminar_mesas", "row-1")
        await gateway.close()

    asyncio.run(scenario())

    assert client.emitted == [("guardar_mesas", {"id": "row-1"}), ("eliminar_mesas", "row-1")]
    assert not gateway.connected


def test_close_gives_up_on_stuck_emits():
    client = StubClient(send_delay=5)
    gateway = SocketIOGateway("http://backend", client=client, drain_timeout=0.01)

    async def scenario():
        gateway.emit("get_mesas")
        await gateway.close()

    asyncio.run(scenario())

    assert client.emitted == []


def test_gateway_contract_requires_every_method():
    class EmitOnly(SyncGateway):
        def emit(self, event, payload=None):
            pass

    with pytest.raises(TypeError):
        EmitOnly()
