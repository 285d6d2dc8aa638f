from __future__ import annotations

from typing import Any, Callable

import pytest

from frontdesk.data import screen_config
from frontdesk.gateway import SyncGateway


class FakeGateway(SyncGateway):
    """Records intents and lets tests push broadcasts by hand."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, Any]] = []
        self.handlers: dict[str, Callable[[Any], None]] = {}
        self.opened = False

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.opened = False

    def emit(self, event: str, payload: Any = None) -> None:
        self.sent.append((event, payload))

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event] = handler

    def unsubscribe(self, event: str) -> None:
        self.handlers.pop(event, None)

    def deliver(self, event: str, payload: Any = None) -> None:
        self.handlers[event](payload)

    def events(self) -> list[str]:
        return [event for event, _ in self.sent]


class Ticker:
    """Deterministic clock producing 10:00:00.000, 10:00:01.000, ..."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> str:
        stamp = f"10:00:{self.count:02d}.000"
        self.count += 1
        return stamp


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def ticker() -> Ticker:
    return Ticker()


@pytest.fixture
def arribo():
    return screen_config("arribo")


@pytest.fixture
def productos():
    return screen_config("productos")


@pytest.fixture
def mesas():
    return screen_config("mesas")


@pytest.fixture
def servicio():
    return screen_config("servicio")
