"""Publish/subscribe channel to the backend."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError, SocketIOError

log = logging.getLogger(__name__)

GET = "get"
NEW = "nuevo"
UPDATE = "actualizar"
SAVE = "guardar"
REMOVE = "eliminar"
BROADCAST = "update"

CONNECT_EVENT = "connect"

# Seconds close() waits for in-flight emits before disconnecting.
DRAIN_TIMEOUT = 2.0

Handler = Callable[[Any], None]


def event_name(kind: str, collection: str) -> str:
    """``event_name("nuevo", "mesas") -> "nuevo_mesas"``"""
    return f"{kind}_{collection}"


class SyncGateway(ABC):
    """
    Channel contract used by a screen session.

    ``emit`` is fire-and-forget: it never blocks and never reports delivery.
    Handlers run on the event loop thread, one message at a time.
    """

    @abstractmethod
    async def open(self) -> None: ...

    @abstractmethod
    async def close(self) -> None: ...

    @abstractmethod
    def emit(self, event: str, payload: Any = None) -> None: ...

    @abstractmethod
    def subscribe(self, event: str, handler: Handler) -> None: ...

    @abstractmethod
    def unsubscribe(self, event: str) -> None: ...


class SocketIOGateway(SyncGateway):
    """
    Socket.IO client transport.

    If the backend is down at start-up the client keeps retrying in the
    background; once connected, dropped connections are re-established by
    python-socketio itself.
    """

    def __init__(
        self,
        url: str,
        client: socketio.AsyncClient | None = None,
        drain_timeout: float = DRAIN_TIMEOUT,
    ) -> None:
        self.url = url
        self.drain_timeout = drain_timeout
        self._client = client or socketio.AsyncClient(reconnection=True, logger=False)
        self._handlers: dict[str, Handler] = {}
        self._pending: set[asyncio.Task[None]] = set()
        self._retry_task: asyncio.Task[None] | None = None
        self._client.on(CONNECT_EVENT, handler=self._on_connect)
        self._client.on("*", handler=self._on_message)

    @property
    def connected(self) -> bool:
        return bool(self._client.connected)

    async def open(self) -> None:
        try:
            await self._client.connect(self.url)
        except SocketConnectionError as exc:
            log.warning("backend unreachable url=%s error=%s; retrying in background", self.url, exc)
            self._retry_task = asyncio.get_running_loop().create_task(self._connect_with_retry())
            return
        log.info("connected url=%s", self.url)

    async def _connect_with_retry(self) -> None:
        try:
            await self._client.connect(self.url, retry=True)
        except SocketConnectionError as exc:
            log.warning("backend still unreachable url=%s error=%s", self.url, exc)
            return
        log.info("connected url=%s", self.url)

    async def close(self) -> None:
        if self._retry_task is not None:
            self._retry_task.cancel()
            self._retry_task = None
        if self._pending:
            _done, unfinished = await asyncio.wait(set(self._pending), timeout=self.drain_timeout)
            for task in unfinished:
                log.warning("emit abandoned on close after %.1fs", self.drain_timeout)
                task.cancel()
        if self._client.connected:
            await self._client.disconnect()
        log.info("disconnected url=%s", self.url)

    def subscribe(self, event: str, handler: Handler) -> None:
        self._handlers[event] = handler

    def unsubscribe(self, event: str) -> None:
        self._handlers.pop(event, None)

    def emit(self, event: str, payload: Any = None) -> None:
        if not self._client.connected:
            log.warning("emit dropped event=%s: not connected", event)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.warning("emit dropped event=%s: no running loop", event)
            return
        task = loop.create_task(self._send(event, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, event: str, payload: Any) -> None:
        try:
            await self._client.emit(event, payload)
        except SocketIOError as exc:
            log.warning("emit failed event=%s error=%s", event, exc)
            return
        log.debug("emitted event=%s", event)

    async def _on_connect(self) -> None:
        handler = self._handlers.get(CONNECT_EVENT)
        if handler is not None:
            handler(None)

    async def _on_message(self, event: str, data: Any = None) -> None:
        handler = self._handlers.get(event)
        if handler is None:
            log.debug("unhandled event=%s", event)
            return
        handler(data)
