"""One capture screen: local rows, optimistic actions and backend intents."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable

from frontdesk import timers
from frontdesk.clock import now_timestamp
from frontdesk.constant import TABLE_TIMERS
from frontdesk.gateway import BROADCAST, CONNECT_EVENT, GET, NEW, REMOVE, SAVE, UPDATE, SyncGateway, event_name
from frontdesk.models import Row, ScreenConfig
from frontdesk.reconcile import reconcile
from frontdesk.store import RowStore
from frontdesk.validation import ValidationFailure, ValidationResult, build_persisted_payload, validate
from frontdesk.wire import row_to_wire, rows_from_wire, wire_fields

log = logging.getLogger(__name__)

TABLE_STAMP_REFUSED = "Esta mesa no es para consumo interno."


class ScreenSession:
    """
    Keeps one screen's rows in step with the backend.

    User actions update the local store first and then emit an intent without
    waiting for it. Snapshots from the backend are reconciled into the store
    as they arrive. ``listener`` is called after every change.
    """

    def __init__(
        self,
        screen: ScreenConfig,
        gateway: SyncGateway,
        *,
        listener: Callable[[], None] | None = None,
        clock: Callable[[], str] = now_timestamp,
    ) -> None:
        self.screen = screen
        self.gateway = gateway
        self.store = RowStore()
        self.listener = listener
        self._clock = clock
        self._opened = False

    @property
    def rows(self) -> tuple[Row, ...]:
        return self.store.rows

    def _event(self, kind: str) -> str:
        return event_name(kind, self.screen.collection)

    def _changed(self) -> None:
        if self.listener is not None:
            self.listener()

    def _send_update(self, row: Row, *keys: str) -> None:
        self.gateway.emit(self._event(UPDATE), {"id": row.id, "data": wire_fields(row, self.screen, *keys)})

    def open(self) -> None:
        if self._opened:
            return
        self.gateway.subscribe(self._event(BROADCAST), self.handle_snapshot)
        self.gateway.subscribe(CONNECT_EVENT, self._request_snapshot)
        self._opened = True
        self._request_snapshot()

    def close(self) -> None:
        if not self._opened:
            return
        self.gateway.unsubscribe(self._event(BROADCAST))
        self.gateway.unsubscribe(CONNECT_EVENT)
        self._opened = False

    def _request_snapshot(self, _payload: Any = None) -> None:
        self.gateway.emit(self._event(GET))

    def handle_snapshot(self, payload: Any) -> None:
        incoming = rows_from_wire(payload, self.screen)
        merged = reconcile(self.store.rows, incoming)
        kept = sum(1 for row in merged if row.is_editing)
        self.store.replace_all(merged)
        log.debug("snapshot collection=%s rows=%d kept_editing=%d", self.screen.collection, len(merged), kept)
        self._changed()

    def add_row(self) -> Row:
        row = timers.new_row(self.screen, now=self._clock(), turn=timers.next_turn(self.store.rows))
        self.store.add(row)
        self.gateway.emit(self._event(NEW), row_to_wire(row, self.screen))
        self._changed()
        return row

    def delete_row(self, row_id: str) -> bool:
        if self.store.remove(row_id) is None:
            return False
        self.gateway.emit(self._event(REMOVE), row_id)
        self._changed()
        return True

    def focus(self, row_id: str) -> None:
        if self.store.set_editing(row_id, True):
            self._changed()

    def blur(self, row_id: str) -> None:
        if self.store.set_editing(row_id, False):
            self._changed()

    def _apply(self, row_id: str, change: Callable[[Row], Row], *keys: str) -> Row | None:
        row = self.store.apply(row_id, change)
        if row is None:
            return None
        self._send_update(row, *keys)
        self._changed()
        return row

    def stamp_field(self, row_id: str, field_name: str) -> bool:
        """Stamp a field timer. Table timers are refused unless the row consumes in house."""
        row = self.store.get(row_id)
        if row is None:
            return False
        if self.screen.table_rules_enabled and field_name in TABLE_TIMERS and not timers.table_stamp_allowed(row):
            log.debug("stamp refused id=%s field=%s: no internal consumption", row_id, field_name)
            return False
        now = self._clock()
        self._apply(row_id, lambda r: timers.set_field(r, field_name, now), "tiempos")
        return True

    def press_item(self, row_id: str, item: str) -> Row | None:
        now = self._clock()
        return self._apply(row_id, lambda r: timers.press_item(r, item, self.screen, now), "tiempos")

    def remove_pair(self, row_id: str, item: str, index: int) -> Row | None:
        return self._apply(row_id, lambda r: timers.remove_pair(r, item, index), "tiempos")

    def clear_item(self, row_id: str, item: str) -> Row | None:
        return self._apply(row_id, lambda r: timers.clear_item(r, item), "tiempos")

    def set_quantity(self, row_id: str, item: str, quantity: int) -> Row | None:
        return self._apply(row_id, lambda r: timers.set_quantity(r, item, quantity), "cantidades")

    def adjust_quantity(self, row_id: str, item: str, delta: int) -> Row | None:
        row = self.store.get(row_id)
        if row is None:
            return None
        return self.set_quantity(row_id, item, row.quantity(item) + delta)

    def set_payment_method(self, row_id: str, method: str) -> Row | None:
        return self._apply(row_id, lambda r: timers.set_payment_method(r, method), "metodoPago")

    def cycle_payment_method(self, row_id: str) -> Row | None:
        return self._apply(row_id, timers.cycle_payment_method, "metodoPago")

    def set_internal_consumption(self, row_id: str, value: bool) -> Row | None:
        return self._apply(
            row_id, lambda r: timers.set_internal_consumption(r, value), "consumoInterno", "tiempos"
        )

    def _set_text(self, row_id: str, path: str, wire_key: str, value: str) -> Row | None:
        if not self.store.update_field(row_id, path, value):
            return None
        row = self.store.get(row_id)
        if row is None:
            return None
        self._send_update(row, wire_key)
        self._changed()
        return row

    def set_description(self, row_id: str, text: str) -> Row | None:
        return self._set_text(row_id, "description", "descripcion", text)

    def set_observation(self, row_id: str, text: str) -> Row | None:
        return self._set_text(row_id, "observation", "observacion", text)

    def set_assigned_turn(self, row_id: str, text: str) -> Row | None:
        return self._set_text(row_id, "assigned_turn", "turnoAsignado", text.strip())

    def submit(self, row_id: str, today: date | None = None) -> ValidationResult | None:
        """
        Validate and, when accepted, persist and retire the row.

        The row leaves the local store immediately; the backend's next
        snapshot confirms the removal. A rejected row is left untouched and
        nothing is sent.
        """
        row = self.store.get(row_id)
        if row is None:
            return None
        result = validate(row, self.screen)
        if isinstance(result, ValidationFailure):
            log.debug("submit rejected id=%s reason=%s", row_id, result.reason.value)
            return result

        payload = build_persisted_payload(row, self.screen, today)
        self.gateway.emit(self._event(SAVE), {"id": row.id, "data": payload})
        self.store.remove(row.id)
        self.gateway.emit(self._event(REMOVE), row.id)
        log.info("submitted collection=%s id=%s", self.screen.collection, row.id)
        self._changed()
        return result
