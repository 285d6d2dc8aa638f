"""Textual app listing stored records with confirmed deletion."""

from __future__ import annotations

import asyncio
import logging

import requests
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from frontdesk.confirm_modal import ConfirmModal
from frontdesk.models import StoredRecord
from frontdesk.records import MAX_TIME_COLUMNS, RecordsClient
from frontdesk.rendering import format_record

log = logging.getLogger(__name__)

RECORDS_TITLE = "Lista de Registros"

# Lines a record takes in the list: heading, times, observation, spacer.
_RECORD_HEIGHT = 4


class RecordsApp(App):
    """Browse the records the backend has stored and delete them one by one."""

    TITLE = "Front Desk"

    CSS = """
    Screen {
        layout: vertical;
    }

    #records-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #records-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    selected_index = reactive(None)

    BINDINGS = [
        ("j", "move(1)", "Next"),
        ("k", "move(-1)", "Previous"),
        ("down", "move(1)", "Next"),
        ("up", "move(-1)", "Previous"),
        ("r", "reload", "Reload"),
        ("d", "delete_record", "Delete"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, client: RecordsClient) -> None:
        super().__init__()
        self.client = client
        self.records: list[StoredRecord] = []
        self.system_status = ""
        self.sub_title = RECORDS_TITLE

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="records-pane"):
            yield Static(RECORDS_TITLE, classes="pane-title")
            yield Static("(cargando...)", id="records-list")
        yield Static(id="status-bar")

    async def on_mount(self) -> None:
        self._refresh_status()
        await self.action_reload()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_status()

    def _selected_record(self) -> StoredRecord | None:
        if self.selected_index is None or not (0 <= self.selected_index < len(self.records)):
            return None
        return self.records[self.selected_index]

    async def action_reload(self) -> None:
        if self._modal_open():
            return
        try:
            self.records = await asyncio.to_thread(self.client.list_records)
        except requests.RequestException as exc:
            log.warning("fetching records failed: %s", exc)
            self._set_status("No se pudieron cargar los registros")
            self._refresh_records()
            return
        self._set_status(f"{len(self.records)} registros")
        self._refresh_records()

    def action_move(self, delta: int) -> None:
        if self._modal_open() or not self.records:
            return
        if self.selected_index is None:
            self.selected_index = 0 if delta > 0 else len(self.records) - 1
        else:
            self.selected_index = (self.selected_index + delta) % len(self.records)
        self._refresh_records()

    def action_delete_record(self) -> None:
        record = self._selected_record()
        if self._modal_open() or record is None:
            return
        record_id = record.id

        async def finish(confirmed: bool | None) -> None:
            if confirmed:
                await self._delete(record_id)

        self.push_screen(ConfirmModal("¿Eliminar registro?", "Esta acción no se puede deshacer."), finish)

    async def _delete(self, record_id: str) -> None:
        try:
            await asyncio.to_thread(self.client.delete_record, record_id)
        except requests.RequestException as exc:
            log.warning("deleting record id=%s failed: %s", record_id, exc)
            self._set_status("No se pudo eliminar el registro")
            return
        self.records = [record for record in self.records if record.id != record_id]
        self._set_status("Registro eliminado con éxito")
        self._refresh_records()

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        start = 0 if selected is None else max(0, min(selected - rows // 2, total - rows))
        return (start, start + rows)

    def _refresh_records(self) -> None:
        try:
            widget = self.query_one("#records-list", Static)
        except NoMatches:
            return
        if not self.records:
            self.selected_index = None
            widget.update("(sin registros)")
            return

        if self.selected_index is None:
            self.selected_index = 0
        elif self.selected_index >= len(self.records):
            self.selected_index = len(self.records) - 1

        height = widget.size.height if widget.size.height > 0 else 8 * _RECORD_HEIGHT
        start, end = self._window_bounds(len(self.records), max(1, height // _RECORD_HEIGHT), self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.selected_index else "  ")
            lines.append_text(format_record(self.records[idx], idx, MAX_TIME_COLUMNS))
        if end < len(self.records):
            lines.append("\n⋮", style="dim")
        widget.update(lines)

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        bar.update(f"J/K move  R reload  D delete  Ctrl+Q quit\n{self.system_status or 'Listo'}")
