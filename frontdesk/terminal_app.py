"""Main Textual app class."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from frontdesk.confirm_modal import ConfirmModal
from frontdesk.data import field_label, item_label
from frontdesk.edit_modal import TextEditModal
from frontdesk.gateway import SyncGateway
from frontdesk.models import PairTimer, Row, ScreenConfig
from frontdesk.rendering import format_field_timers, format_items, format_row_details, format_row_label
from frontdesk.session import TABLE_STAMP_REFUSED, ScreenSession
from frontdesk.validation import ValidationFailure

log = logging.getLogger(__name__)

_TEXT_FIELDS = {
    "observation": ("Observación", "set_observation"),
    "description": ("Descripción", "set_description"),
    "assigned_turn": ("Turno", "set_assigned_turn"),
}


class FrontDeskApp(App):
    """A Textual app capturing service timers for one screen's open rows."""

    TITLE = "Front Desk"

    CSS = """
    Screen {
        layout: vertical;
    }

    #rows-pane {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #rows-list {
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

    row_selected_index = reactive(None)
    item_selected_index = reactive(0)

    BINDINGS = [
        ("a", "add_row", "Add row"),
        ("j", "move_row(1)", "Next row"),
        ("k", "move_row(-1)", "Previous row"),
        ("down", "move_row(1)", "Next row"),
        ("up", "move_row(-1)", "Previous row"),
        ("l", "move_item(1)", "Next item"),
        ("h", "move_item(-1)", "Previous item"),
        ("space", "press_item", "Start/stop item"),
        ("plus", "adjust_quantity(1)", "Quantity +1"),
        ("minus", "adjust_quantity(-1)", "Quantity -1"),
        ("x", "remove_last_pair", "Remove last pair"),
        ("p", "cycle_payment", "Payment method"),
        ("c", "toggle_consumption", "Internal consumption"),
        ("o", "edit_text('observation')", "Observation"),
        ("e", "edit_text('description')", "Description"),
        ("t", "edit_text('assigned_turn')", "Turn"),
        ("d", "delete_row", "Delete row"),
        Binding("ctrl+s", "submit_row", "Submit", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, screen_config: ScreenConfig, gateway: SyncGateway) -> None:
        super().__init__()
        self.screen_config = screen_config
        self.gateway = gateway
        self.session = ScreenSession(screen_config, gateway, listener=self._refresh_rows)
        self.system_status = ""
        self.sub_title = screen_config.title

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="rows-pane"):
            yield Static(self.screen_config.title, classes="pane-title")
            yield Static("(no rows yet)", id="rows-list")
        yield Static(id="status-bar")

    async def on_mount(self) -> None:
        self._refresh_all()
        await self.gateway.open()
        self.session.open()
        log.debug("on_mount screen=%s", self.screen_config.name)

    async def on_unmount(self) -> None:
        self.session.close()
        await self.gateway.close()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if not event.is_printable or not event.character or not event.character.isdigit():
            return

        slot = int(event.character) - 1
        if 0 <= slot < len(self.screen_config.field_timers):
            self._stamp_field(self.screen_config.field_timers[slot])
            event.stop()

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def _selected_row(self) -> Row | None:
        rows = self.session.rows
        if self.row_selected_index is None:
            return None
        if not (0 <= self.row_selected_index < len(rows)):
            return None
        return rows[self.row_selected_index]

    def _selected_item(self) -> str | None:
        items = self.screen_config.items
        if not items:
            return None
        return items[self.item_selected_index % len(items)]

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_status()

    def action_add_row(self) -> None:
        if self._modal_open():
            return
        self.session.add_row()
        self.row_selected_index = len(self.session.rows) - 1
        self._set_status("Fila agregada")

    def action_move_row(self, delta: int) -> None:
        if self._modal_open():
            return
        rows = self.session.rows
        if not rows:
            return
        if self.row_selected_index is None:
            self.row_selected_index = 0 if delta > 0 else len(rows) - 1
        else:
            self.row_selected_index = (self.row_selected_index + delta) % len(rows)
        self._refresh_rows()

    def action_move_item(self, delta: int) -> None:
        if self._modal_open() or not self.screen_config.items:
            return
        self.item_selected_index = (self.item_selected_index + delta) % len(self.screen_config.items)
        self._refresh_rows()

    def _stamp_field(self, field_name: str) -> None:
        row = self._selected_row()
        if row is None:
            return
        if self.session.stamp_field(row.id, field_name):
            self._set_status(f"{field_label(field_name)} registrado")
        else:
            self._set_status(TABLE_STAMP_REFUSED)

    def action_press_item(self) -> None:
        row, item = self._selected_row(), self._selected_item()
        if self._modal_open() or row is None or item is None:
            return
        updated = self.session.press_item(row.id, item)
        timer = updated.timer(item) if updated is not None else None
        if isinstance(timer, PairTimer):
            state = "en curso" if timer.is_running else f"{len(timer.pairs)} pares"
            self._set_status(f"{item_label(item)}: {state}")

    def action_adjust_quantity(self, delta: int) -> None:
        row, item = self._selected_row(), self._selected_item()
        if self._modal_open() or row is None or item is None or not self.screen_config.track_quantities:
            return
        self.session.adjust_quantity(row.id, item, delta)

    def action_remove_last_pair(self) -> None:
        row, item = self._selected_row(), self._selected_item()
        if self._modal_open() or row is None or item is None:
            return
        timer = row.timer(item)
        if isinstance(timer, PairTimer) and timer.pairs:
            self.session.remove_pair(row.id, item, len(timer.pairs) - 1)
        elif timer is not None:
            self.session.clear_item(row.id, item)

    def action_cycle_payment(self) -> None:
        row = self._selected_row()
        if self._modal_open() or row is None or not self.screen_config.payment_enabled:
            return
        self.session.cycle_payment_method(row.id)

    def action_toggle_consumption(self) -> None:
        row = self._selected_row()
        if self._modal_open() or row is None or not self.screen_config.table_rules_enabled:
            return
        self.session.set_internal_consumption(row.id, not row.internal_consumption)

    def action_edit_text(self, field_name: str) -> None:
        row = self._selected_row()
        if self._modal_open() or row is None or field_name not in _TEXT_FIELDS:
            return
        if field_name == "assigned_turn" and not self.screen_config.turn_enabled:
            return

        title, setter_name = _TEXT_FIELDS[field_name]
        setter = getattr(self.session, setter_name)
        row_id = row.id

        def finish(_value: str | None) -> None:
            self.session.blur(row_id)

        self.session.focus(row_id)
        self.push_screen(
            TextEditModal(title, str(getattr(row, field_name)), on_change=lambda text: setter(row_id, text)),
            finish,
        )

    def action_delete_row(self) -> None:
        row = self._selected_row()
        if self._modal_open() or row is None:
            return
        row_id = row.id

        def finish(confirmed: bool | None) -> None:
            if confirmed and self.session.delete_row(row_id):
                self._set_status("La fila ha sido eliminada")

        self.push_screen(ConfirmModal("¿Eliminar fila?", "Esta acción eliminará la fila de forma permanente."), finish)

    def action_submit_row(self) -> None:
        row = self._selected_row()
        if self._modal_open():
            return
        if row is None:
            self._set_status("Nada que enviar")
            return

        result = self.session.submit(row.id)
        if isinstance(result, ValidationFailure):
            self._set_status(result.message)
            return
        self._set_status("Registro enviado")

    def _refresh_all(self) -> None:
        self._refresh_rows()
        self._refresh_status()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _row_height(self) -> int:
        height = 2
        if self.screen_config.field_timers:
            height += 1
        return height + len(self.screen_config.items)

    def _refresh_rows(self) -> None:
        try:
            rows_widget = self.query_one("#rows-list", Static)
        except NoMatches:
            return
        rows = self.session.rows
        if not rows:
            self.row_selected_index = None
            rows_widget.update("(no rows yet)  Press A to add a row.")
            return

        if self.row_selected_index is None:
            self.row_selected_index = 0
        elif self.row_selected_index >= len(rows):
            self.row_selected_index = len(rows) - 1

        visible = max(1, self._visible_rows(rows_widget) // self._row_height())
        start, end = self._window_bounds(len(rows), visible, self.row_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            row = rows[idx]
            selected = idx == self.row_selected_index
            lines.append("➤ " if selected else "  ")
            lines.append_text(format_row_label(row, idx))
            if self.screen_config.field_timers:
                lines.append("\n      ")
                lines.append_text(format_field_timers(row, self.screen_config))
            if self.screen_config.items:
                lines.append("\n      ")
                lines.append_text(format_items(row, self.screen_config, self.item_selected_index if selected else None))
            lines.append("\n      ")
            lines.append_text(format_row_details(row, self.screen_config))

        if end < len(rows):
            lines.append("\n⋮", style="dim")

        rows_widget.update(lines)

    def _refresh_status(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        status = self.system_status or "Listo"
        bar.update(
            "A add  J/K row  H/L item  Space start/stop  1-9 stamp  O/E/T edit  D delete  Ctrl+S submit\n"
            f"{status}"
        )
