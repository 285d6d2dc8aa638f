"""Free-text edit modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class TextEditModal(ModalScreen[str | None]):
    """
    Centered modal editing one text field of a row.

    Every keystroke is pushed through ``on_change`` so other terminals see the
    text as it is typed. Escape restores the value the modal opened with.
    """

    CSS = """
    TextEditModal {
        align: center middle;
        background: $background 60%;
    }

    #edit-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #edit-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #edit-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #edit-help {
        color: #dddddd;
    }
    """

    def __init__(self, title: str, initial: str, on_change: Callable[[str], None]) -> None:
        super().__init__()
        self.title_text = title
        self.initial = initial
        self.value = initial
        self.on_change = on_change

    def compose(self) -> ComposeResult:
        with Container(id="edit-dialog"):
            yield Static(self.title_text, id="edit-title")
            yield Static(id="edit-value")
            yield Static("Type text, Enter confirm, Esc cancel", id="edit-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            if self.value != self.initial:
                self.value = self.initial
                self.on_change(self.value)
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(self.value)
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self._set_value(self.value[:-1])
            event.stop()
            return

        if event.is_printable and event.character:
            self._set_value(self.value + event.character)
            event.stop()
            return

        # Ignore all non-text keys while typing.
        event.stop()

    def _set_value(self, value: str) -> None:
        self.value = value
        self.on_change(value)
        self._refresh_content()

    def _refresh_content(self) -> None:
        self.query_one("#edit-value", Static).update(Text(f"{self.value}|", style="bold white"))
