"""Rendering helpers for rows and timers."""

from __future__ import annotations

from rich.text import Text

from frontdesk.data import field_label, item_label, payment_label
from frontdesk.models import ItemTimer, PairTimer, Row, ScreenConfig, SingleTimer, StoredRecord

RUNNING_MARK = "● ● ●"
EMPTY_STAMP = "--:--:--"


def badge_style(kind: str) -> str:
    """Return a consistent badge style for row state tags."""
    if kind == "EDIT":
        return "bold #ffffff on #b23a48"
    if kind == "RUN":
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_row_label(row: Row, index: int) -> Text:
    """Render the heading line of a row: number, turn, description and state badges."""
    text = Text()
    text.append(f"{index + 1}. ")
    if row.assigned_turn:
        text.append(f"#{row.assigned_turn} ", style="bold")
    text.append(row.description or "(sin descripción)", style="" if row.description else "dim")
    if row.is_editing:
        text.append(" ")
        text.append("EDIT", style=badge_style("EDIT"))
    if any(isinstance(t, PairTimer) and t.is_running for t in row.item_timers.values()):
        text.append(" ")
        text.append("RUN", style=badge_style("RUN"))
    return text


def format_field_timers(row: Row, screen: ScreenConfig) -> Text:
    text = Text()
    for idx, name in enumerate(screen.field_timers):
        if idx > 0:
            text.append("  ")
        stamp = row.field_timers.get(name)
        text.append(f"{idx + 1}:{field_label(name)} ", style="dim")
        text.append(stamp or EMPTY_STAMP, style="white" if stamp else "dim")
    return text


def format_item_timer(item: str, timer: ItemTimer | None, quantity: int | None, selected: bool) -> Text:
    text = Text()
    label = item_label(item)
    text.append(f"[{label}]" if selected else f" {label} ", style="bold white" if selected else "white")
    if quantity is not None:
        text.append(f" x{quantity}")
    if isinstance(timer, PairTimer):
        if timer.is_running:
            text.append(f" {RUNNING_MARK}", style="bold #2f6db5")
        for num, pair in enumerate(timer.pairs, start=1):
            text.append(f" {num}) {pair.start} - {pair.end}", style="dim")
    elif isinstance(timer, SingleTimer) and timer.stamp:
        text.append(f" {timer.stamp}", style="dim")
    return text


def format_items(row: Row, screen: ScreenConfig, selected_item: int | None) -> Text:
    text = Text()
    for idx, item in enumerate(screen.items):
        if idx > 0:
            text.append("\n      ")
        quantity = row.quantity(item) if screen.track_quantities else None
        text.append_text(format_item_timer(item, row.timer(item), quantity, idx == selected_item))
    return text


def format_row_details(row: Row, screen: ScreenConfig) -> Text:
    """Payment, consumption and observation summary line."""
    parts: list[str] = []
    if screen.payment_enabled:
        parts.append(f"Pago: {payment_label(row.payment_method)}")
    if screen.table_rules_enabled:
        parts.append(f"Consumo: {'Sí' if row.internal_consumption else 'No'}")
    parts.append(f"Obs: {row.observation or '-'}")
    return Text("  ".join(parts), style="dim")


def format_record(record: StoredRecord, index: int, columns: int) -> Text:
    """One stored record: id, the first ``columns`` times and the observation."""
    text = Text()
    text.append(f"{index + 1}. ")
    text.append(record.id, style="bold")
    text.append("\n      ")
    times = list(record.times[:columns]) + [None] * max(0, columns - len(record.times))
    for num, stamp in enumerate(times, start=1):
        if num > 1:
            text.append("  ")
        text.append(f"T{num} ", style="dim")
        text.append(stamp or "---", style="" if stamp else "dim")
    text.append("\n      ")
    text.append(f"Obs: {record.observation or '---'}", style="dim")
    return text
