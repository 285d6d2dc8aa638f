"""Codec between ``Row`` and the dict shape carried on the backend channel."""

from __future__ import annotations

from typing import Any, Mapping

from frontdesk.constant import DEFAULT_PAYMENT_METHOD, PAYMENT_METHODS
from frontdesk.models import ItemTimer, PairTimer, Row, ScreenConfig, SingleTimer, TimerPair

ITEMS_KEY = "pedido"


def pair_to_wire(pair: TimerPair) -> dict[str, str]:
    return {"inicio": pair.start, "fin": pair.end}


def item_timer_to_wire(timer: ItemTimer) -> Any:
    if isinstance(timer, PairTimer):
        return {"current": timer.current, "pairs": [pair_to_wire(p) for p in timer.pairs]}
    return timer.stamp


def _stamp(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _pairs_from_wire(raw: Any) -> tuple[TimerPair, ...]:
    if not isinstance(raw, list):
        return ()
    pairs: list[TimerPair] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        start, end = _stamp(entry.get("inicio")), _stamp(entry.get("fin"))
        if start is None or end is None:
            continue
        pairs.append(TimerPair(start=start, end=end))
    return tuple(pairs)


def item_timer_from_wire(raw: Any, timer_shape: str) -> ItemTimer:
    if timer_shape == "pair":
        if not isinstance(raw, Mapping):
            return PairTimer()
        return PairTimer(current=_stamp(raw.get("current")), pairs=_pairs_from_wire(raw.get("pairs")))
    return SingleTimer(stamp=_stamp(raw))


def _quantity(raw: Any) -> int:
    try:
        return max(0, int(raw))
    except (TypeError, ValueError):
        return 0


def row_to_wire(row: Row, screen: ScreenConfig) -> dict[str, Any]:
    """Encode a row for nuevo/actualizar intents. The editing flag is never encoded."""
    timers: dict[str, Any] = {name: row.field_timers.get(name) for name in screen.field_timers}
    for name, value in row.field_timers.items():
        timers.setdefault(name, value)
    if screen.items or row.item_timers:
        items = {item: item_timer_to_wire(row.item_timers.get(item, screen.empty_item_timer())) for item in screen.items}
        for item, timer in row.item_timers.items():
            items.setdefault(item, item_timer_to_wire(timer))
        timers[ITEMS_KEY] = items

    data: dict[str, Any] = {"id": row.id, "descripcion": row.description, "tiempos": timers}
    if screen.track_quantities:
        data["cantidades"] = {item: row.quantity(item) for item in screen.items}
        for item, qty in row.item_quantities.items():
            data["cantidades"].setdefault(item, qty)
    if screen.payment_enabled:
        data["metodoPago"] = row.payment_method
    if screen.turn_enabled:
        data["turnoAsignado"] = row.assigned_turn
    if screen.table_rules_enabled:
        data["consumoInterno"] = row.internal_consumption
    data["observacion"] = row.observation
    return data


def row_from_wire(data: Mapping[str, Any], screen: ScreenConfig) -> Row:
    """Decode a broadcast row. Missing or malformed parts fall back to blank values."""
    raw_timers = data.get("tiempos")
    if not isinstance(raw_timers, Mapping):
        raw_timers = {}

    field_timers: dict[str, str | None] = {name: _stamp(raw_timers.get(name)) for name in screen.field_timers}
    for name, value in raw_timers.items():
        if name != ITEMS_KEY and name not in field_timers:
            field_timers[name] = _stamp(value)

    raw_items = raw_timers.get(ITEMS_KEY)
    if not isinstance(raw_items, Mapping):
        raw_items = {}
    item_timers: dict[str, ItemTimer] = {
        item: item_timer_from_wire(raw_items.get(item), screen.timer_shape) for item in screen.items
    }
    for item, raw in raw_items.items():
        if item not in item_timers:
            item_timers[item] = item_timer_from_wire(raw, screen.timer_shape)

    quantities: dict[str, int] = {}
    if screen.track_quantities:
        raw_quantities = data.get("cantidades")
        if not isinstance(raw_quantities, Mapping):
            raw_quantities = {}
        quantities = {item: _quantity(raw_quantities.get(item, 0)) for item in screen.items}
        for item, raw in raw_quantities.items():
            quantities.setdefault(item, _quantity(raw))

    payment = data.get("metodoPago", DEFAULT_PAYMENT_METHOD)
    if payment not in PAYMENT_METHODS:
        payment = DEFAULT_PAYMENT_METHOD

    turn = data.get("turnoAsignado", "")
    return Row(
        id=str(data["id"]),
        description=str(data.get("descripcion") or ""),
        field_timers=field_timers,
        item_quantities=quantities,
        item_timers=item_timers,
        payment_method=payment,
        assigned_turn="" if turn is None else str(turn),
        internal_consumption=bool(data.get("consumoInterno", False)),
        observation=str(data.get("observacion") or ""),
    )


def rows_from_wire(payload: Any, screen: ScreenConfig) -> list[Row]:
    """Decode a snapshot; entries without an id are skipped."""
    if not isinstance(payload, list):
        return []
    rows: list[Row] = []
    for entry in payload:
        if not isinstance(entry, Mapping) or entry.get("id") in (None, ""):
            continue
        rows.append(row_from_wire(entry, screen))
    return rows


def wire_fields(row: Row, screen: ScreenConfig, *keys: str) -> dict[str, Any]:
    """Partial wire data for an ``actualizar`` intent."""
    full = row_to_wire(row, screen)
    return {key: full[key] for key in keys if key in full}
