"""Timer capture state machine and the other row-level actions.

Every function takes a ``Row`` and returns a new ``Row``; nothing is mutated
in place. ``now`` defaults to the current wall-clock stamp and can be passed
explicitly to replay a sequence of actions deterministically.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Iterable

from frontdesk.clock import new_row_id, now_timestamp
from frontdesk.constant import PAYMENT_METHODS, TABLE_TIMERS
from frontdesk.models import ItemTimer, PairTimer, Row, ScreenConfig, SingleTimer, TimerPair

log = logging.getLogger(__name__)


def new_row(screen: ScreenConfig, *, row_id: str | None = None, now: str | None = None, turn: str = "") -> Row:
    """Create a blank row shaped for the given screen."""
    stamp = now or now_timestamp()
    field_timers = {name: (stamp if name in screen.stamp_on_create else None) for name in screen.field_timers}
    return Row(
        id=row_id or new_row_id(),
        field_timers=field_timers,
        item_quantities={item: 0 for item in screen.items} if screen.track_quantities else {},
        item_timers={item: screen.empty_item_timer() for item in screen.items},
        assigned_turn=turn if screen.turn_enabled else "",
    )


def next_turn(rows: Iterable[Row]) -> str:
    """Follow on from the last row's turn label when it is numeric."""
    rows = list(rows)
    if not rows:
        return ""
    try:
        number = float(rows[-1].assigned_turn.strip())
    except ValueError:
        return ""
    if not math.isfinite(number):
        return ""
    number += 1
    return str(int(number)) if number.is_integer() else str(number)


def set_field(row: Row, field_name: str, now: str | None = None) -> Row:
    """Stamp a single-shot field timer; re-stamping overwrites."""
    return replace(row, field_timers={**row.field_timers, field_name: now or now_timestamp()})


def clear_field(row: Row, field_name: str) -> Row:
    if row.field_timers.get(field_name) is None:
        return row
    return replace(row, field_timers={**row.field_timers, field_name: None})


def _with_item_timer(row: Row, item: str, timer: ItemTimer) -> Row:
    return replace(row, item_timers={**row.item_timers, item: timer})


def toggle(row: Row, item: str, now: str | None = None) -> Row:
    """
    Advance the start/stop machine for one item.

    Idle -> Running records the start. Running -> Idle closes the interval
    into ``pairs``. A missing item starts out Idle.
    """
    timer = row.item_timers.get(item, PairTimer())
    if not isinstance(timer, PairTimer):
        log.debug("toggle ignored item=%s: not a pair timer", item)
        return row

    stamp = now or now_timestamp()
    if timer.current is None:
        return _with_item_timer(row, item, PairTimer(current=stamp, pairs=timer.pairs))
    closed = TimerPair(start=timer.current, end=stamp)
    return _with_item_timer(row, item, PairTimer(current=None, pairs=(*timer.pairs, closed)))


def remove_pair(row: Row, item: str, index: int) -> Row:
    """Drop one completed interval; a running start is left alone."""
    timer = row.item_timers.get(item)
    if not isinstance(timer, PairTimer):
        return row
    if not (0 <= index < len(timer.pairs)):
        return row
    pairs = timer.pairs[:index] + timer.pairs[index + 1 :]
    return _with_item_timer(row, item, PairTimer(current=timer.current, pairs=pairs))


def mark_item(row: Row, item: str, now: str | None = None) -> Row:
    """Stamp a single-timestamp item timer."""
    timer = row.item_timers.get(item, SingleTimer())
    if not isinstance(timer, SingleTimer):
        log.debug("mark ignored item=%s: not a single timer", item)
        return row
    return _with_item_timer(row, item, SingleTimer(stamp=now or now_timestamp()))


def press_item(row: Row, item: str, screen: ScreenConfig, now: str | None = None) -> Row:
    """Apply the screen's item action: toggle for pair capture, mark otherwise."""
    if screen.timer_shape == "pair":
        return toggle(row, item, now)
    return mark_item(row, item, now)


def clear_item(row: Row, item: str) -> Row:
    timer = row.item_timers.get(item)
    if timer is None:
        return row
    empty: ItemTimer = PairTimer() if isinstance(timer, PairTimer) else SingleTimer()
    return _with_item_timer(row, item, empty)


def set_quantity(row: Row, item: str, quantity: int) -> Row:
    return replace(row, item_quantities={**row.item_quantities, item: max(0, int(quantity))})


def set_payment_method(row: Row, method: str) -> Row:
    if method not in PAYMENT_METHODS:
        return row
    return replace(row, payment_method=method)


def cycle_payment_method(row: Row) -> Row:
    methods = list(PAYMENT_METHODS)
    try:
        idx = methods.index(row.payment_method)
    except ValueError:
        idx = -1
    return replace(row, payment_method=methods[(idx + 1) % len(methods)])


def set_internal_consumption(row: Row, value: bool) -> Row:
    """Set the consumption flag; switching it off clears both table timers."""
    if value:
        return replace(row, internal_consumption=True)
    timers = dict(row.field_timers)
    for name in TABLE_TIMERS:
        if name in timers:
            timers[name] = None
    return replace(row, internal_consumption=False, field_timers=timers)


def table_stamp_allowed(row: Row) -> bool:
    """Table timers may only be stamped for internal consumption."""
    return row.internal_consumption
