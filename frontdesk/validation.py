"""Pre-submission coherence rules and the persisted record shape."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from frontdesk.clock import weekday_name
from frontdesk.constant import TABLE_TIMERS
from frontdesk.data import field_label, item_label
from frontdesk.models import ItemTimer, PairTimer, Row, ScreenConfig, SingleTimer
from frontdesk.wire import pair_to_wire


class FailureReason(str, Enum):
    MISSING_REQUIRED_TIMERS = "missing_required_timers"
    NO_ITEMS = "no_items"
    NO_PREPARATION = "no_preparation"
    QUANTITY_WITHOUT_TIMER = "quantity_without_timer"
    TIMER_WITHOUT_QUANTITY = "timer_without_quantity"
    TABLE_TIMERS_MISSING = "table_timers_missing"
    TABLE_TIMERS_NOT_ALLOWED = "table_timers_not_allowed"


@dataclass(frozen=True)
class Accepted:
    ok = True


@dataclass(frozen=True)
class ValidationFailure:
    """Why a row cannot be submitted yet. ``item`` names the offending item, if any."""

    reason: FailureReason
    message: str
    item: str | None = None
    ok = False


ValidationResult = Accepted | ValidationFailure

ACCEPTED = Accepted()


def _timer_recorded(timer: ItemTimer | None) -> bool:
    """An item counts as timed once it has a stamp or a completed interval."""
    if isinstance(timer, PairTimer):
        return bool(timer.pairs)
    if isinstance(timer, SingleTimer):
        return timer.stamp is not None
    return False


def _timer_present(timer: ItemTimer | None) -> bool:
    """Any trace of timing, including a start that was never stopped."""
    if isinstance(timer, PairTimer):
        return bool(timer.pairs) or timer.current is not None
    return _timer_recorded(timer)


def _items_of(row: Row, screen: ScreenConfig) -> list[str]:
    items = list(screen.items)
    for item in (*row.item_quantities, *row.item_timers):
        if item not in items:
            items.append(item)
    return items


def _check_required_timers(row: Row, screen: ScreenConfig) -> ValidationFailure | None:
    missing = [name for name in screen.required_field_timers if row.field_timers.get(name) is None]
    if not missing:
        return None
    labels = ", ".join(field_label(name) for name in missing)
    return ValidationFailure(
        FailureReason.MISSING_REQUIRED_TIMERS,
        f"Faltan tiempos: registra todos los tiempos requeridos ({labels}).",
    )


def _check_any_item(row: Row, screen: ScreenConfig) -> ValidationFailure | None:
    if not screen.track_quantities:
        return None
    if any(row.quantity(item) > 0 for item in _items_of(row, screen)):
        return None
    return ValidationFailure(FailureReason.NO_ITEMS, "Indica la cantidad de al menos un producto.")


def _check_any_preparation(row: Row, screen: ScreenConfig) -> ValidationFailure | None:
    if screen.timer_shape != "pair":
        return None
    timers = [row.timer(item) for item in _items_of(row, screen)]
    if any(isinstance(t, PairTimer) and t.pairs for t in timers):
        return None
    return ValidationFailure(
        FailureReason.NO_PREPARATION,
        "Faltan tiempos de preparación: registra al menos un par de tiempos para algún producto.",
    )


def _check_quantity_coherence(row: Row, screen: ScreenConfig) -> ValidationFailure | None:
    if not screen.track_quantities:
        return None
    for item in _items_of(row, screen):
        timer = row.timer(item)
        if row.quantity(item) > 0 and not _timer_recorded(timer):
            return ValidationFailure(
                FailureReason.QUANTITY_WITHOUT_TIMER,
                f"{item_label(item)} tiene cantidad pero no tiene tiempo registrado.",
                item=item,
            )
        if row.quantity(item) == 0 and _timer_present(timer):
            return ValidationFailure(
                FailureReason.TIMER_WITHOUT_QUANTITY,
                f"{item_label(item)} tiene tiempo registrado pero su cantidad es cero.",
                item=item,
            )
    return None


def _check_table_coherence(row: Row, screen: ScreenConfig) -> ValidationFailure | None:
    if not screen.table_rules_enabled:
        return None
    stamped = [row.field_timers.get(name) is not None for name in TABLE_TIMERS]
    if row.internal_consumption and not all(stamped):
        return ValidationFailure(
            FailureReason.TABLE_TIMERS_MISSING,
            "Como el cliente consume en el local, registra los tiempos de ocupar y liberar la mesa.",
        )
    if not row.internal_consumption and any(stamped):
        return ValidationFailure(
            FailureReason.TABLE_TIMERS_NOT_ALLOWED,
            "La mesa no es para consumo interno, no debe tener tiempos asignados.",
        )
    return None


_RULES = (
    _check_required_timers,
    _check_any_item,
    _check_any_preparation,
    _check_quantity_coherence,
    _check_table_coherence,
)


def validate(row: Row, screen: ScreenConfig) -> ValidationResult:
    """Run the submission rules in order; the first failure wins."""
    for rule in _RULES:
        failure = rule(row, screen)
        if failure is not None:
            return failure
    return ACCEPTED


def _persisted_field(name: str, row: Row) -> str | None:
    value = row.field_timers.get(name)
    if name in TABLE_TIMERS:
        return value or ""
    return value


def _persisted_item(timer: ItemTimer | None, screen: ScreenConfig) -> Any:
    if screen.timer_shape == "pair":
        return [pair_to_wire(p) for p in timer.pairs] if isinstance(timer, PairTimer) else []
    return timer.stamp if isinstance(timer, SingleTimer) else None


def build_persisted_payload(row: Row, screen: ScreenConfig, today: date | None = None) -> dict[str, Any]:
    """
    Build the ``guardar`` record for an accepted row.

    Drops the id, the editing flag and the UI-only description and turn
    label; stamps the weekday of ``today``.
    """
    data: dict[str, Any] = {"diaSemana": weekday_name(today or date.today())}
    if screen.table_rules_enabled:
        data["consumoInterno"] = row.internal_consumption

    timers = {name: _persisted_field(name, row) for name in screen.field_timers}
    if screen.layout == "nested":
        data["tiempos"] = timers
    else:
        data.update(timers)

    if screen.track_quantities:
        key = "tiempos" if screen.timer_shape == "pair" else "tiempo"
        data["pedido"] = {
            item: {"cantidad": row.quantity(item), key: _persisted_item(row.timer(item), screen)}
            for item in screen.items
        }
    else:
        for item in screen.items:
            data[item] = _persisted_item(row.timer(item), screen)

    if screen.payment_enabled:
        data["metodoPago"] = row.payment_method
    data["observacion"] = row.observation
    return data
