"""Domain models for the front-desk capture terminal."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from frontdesk.constant import DEFAULT_PAYMENT_METHOD


@dataclass(frozen=True)
class TimerPair:
    """One completed start/stop interval."""

    start: str
    end: str


@dataclass(frozen=True)
class SingleTimer:
    """Item stamped once when it is ordered."""

    stamp: str | None = None

    @property
    def is_set(self) -> bool:
        return self.stamp is not None


@dataclass(frozen=True)
class PairTimer:
    """Start/stop capture: Idle while current is None, Running otherwise."""

    current: str | None = None
    pairs: tuple[TimerPair, ...] = ()

    @property
    def is_running(self) -> bool:
        return self.current is not None

    @property
    def is_set(self) -> bool:
        return bool(self.pairs)


ItemTimer = SingleTimer | PairTimer


@dataclass(frozen=True)
class Row:
    """One open, not-yet-persisted customer/ticket row."""

    id: str
    description: str = ""
    field_timers: Mapping[str, str | None] = field(default_factory=dict)
    item_quantities: Mapping[str, int] = field(default_factory=dict)
    item_timers: Mapping[str, ItemTimer] = field(default_factory=dict)
    payment_method: str = DEFAULT_PAYMENT_METHOD
    assigned_turn: str = ""
    internal_consumption: bool = False
    observation: str = ""
    is_editing: bool = False

    def quantity(self, item: str) -> int:
        return int(self.item_quantities.get(item, 0))

    def timer(self, item: str) -> ItemTimer | None:
        return self.item_timers.get(item)


@dataclass(frozen=True)
class ScreenConfig:
    """Everything that distinguishes one capture screen from another."""

    name: str
    title: str
    field_timers: tuple[str, ...]
    required_field_timers: tuple[str, ...]
    stamp_on_create: tuple[str, ...]
    items: tuple[str, ...]
    timer_shape: str
    track_quantities: bool
    table_rules_enabled: bool
    payment_enabled: bool
    turn_enabled: bool
    layout: str

    @property
    def collection(self) -> str:
        return self.name

    def empty_item_timer(self) -> ItemTimer:
        if self.timer_shape == "pair":
            return PairTimer()
        return SingleTimer()


@dataclass(frozen=True)
class StoredRecord:
    """A submitted row as the backend lists it under ``/registros``."""

    id: str
    times: tuple[str | None, ...] = ()
    observation: str = ""
