"""Typed screen configuration and label lookups."""

from __future__ import annotations

from frontdesk.constant import (
    FIELD_TIMER_LABELS,
    ITEM_LABELS,
    PAYMENT_METHODS,
    SCREENS as _SCREENS_RAW,
    TABLE_TIMERS,
)
from frontdesk.models import ScreenConfig

_TIMER_SHAPES = {"single", "pair"}
_LAYOUTS = {"flat", "nested"}


def _build_screen(name: str, raw: dict[str, object]) -> ScreenConfig:
    field_timers = tuple(raw["field_timers"])  # type: ignore[arg-type]
    required = tuple(raw["required_field_timers"])  # type: ignore[arg-type]
    stamp_on_create = tuple(raw["stamp_on_create"])  # type: ignore[arg-type]

    unknown = [f for f in (*required, *stamp_on_create) if f not in field_timers]
    if unknown:
        raise ValueError(f"Screen {name!r} references undeclared timers: {', '.join(unknown)}")
    if raw["timer_shape"] not in _TIMER_SHAPES:
        raise ValueError(f"Screen {name!r} has unknown timer_shape {raw['timer_shape']!r}")
    if raw["layout"] not in _LAYOUTS:
        raise ValueError(f"Screen {name!r} has unknown layout {raw['layout']!r}")
    if raw["table_rules_enabled"] and not all(t in field_timers for t in TABLE_TIMERS):
        raise ValueError(f"Screen {name!r} enables table rules without table timers")

    return ScreenConfig(
        name=name,
        title=str(raw["title"]),
        field_timers=field_timers,
        required_field_timers=required,
        stamp_on_create=stamp_on_create,
        items=tuple(raw["items"]),  # type: ignore[arg-type]
        timer_shape=str(raw["timer_shape"]),
        track_quantities=bool(raw["track_quantities"]),
        table_rules_enabled=bool(raw["table_rules_enabled"]),
        payment_enabled=bool(raw["payment_enabled"]),
        turn_enabled=bool(raw["turn_enabled"]),
        layout=str(raw["layout"]),
    )


SCREEN_CONFIGS: dict[str, ScreenConfig] = {name: _build_screen(name, raw) for name, raw in _SCREENS_RAW.items()}

SCREEN_NAMES: list[str] = list(SCREEN_CONFIGS)


def screen_config(name: str) -> ScreenConfig:
    """Get the configuration for a screen name; raises KeyError when unknown."""
    return SCREEN_CONFIGS[name]


def field_label(field_name: str) -> str:
    return FIELD_TIMER_LABELS.get(field_name, field_name)


def item_label(item: str) -> str:
    return ITEM_LABELS.get(item, item.title())


def payment_label(method: str) -> str:
    return PAYMENT_METHODS.get(method, method)
