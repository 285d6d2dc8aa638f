"""In-memory ordered collection of open rows for one screen."""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass, replace
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from frontdesk.models import Row
from frontdesk.timers import set_internal_consumption

log = logging.getLogger(__name__)

# Attributes that identify or flag a row; they have dedicated operations.
_PROTECTED_PATHS = {"id", "is_editing"}


class _MissingPath(LookupError):
    pass


def _patch(target: Any, path: Sequence[str], value: Any) -> Any:
    """Return a copy of ``target`` with ``value`` at ``path``; untouched branches are shared."""
    if not path:
        return value
    head, rest = path[0], path[1:]

    if is_dataclass(target) and not isinstance(target, type):
        if head not in {f.name for f in fields(target)}:
            raise _MissingPath(head)
        return replace(target, **{head: _patch(getattr(target, head), rest, value)})

    if isinstance(target, Mapping):
        if rest and head not in target:
            raise _MissingPath(head)
        return {**target, head: _patch(target.get(head), rest, value)}

    if isinstance(target, tuple) and head.isdigit():
        idx = int(head)
        if idx >= len(target):
            raise _MissingPath(head)
        return target[:idx] + (_patch(target[idx], rest, value),) + target[idx + 1 :]

    raise _MissingPath(head)


class RowStore:
    """
    Ordered rows keyed by id.

    Every operation is total: an unknown id or path leaves the store as it
    was. Rows are immutable, so ``rows`` hands out a snapshot that later
    operations never alter.
    """

    def __init__(self, rows: Iterable[Row] = ()) -> None:
        self._rows: tuple[Row, ...] = ()
        self.replace_all(rows)

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def ids(self) -> list[str]:
        return [row.id for row in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __contains__(self, row_id: object) -> bool:
        return self.index_of(row_id) is not None

    def index_of(self, row_id: object) -> int | None:
        for idx, row in enumerate(self._rows):
            if row.id == row_id:
                return idx
        return None

    def get(self, row_id: str) -> Row | None:
        idx = self.index_of(row_id)
        return None if idx is None else self._rows[idx]

    def add(self, row: Row) -> bool:
        if row.id in self:
            log.debug("add ignored: duplicate id=%s", row.id)
            return False
        self._rows = (*self._rows, row)
        return True

    def remove(self, row_id: str) -> Row | None:
        idx = self.index_of(row_id)
        if idx is None:
            return None
        removed = self._rows[idx]
        self._rows = self._rows[:idx] + self._rows[idx + 1 :]
        return removed

    def _put(self, idx: int, row: Row) -> None:
        self._rows = self._rows[:idx] + (row,) + self._rows[idx + 1 :]

    def update_field(self, row_id: str, path: str, value: Any) -> bool:
        """Set a dotted path such as ``field_timers.arribo`` or ``item_timers.helados.current``."""
        idx = self.index_of(row_id)
        parts = [part for part in path.split(".") if part]
        if idx is None or not parts or parts[0] in _PROTECTED_PATHS:
            return False
        if parts == ["internal_consumption"]:
            self._put(idx, set_internal_consumption(self._rows[idx], bool(value)))
            return True
        try:
            updated = _patch(self._rows[idx], parts, value)
        except _MissingPath:
            log.debug("update_field ignored: id=%s path=%s", row_id, path)
            return False
        self._put(idx, updated)
        return True

    def apply(self, row_id: str, change: Callable[[Row], Row]) -> Row | None:
        """Replace a row with ``change(row)``; the id is kept whatever ``change`` returns."""
        idx = self.index_of(row_id)
        if idx is None:
            return None
        current = self._rows[idx]
        updated = change(current)
        if updated.id != current.id:
            updated = replace(updated, id=current.id)
        self._put(idx, updated)
        return updated

    def set_editing(self, row_id: str, editing: bool) -> bool:
        idx = self.index_of(row_id)
        if idx is None:
            return False
        row = self._rows[idx]
        if row.is_editing != editing:
            self._put(idx, replace(row, is_editing=editing))
        return True

    def replace_all(self, rows: Iterable[Row]) -> None:
        unique: dict[str, Row] = {}
        for row in rows:
            unique.setdefault(row.id, row)
        self._rows = tuple(unique.values())
