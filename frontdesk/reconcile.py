"""Merge an authoritative snapshot into the locally held rows."""

from __future__ import annotations

from typing import Iterable

from frontdesk.models import Row


def reconcile(local_rows: Iterable[Row], incoming_rows: Iterable[Row]) -> list[Row]:
    """
    Return the rows to display after a snapshot broadcast.

    The snapshot decides which rows exist and in what order. For each of its
    rows, a local row with the same id that is being edited is kept as-is;
    otherwise the snapshot's version is taken. Local rows missing from the
    snapshot are dropped. Repeated ids in the snapshot keep their first
    occurrence.
    """
    local_by_id = {row.id: row for row in local_rows}
    merged: list[Row] = []
    seen: set[str] = set()
    for incoming in incoming_rows:
        if incoming.id in seen:
            continue
        seen.add(incoming.id)
        local = local_by_id.get(incoming.id)
        merged.append(local if local is not None and local.is_editing else incoming)
    return merged
