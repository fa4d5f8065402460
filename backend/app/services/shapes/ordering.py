from __future__ import annotations

from typing import Any, Hashable, Iterable, Sequence


class ReorderPreconditionError(ValueError):
    """Desired order is not a permutation of the current shape ids."""


def distinguishable_order(priorities: Iterable[int]) -> list[int]:
    """Strictly increasing priorities derived from ``priorities``.

    A value is kept when it is greater than the previous chosen value,
    otherwise it becomes previous + 1.
    """
    out: list[int] = []
    for priority in priorities:
        if out and priority <= out[-1]:
            out.append(out[-1] + 1)
        else:
            out.append(priority)
    return out


def diff_by_key(old: Sequence[dict], new: Sequence[dict], key: str) -> list[dict]:
    """Compare two lists of records by ``key``.

    Returns ``added``/``changed`` entries in ``new`` order followed by
    ``removed`` entries in ``old`` order. Unchanged records are omitted.
    """
    old_by_key = {item[key]: item for item in old}
    new_keys = set()
    diff = []
    for item in new:
        k = item[key]
        new_keys.add(k)
        if k not in old_by_key:
            diff.append({"action": "added", "key": k, "value": item})
        elif old_by_key[k] != item:
            diff.append({"action": "changed", "key": k, "value": item, "old_value": old_by_key[k]})
    for item in old:
        if item[key] not in new_keys:
            diff.append({"action": "removed", "key": item[key], "value": item})
    return diff


def _as_pair(entry: Any) -> tuple[Hashable, int]:
    if isinstance(entry, dict):
        return entry["id"], int(entry.get("sort_priority") or 0)
    shape_id, priority = entry
    return shape_id, int(priority or 0)


def _check_permutation(current_ids: list, desired_ids: list) -> None:
    if len(set(desired_ids)) != len(desired_ids):
        raise ReorderPreconditionError("Order contains duplicate ids")
    missing = set(current_ids) - set(desired_ids)
    extra = set(desired_ids) - set(current_ids)
    if missing or extra:
        raise ReorderPreconditionError(
            f"Order does not match current shapes: missing={sorted(missing, key=str)} extra={sorted(extra, key=str)}"
        )


def reorder(current_order: Iterable[Any], desired_ids: Iterable[Hashable]) -> list[tuple[Hashable, int]]:
    """Priority updates that put the shapes in ``desired_ids`` order.

    ``current_order`` holds ``(id, sort_priority)`` pairs or shape dicts.
    Only shapes whose priority changes are returned, in desired order.
    """
    current = sorted((_as_pair(e) for e in current_order), key=lambda pair: pair[1])
    desired = list(desired_ids)
    _check_permutation([shape_id for shape_id, _ in current], desired)

    old = [{"id": shape_id, "sort_priority": priority} for shape_id, priority in current]
    priorities = distinguishable_order(priority for _, priority in current)
    new = [{"id": shape_id, "sort_priority": priority} for shape_id, priority in zip(desired, priorities)]

    return [
        (d["value"]["id"], d["value"]["sort_priority"])
        for d in diff_by_key(old, new, "id")
        if d["action"] == "changed"
    ]
