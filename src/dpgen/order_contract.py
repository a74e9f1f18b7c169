"""Deterministic ordering for sorted emission and JSON payloads."""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from dpgen.invariants import never
from dpgen.json_types import JSONValue


T = TypeVar("T")


def sort_once(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> list[T]:
    items = list(values)
    try:
        return sorted(items, key=key, reverse=reverse)
    except TypeError as exc:
        never("incomparable sort keys", source=source, error=str(exc))


def canonical_payload(value: JSONValue) -> JSONValue:
    """Return `value` with every object's keys in sorted order.

    Arrays keep their order; it carries meaning (report order, source order).
    """
    if isinstance(value, dict):
        return {
            key: canonical_payload(value[key])
            for key in sort_once(value, source="payload.keys")
        }
    if isinstance(value, list):
        return [canonical_payload(item) for item in value]
    return value
