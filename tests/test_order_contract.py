from __future__ import annotations

import json

import pytest

from dpgen.exceptions import NeverThrown
from dpgen.order_contract import canonical_payload, sort_once


def test_sort_once_sorts_by_key() -> None:
    assert sort_once(["b", "A", "c"], source="test", key=str.lower) == ["A", "b", "c"]
    assert sort_once([1, 3, 2], source="test", reverse=True) == [3, 2, 1]


def test_sort_once_rejects_incomparable_keys() -> None:
    with pytest.raises(NeverThrown) as excinfo:
        sort_once([1, "a"], source="mixed")
    assert excinfo.value.env["source"] == "mixed"


def test_canonical_payload_sorts_object_keys_and_keeps_arrays() -> None:
    payload = {
        "errors": [],
        "admitted": ["Goodies.Widget.Foo", "Goodies.Gauge.Level"],
        "diagnostics": [{"message": "m", "code": "DPG1001"}],
    }
    canonical = canonical_payload(payload)
    assert list(canonical) == ["admitted", "diagnostics", "errors"]
    assert canonical["admitted"] == ["Goodies.Widget.Foo", "Goodies.Gauge.Level"]
    assert list(canonical["diagnostics"][0]) == ["code", "message"]
    assert json.dumps(canonical) == json.dumps(payload, sort_keys=True)
