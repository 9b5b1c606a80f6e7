# tests/test_values.py
from __future__ import annotations

import pytest

from tabline.interface.values import Deferred, Literal, coerce_value, resolve_value

from .conftest import Color


def test_deferred_runs_thunk_once():
    calls = []

    def thunk():
        calls.append(1)
        return 42

    value = Deferred(thunk, label="$answer")
    assert "pending" in repr(value)
    assert value.resolve() == 42
    assert value.resolve() == 42
    assert calls == [1]


def test_resolve_value_passes_plain_objects_through():
    assert resolve_value(Literal("a")) == "a"
    assert resolve_value("plain") == "plain"


@pytest.mark.parametrize("raw, value_type, expected", [
    ("5", int, 5),
    ("2.5", float, 2.5),
    ("$true", bool, True),
    ("off", bool, False),
    ("green", Color, Color.Green),
    ("Blue", Color, Color.Blue),
    (["1", "2"], int, [1, 2]),
    ("text", str, "text"),
    (7, int, 7),
])
def test_coerce_value(raw, value_type, expected):
    assert coerce_value(raw, value_type) == expected


@pytest.mark.parametrize("raw, value_type", [("maybe", bool), ("Purple", Color), ("x", int)])
def test_coerce_value_rejects_bad_text(raw, value_type):
    with pytest.raises(ValueError):
        coerce_value(raw, value_type)
