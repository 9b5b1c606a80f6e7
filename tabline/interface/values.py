#!/usr/bin/env python3
# tabline/interface/values.py
from __future__ import annotations

"""
Bound argument values.

A value is either a Literal (known at bind time) or a Deferred thunk that
is evaluated at most once, the first time somebody resolves it. Variable
references typed on the command line bind as Deferred lookups so that the
session is only consulted when a candidate provider actually asks.
"""

import inspect
from enum import Enum
from typing import Any, Callable, Union

_UNSET = object()


class Literal:
    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value

    def resolve(self) -> Any:
        return self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Literal) and other.value == self.value

    def __hash__(self) -> int:
        return hash(("Literal", repr(self.value)))

    def __repr__(self) -> str:
        return f"Literal({self.value!r})"


class Deferred:
    """Lazily computed value; the thunk runs once and the result is cached."""

    __slots__ = ("_thunk", "_value", "label")

    def __init__(self, thunk: Callable[[], Any], label: str = "") -> None:
        self._thunk = thunk
        self._value: Any = _UNSET
        self.label = label

    @property
    def evaluated(self) -> bool:
        return self._value is not _UNSET

    def resolve(self) -> Any:
        if self._value is _UNSET:
            self._value = self._thunk()
            self._thunk = None  # type: ignore[assignment]
        return self._value

    def __repr__(self) -> str:
        state = repr(self._value) if self.evaluated else "<pending>"
        return f"Deferred({self.label or '?'}={state})"


Value = Union[Literal, Deferred]


def resolve_value(value: Any) -> Any:
    """Resolve a Value; plain objects pass through unchanged."""
    if isinstance(value, (Literal, Deferred)):
        return value.resolve()
    return value


_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def coerce_value(raw: Any, value_type: Any) -> Any:
    """
    Convert typed text to `value_type`.

    Supported coercions:
        - str/Any/empty -> original text
        - bool -> '1,true,yes,y,on' / '0,false,no,n,off' (a leading '$' is ignored)
        - Enum subclasses -> member by name (case-insensitive) or by value
        - any other callable type -> value_type(raw)
        - lists -> element-wise
    Raises ValueError/TypeError when the text does not fit.
    """
    if isinstance(raw, (list, tuple)):
        return [coerce_value(item, value_type) for item in raw]
    if value_type in (None, str, Any, inspect.Parameter.empty) or not isinstance(raw, str):
        return raw
    if value_type is bool:
        lowered = raw.strip().lower().lstrip("$")
        if lowered in _BOOL_TRUE:
            return True
        if lowered in _BOOL_FALSE:
            return False
        raise ValueError(f"Expected boolean, got: {raw!r}")
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        for member in value_type:
            if member.name.lower() == raw.lower():
                return member
        for member in value_type:
            if str(member.value).lower() == raw.lower():
                return member
        raise ValueError(f"{raw!r} is not a valid {value_type.__name__}")
    if callable(value_type):
        return value_type(raw)
    return raw
