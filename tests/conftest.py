# tests/conftest.py
from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

import pytest

from tabline.commands import CommandRegistry, PoolItem, PoolRequest, TypeRegistry, command, owner_type
from tabline.interface.tokenizer import CommandElement, command_elements, tokenize


class Color(Enum):
    Red = "Red"
    Green = "Green"
    Blue = "Blue"


class Dock(Enum):
    Left = "Left"
    Top = "Top"
    Right = "Right"
    Bottom = "Bottom"


WIDGETS = ["alpha", "beta", "beta two", "gamma"]


def _complete_name(request: PoolRequest) -> Iterator[PoolItem]:
    wanted = request.bound("Color")
    for widget in WIDGETS:
        if wanted and widget != "alpha":
            continue
        yield PoolItem(widget, tooltip=f"widget {widget}")


def get_thing(name: str | None = None, count: int = 1, *, color: Color | None = None,
              verbose: bool = False) -> str:
    return f"{name}:{count}:{color.name if color else '-'}:{verbose}"


def place_item(name: str, **attached: Any) -> str:
    members = ",".join(f"{key}={value!r}" for key, value in sorted(attached.items()))
    return f"{name} {members}".strip()


def fail_thing(reason: str = "boom") -> str:
    raise RuntimeError(reason)


@pytest.fixture
def registry() -> CommandRegistry:
    reg = CommandRegistry()
    command(registry=reg, aliases=["gt"], completers={"Name": _complete_name},
            parameter_aliases={"Color": ("Colour",)})(get_thing)
    command(registry=reg, description="Place an item with attached members.")(place_item)
    command(registry=reg, category="broken")(fail_thing)
    return reg


@pytest.fixture
def types() -> TypeRegistry:
    reg = TypeRegistry()
    owner_type("Grid", namespace="Demo.Controls", registry=reg,
               properties={"Row": int, "Column": int, "RowSpan": int, "IsSharedSizeScope": bool})
    owner_type("DockPanel", namespace="Demo.Controls", registry=reg,
               properties={"Dock": Dock}, short_names=("Dock",))
    owner_type("Validation", namespace="Demo.Controls", registry=reg,
               properties={"HasError": bool, "Error": str}, events={"Error": str})
    return reg


def elements_of(text: str) -> list[CommandElement]:
    """Command elements of a single-statement line."""
    return command_elements(tokenize(text, strict=False))
