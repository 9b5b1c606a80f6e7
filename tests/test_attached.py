# tests/test_attached.py
from __future__ import annotations

import pytest

from tabline.commands import MemberKind, TypeRegistry, owner_type
from tabline.interface.attached import find_member, split_attached_name, try_merge_attached_member
from tabline.interface.diagnostics import DiagnosticKind

from .conftest import Dock, elements_of


def merge(text: str, types, diagnostics=None):
    elements = elements_of(text)
    return try_merge_attached_member(
        elements[1], elements[2], types,
        value=elements[3] if len(elements) > 3 else None,
        diagnostics=diagnostics,
    )


def test_dot_and_double_colon_forms(types):
    for text in ("x -Grid.Row 3", "x -Grid::Row 3"):
        match = merge(text, types)
        assert match is not None
        assert match.name == "Grid.Row"
        assert match.member_kind is MemberKind.PROPERTY
        assert match.raw_value == "3"
        assert match.coerced_value == 3
        assert match.consumed_value


def test_inline_value_is_not_consumed_from_next_element(types):
    match = merge("x -Grid.Row:4 other", types)
    assert match.raw_value == "4"
    assert match.coerced_value == 4
    assert not match.consumed_value


def test_owner_by_full_and_short_name(types):
    assert merge("x -Demo.Controls.Grid.Row 1", types).owner_type.name == "Grid"
    match = merge("x -Dock.Dock left", types)
    assert match.owner_type.name == "DockPanel"
    assert match.coerced_value is Dock.Left


def test_requires_adjacency(types):
    elements = elements_of("x -Grid .Row 1")
    assert try_merge_attached_member(elements[1], elements[2], types, value=elements[3]) is None


def test_unknown_owner_or_member(types):
    assert merge("x -Panel.Row 1", types) is None
    assert merge("x -Grid.Height 1", types) is None


def test_member_without_value(types):
    match = merge("x -Grid.IsSharedSizeScope", types)
    assert match.raw_value is None
    assert not match.consumed_value


def test_coercion_failure_keeps_raw_text(types):
    diagnostics = []
    match = merge("x -Grid.Row two", types, diagnostics)
    assert match.coerced_value == "two"
    assert [d.kind for d in diagnostics] == [DiagnosticKind.COERCION_FAILURE]


def test_ambiguous_member_needs_kind_suffix(types):
    diagnostics = []
    assert merge("x -Validation.Error e", types, diagnostics) is None
    assert diagnostics[0].kind is DiagnosticKind.AMBIGUOUS_ATTACHED_MEMBER

    event = merge("x -Validation.ErrorEvent e", types)
    assert event.member_kind is MemberKind.EVENT
    assert event.name == "Validation.Error"


def test_find_member_is_case_insensitive(types):
    grid = types.resolve("grid")
    assert find_member(grid, "rowspan").name == "RowSpan"


@pytest.mark.parametrize("text, expected", [
    ("Grid.Row", ("Grid", "Row")),
    ("Grid::Ro", ("Grid", "Ro")),
    ("Demo.Controls.Grid.", ("Demo.Controls.Grid", "")),
    ("Grid", None),
    (".Row", None),
])
def test_split_attached_name(text, expected):
    assert split_attached_name(text) == expected


def test_type_registry_rejects_collisions():
    reg = TypeRegistry()
    owner_type("Grid", namespace="A", registry=reg, short_names=("G",))
    with pytest.raises(ValueError):
        owner_type("Grid", namespace="A", registry=reg)
    with pytest.raises(ValueError):
        owner_type("Other", registry=reg, short_names=("g",))


def test_simple_name_must_be_unique():
    reg = TypeRegistry()
    owner_type("Grid", namespace="A", registry=reg)
    owner_type("Grid", namespace="B", registry=reg)
    assert reg.resolve("Grid") is None
    assert reg.resolve("b.grid").namespace == "B"


def test_members_of(types):
    assert [m.name for m in types.members_of("Dock")] == ["Dock"]
    assert types.members_of("Nothing") == []
    assert types.names() == ["Dock", "DockPanel", "Grid", "Validation"]
