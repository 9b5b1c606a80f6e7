# tests/test_commands.py
from __future__ import annotations

import pytest

from tabline.commands import (
    Command,
    CommandRegistry,
    CommandResult,
    MetadataUnavailableError,
    PoolRequest,
    command,
    describe_signature,
    register_command,
)
from tabline.interface.values import Deferred

from .conftest import Color, get_thing


def test_describe_signature():
    descriptors = describe_signature(get_thing, aliases={"Color": ("Colour",)})
    by_name = {d.name: d for d in descriptors}
    assert list(by_name) == ["Name", "Count", "Color", "Verbose"]
    assert by_name["Name"].position == 0
    assert by_name["Count"].position == 1
    assert by_name["Count"].value_type is int
    assert by_name["Color"].position is None
    assert by_name["Color"].value_type is Color
    assert by_name["Color"].aliases == frozenset({"Colour"})
    assert by_name["Verbose"].is_switch
    assert by_name["Verbose"].keyword == "verbose"


def test_decorator_derives_verb_noun_name(registry):
    command_obj = registry.get("get-thing")
    assert command_obj.name == "Get-Thing"
    assert command_obj.category == "general"
    assert registry.get("GT") is command_obj
    assert registry.get("Fail-Thing").category == "broken"
    assert registry.get("Place-Item").description == "Place an item with attached members."


def test_names_and_categories(registry):
    assert registry.names() == ["Get-Thing", "Place-Item", "Fail-Thing", "gt"]
    assert sorted(registry.categories()) == ["broken", "general"]


def test_registry_rejects_collisions(registry):
    with pytest.raises(ValueError):
        registry.register(Command("get-thing", "", "", callback=lambda: None))
    with pytest.raises(ValueError):
        registry.register(Command("Other", "", "", callback=lambda: None, aliases=["Place-Item"]))


def test_registry_is_a_metadata_source(registry):
    assert [d.name for d in registry.describe_command("gt")][:2] == ["Name", "Count"]
    with pytest.raises(MetadataUnavailableError):
        registry.describe_command("Nope")


def test_command_lookup_helpers(registry):
    command_obj = registry.get("Get-Thing")
    assert command_obj.parameter("COLOR").name == "Color"
    assert command_obj.parameter("nope") is None
    assert command_obj.completer_for("name") is not None
    assert command_obj.completer_for("Color") is None


def test_pool_request_bound_resolves_values():
    request = PoolRequest("Cmd", "Name", fake_bound={"Color": Deferred(lambda: "Red")})
    assert request.bound("color") == "Red"
    assert request.bound("missing", "default") == "default"


def test_command_result_str():
    assert str(CommandResult(ok=True, message="done")) == "done"
    assert str(CommandResult(ok=False)) == "error"


def test_explicit_name_and_category():
    reg = CommandRegistry()

    def handler() -> str:
        return "ok"

    command(name="Invoke-It", category="misc", example="Invoke-It", registry=reg)(handler)
    command_obj = reg.get("invoke-it")
    assert command_obj.invoke() == "ok"
    assert command_obj.example == "Invoke-It"
    assert command_obj.parameters == []


def test_register_prebuilt_command():
    reg = CommandRegistry()
    register_command(Command("Ping", "Reply with pong.", "Ping", callback=lambda: "pong", aliases=["p"]), reg)
    assert reg.get("P").invoke() == "pong"
