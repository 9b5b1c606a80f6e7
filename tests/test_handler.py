# tests/test_handler.py
from __future__ import annotations

import pytest

from tabline.interface.handler import format_command_help, handle_line, list_categories


def run(line, registry, types, variables=None):
    return handle_line(line, registry=registry, types=types, variables=variables)


def test_runs_bound_command(registry, types):
    assert run("Get-Thing widget 3 -Color green", registry, types) == "widget:3:Green:False"
    assert run("gt w -Verbose", registry, types) == "w:1:-:True"
    assert run("Get-Thing -Count:7 -Name 'a b'", registry, types) == "a b:7:-:False"


def test_blank_line_prints_nothing(registry, types):
    assert run("   ", registry, types) is None
    assert run("# only a comment", registry, types) is None


def test_variables_are_assigned_and_resolved(registry, types):
    variables = {}
    assert run("$n = 5; Get-Thing a $n", registry, types, variables) == "a:5:-:False"
    assert variables == {"n": 5}
    run("$names = x, y", registry, types, variables)
    assert variables["names"] == ["x", "y"]


def test_binding_errors_show_usage(registry, types):
    output = run("Get-Thing -Bogus 1", registry, types)
    assert output.startswith("[error] A parameter cannot be found")
    assert "Usage: Get-Thing [-Name] <str>" in output
    assert run("Get-Thing a b c", registry, types).startswith("[error] Too many positional arguments.")


def test_unknown_command_suggests_similar(registry, types):
    output = run("Get-Thingz", registry, types)
    assert output.startswith("[error] Unknown command: Get-Thingz.")
    assert "Did you mean: Get-Thing" in output


def test_chaining(registry, types):
    assert run("Get-Thingz || Get-Thing a", registry, types).splitlines()[-1] == "a:1:-:False"
    assert run("Get-Thingz && Get-Thing a", registry, types).count("\n") == 0
    assert run("Get-Thing a; Get-Thing b", registry, types) == "a:1:-:False\nb:1:-:False"


def test_operator_errors(registry, types):
    assert run("&& Get-Thing", registry, types) == "[error] Syntax: operator '&&' missing a command."
    assert run("Get-Thing a | Get-Thing b", registry, types) == "[error] Unsupported operator: |"
    assert run("Get-Thing 'open", registry, types).startswith("[error] Syntax: Unterminated string")


def test_command_exception_is_reported(registry, types):
    assert run("Fail-Thing", registry, types) == "[error] RuntimeError: boom"
    assert run("Fail-Thing -Reason nope", registry, types) == "[error] RuntimeError: nope"


def test_attached_members_reach_var_keyword(registry, types):
    output = run("Place-Item box -Grid.Row 2 -DockPanel.Dock left", registry, types)
    assert output.startswith("box ")
    assert "Grid.Row=2" in output
    assert "DockPanel.Dock=<Dock.Left" in output


def test_attached_members_rejected_without_var_keyword(registry, types):
    output = run("Get-Thing a -Grid.Row 2", registry, types)
    assert output.startswith("[error] Get-Thing does not accept attached members (Grid.Row)")


def test_exit_raises_system_exit(registry, types):
    with pytest.raises(SystemExit):
        run("exit", registry, types)


def test_help(registry, types):
    overview = run("help", registry, types)
    assert "general" in overview
    assert "broken" in overview
    assert overview == list_categories(registry)

    detail = format_command_help("gt", registry)
    assert "Name:        Get-Thing" in detail
    assert "Aliases:     gt" in detail
    assert "Usage:       Get-Thing [-Name] <str> [-Count] <int> [-Color <color>] [-Verbose]" in detail
    assert "-Colour" not in detail
    assert "Colour" in detail

    assert "Fail-Thing" in format_command_help("broken", registry)
    assert format_command_help("nothing", registry) == "No such command or category: nothing"


def test_stray_comma_is_a_syntax_error(registry, types):
    assert run(",", registry, types) == "[error] Syntax: missing command before ','."
    assert run(", ; Get-Thing a", registry, types).splitlines() == [
        "[error] Syntax: missing command before ','.", "a:1:-:False"]
