# tests/test_completion.py
from __future__ import annotations

import time

from tabline.commands import CommandRegistry, PoolRequest, command
from tabline.interface.completion import complete, suggest
from tabline.interface.diagnostics import DiagnosticKind
from tabline.interface.ranking import CompletionCategory


def run(text, registry, types, cursor=None, **options):
    return complete(text, cursor, registry=registry, types=types, **options)


def test_command_names_include_aliases_and_builtins(registry, types):
    result = run("Get-T", registry, types)
    assert result.texts() == ["Get-Thing"]
    assert result.candidates[0].category is CompletionCategory.COMMAND
    assert (result.replacement_start, result.replacement_length) == (0, 5)
    assert "gt" in run("g", registry, types).texts()
    assert "help" in run("he", registry, types).texts()


def test_empty_line_offers_everything(registry, types):
    texts = run("", registry, types).texts()
    assert {"Get-Thing", "Place-Item", "exit"} <= set(texts)


def test_help_target(registry, types):
    result = run("help Ge", registry, types)
    assert result.texts() == ["general", "Get-Thing"]
    assert "broken" in run("help b", registry, types).texts()


def test_parameter_names_after_lone_dash(registry, types):
    result = run("Get-Thing -", registry, types)
    assert result.texts() == ["-Color", "-Count", "-Name", "-Verbose"]
    assert result.replacement_start == 10
    assert result.candidates[0].category is CompletionCategory.PARAMETER_NAME
    assert result.diagnostics == []


def test_parameter_names_skip_bound_parameters(registry, types):
    result = run("Get-Thing -Count 2 -C", registry, types)
    assert result.texts() == ["-Color"]
    assert (result.replacement_start, result.replacement_length) == (19, 2)


def test_parameter_name_under_cursor_is_offered_again(registry, types):
    text = "Get-Thing -Na x"
    result = run(text, registry, types, cursor=13)
    assert result.texts() == ["-Name"]
    assert result.replacement_length == 3


def test_named_parameters_bind_before_positionals(registry, types):
    # "a" moves on to -Count once -N claims -Name
    assert run("Get-Thing a -N", registry, types).texts() == ["-Name"]


def test_enum_values_from_parameter_type(registry, types):
    result = run("Get-Thing -Color ", registry, types)
    assert result.texts() == ["Blue", "Green", "Red"]
    assert result.replacement_start == 17
    assert result.replacement_length == 0
    assert run("Get-Thing -Color g", registry, types).texts() == ["Green"]


def test_inline_value_completion(registry, types):
    text = "Get-Thing -Color:R"
    result = run(text, registry, types)
    assert result.texts() == ["Red"]
    assert result.replacement_start == text.index(":") + 1


def test_provider_values_are_quoted(registry, types):
    result = run("Get-Thing b", registry, types)
    assert result.texts() == ["beta", "'beta two'"]
    assert result.candidates[1].display_text == "beta two"
    assert result.candidates[1].tooltip == "widget beta two"


def test_provider_sees_other_parameters(registry, types):
    assert run("Get-Thing -Color Red -Name ", registry, types).texts() == ["alpha"]
    text = "Get-Thing  -Color Red"
    assert run(text, registry, types, cursor=10).texts() == ["alpha"]


def test_partial_quoted_value(registry, types):
    result = run("Get-Thing 'beta t", registry, types)
    assert result.texts() == ["'beta two'"]
    assert result.replacement_start == 10


def test_attached_member_names(registry, types):
    text = "Place-Item box -Grid.R"
    result = run(text, registry, types)
    assert result.texts() == ["-Grid.Row", "-Grid.RowSpan"]
    assert result.replacement_start == text.index("-Grid")
    assert result.replacement_length == len("-Grid.R")
    assert result.candidates[0].category is CompletionCategory.ATTACHED_MEMBER


def test_attached_member_names_keep_separator_and_kind_suffix(registry, types):
    assert "-Grid::Column" in run("Place-Item box -Grid::", registry, types).texts()
    texts = run("Place-Item box -Validation.", registry, types).texts()
    assert texts == ["-Validation.ErrorEvent", "-Validation.ErrorProperty", "-Validation.HasError"]


def test_attached_member_values(registry, types):
    assert run("Place-Item box -DockPanel.Dock ", registry, types).texts() == [
        "Bottom", "Left", "Right", "Top"]
    assert run("Place-Item box -Dock.Dock:B", registry, types).texts() == ["Bottom"]
    assert run("Place-Item box -Grid.IsSharedSizeScope ", registry, types).texts() == ["$false", "$true"]


def test_frequency_sentinel_in_value(types):
    reg = CommandRegistry()

    def pick(request: PoolRequest):
        return ["b", "a", "b", "c", "b", "a"]

    def choose(item: str) -> str:
        return item

    command(registry=reg, completers={"Item": pick})(choose)
    result = run("Choose !>", reg, types)
    assert result.texts() == ["b", "a", "c"]
    assert result.candidates[0].tooltip == "b (3)"


def test_slow_provider_reports_timeout(types):
    reg = CommandRegistry()

    def slow(request: PoolRequest):
        while not request.cancelled.is_set():
            time.sleep(0.01)
        return []

    def wait_for(item: str) -> str:
        return item

    command(registry=reg, completers={"Item": slow})(wait_for)
    result = run("Wait-For ", reg, types, timeout=0.05)
    assert result.candidates == []
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.PROVIDER_TIMEOUT]


def test_unknown_command_degrades_with_diagnostic(registry, types):
    result = run("Nope-Thing -x", registry, types)
    assert result.candidates == []
    assert result.diagnostics[0].kind is DiagnosticKind.METADATA_UNAVAILABLE


def test_binding_diagnostics_are_reported(registry, types):
    result = run("Get-Thing -Bogus 1 -Color ", registry, types)
    assert result.texts() == ["Blue", "Green", "Red"]
    assert [d.kind for d in result.diagnostics] == [DiagnosticKind.UNKNOWN_PARAMETER]


def test_completes_statement_under_cursor(registry, types):
    assert run("Place-Item a; Get-Thing -Col", registry, types).texts() == ["-Color"]


def test_max_results(registry, types):
    assert len(run("", registry, types, max_results=2).candidates) == 2


def test_suggest_returns_whole_words(registry, types):
    assert suggest("Place-Item box -Grid.Ro", registry=registry, types=types) == [
        "-Grid.Row", "-Grid.RowSpan"]
    assert suggest("Get-Thing -Color:G", registry=registry, types=types) == ["-Color:Green"]
