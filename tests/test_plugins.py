# tests/test_plugins.py
from __future__ import annotations

import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from tabline.commands import REGISTRY, TYPES
from tabline.interface import complete, handle_line, load_commands

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="module", autouse=True)
def plugins():
    return load_commands("tabline.plugins")


@pytest.fixture
def elements():
    from tabline.plugins.controls import entrypoint

    entrypoint.ELEMENTS.clear()
    yield entrypoint.ELEMENTS
    entrypoint.ELEMENTS.clear()


def test_loader_registers_commands_and_categories(plugins):
    assert plugins == 2
    assert REGISTRY.get("New-Control").category == "controls"
    assert REGISTRY.get("gtm").category == "members"
    assert REGISTRY.get_category_description("controls").startswith("Build UI element trees")
    assert load_commands("tabline.plugins") == 2


def test_loader_rejects_plain_modules():
    with pytest.raises(RuntimeError):
        load_commands("tabline.config.config")


def test_owner_types_registered():
    assert {"Grid", "DockPanel", "Canvas", "ToolTipService", "Validation"} <= {t.name for t in TYPES.all()}
    assert TYPES.resolve("ToolTip").name == "ToolTipService"
    assert TYPES.resolve("System.Windows.Controls.Canvas").name == "Canvas"


def test_build_and_render_layout(elements):
    from tabline.plugins.controls.owners import Dock

    assert handle_line("New-Control Grid root") == "Created Grid 'root'."
    output = handle_line("New-Control Button ok -Content OK -Parent root -Grid.Row 1 -DockPanel.Dock Bottom")
    assert output == "Created Button 'ok' in 'root'."
    assert elements["ok"].attached == {"Grid.Row": 1, "DockPanel.Dock": Dock.Bottom}

    assert handle_line("Set-Control ok -Canvas.ZIndex 3") == "Updated 'ok': Canvas.ZIndex."
    layout = handle_line("Show-Layout")
    assert layout.splitlines() == [
        "Grid 'root'",
        "  Button 'ok' \"OK\"  [Grid.Row=1 DockPanel.Dock=Bottom Canvas.ZIndex=3]",
    ]
    assert handle_line("Remove-Control root") == "Removed 2 control(s)."
    assert handle_line("Get-Control") == "No controls."


def test_control_errors(elements):
    handle_line("New-Control Button ok")
    assert handle_line("New-Control Label ok").startswith("[error] A control named 'ok' already exists.")
    assert handle_line("New-Control Label l -Parent ok") == "[error] 'ok' is a Button, not a panel."
    assert handle_line("New-Control Spinner s").startswith("[error] Cannot convert value for -ControlType")
    assert handle_line("Remove-Control ghost") == "[error] KeyError: \"No control named 'ghost'\""


def test_control_completion(elements):
    handle_line("New-Control Grid root")
    handle_line("New-Control DockPanel dock -Parent root")
    handle_line("New-Control Button ok -Parent dock -Content OK")
    handle_line("New-Control Button cancel -Parent dock -Content Cancel")

    assert complete("Set-Control ").texts() == ["cancel", "dock", "ok", "root"]
    assert complete("Get-Control -ControlType Button -Name ").texts() == ["cancel", "ok"]
    assert complete("Get-Control -Type Grid ").texts() == ["root"]
    assert complete("New-Control Button b -Parent ").texts() == ["dock", "root"]
    assert complete("New-Control ").texts()[:2] == ["Border", "Button"]
    assert complete("Set-Control ok -DockPanel.Dock ").texts() == ["Bottom", "Left", "Right", "Top"]
    assert complete("Set-Control ok -ToolTip.ToolTipO").texts() == ["-ToolTip.ToolTipOpening"]


def test_member_filtering_works_both_ways():
    assert complete("Get-TypeMember -MemberName Row -TypeName ").texts() == ["Grid"]
    assert complete("Get-TypeMember Grid -MemberName ").texts() == [
        "Column", "ColumnSpan", "IsSharedSizeScope", "Row", "RowSpan"]
    assert complete("Get-TypeMember -MemberType Event -TypeName ").texts() == ["ToolTipService", "Validation"]
    assert complete("Get-TypeMember -MemberType ").texts() == ["Event", "Property"]


def test_member_names_by_frequency():
    candidates = complete("gtm -MemberName !>").candidates
    assert candidates[0].display_text == "Error"
    assert candidates[0].tooltip.endswith("(2)")


def test_get_type_member_output():
    table = handle_line("Get-TypeMember Grid -MemberName Row")
    assert "RowSpan" in table
    assert "Column" not in table
    events = handle_line("gtm -MemberType Event")
    assert "ToolTipOpening" in events
    assert "Row" not in events
    assert handle_line("gtm Nope") == "[error] ValueError: Unknown owner type 'Nope'"


def test_attached_event_keeps_handler_text(elements):
    handle_line("New-Control Button ok")
    assert handle_line("Set-Control ok -ToolTip.ToolTipOpening 'Write-Host hi'") == (
        "Updated 'ok': ToolTipService.ToolTipOpening.")
    assert "ToolTipService.ToolTipOpening={ Write-Host hi }" in handle_line("Show-Layout ok")


def test_loading_plugins_registers_owner_types_in_fresh_interpreter():
    script = textwrap.dedent("""
        from tabline.commands import TYPES
        from tabline.interface import handle_line, load_commands

        load_commands("tabline.plugins")
        print(",".join(sorted(t.name for t in TYPES.all())))
        print(handle_line("New-Control Button ok -Grid.Row 1"))
    """)
    completed = subprocess.run([sys.executable, "-c", script], cwd=ROOT, capture_output=True,
                               text=True, timeout=30)
    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.splitlines() == [
        "Canvas,DockPanel,Grid,ToolTipService,Validation",
        "Created Button 'ok'.",
    ]
