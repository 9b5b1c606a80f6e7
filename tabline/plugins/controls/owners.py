# tabline/plugins/controls/owners.py
from __future__ import annotations

"""Owner types whose members can be attached to any control."""

from dataclasses import dataclass
from enum import Enum

from tabline.commands import owner_type


class Dock(Enum):
    Left = "Left"
    Top = "Top"
    Right = "Right"
    Bottom = "Bottom"


class Visibility(Enum):
    Visible = "Visible"
    Hidden = "Hidden"
    Collapsed = "Collapsed"


@dataclass(frozen=True, slots=True)
class ScriptBlock:
    """Handler text for an attached event, kept verbatim."""
    text: str

    def __str__(self) -> str:
        return "{ " + self.text + " }"


OWNER_NAMESPACE = "System.Windows.Controls"

GRID = owner_type(
    "Grid",
    namespace=OWNER_NAMESPACE,
    properties={"Row": int, "Column": int, "RowSpan": int, "ColumnSpan": int, "IsSharedSizeScope": bool},
)
DOCK_PANEL = owner_type(
    "DockPanel",
    namespace=OWNER_NAMESPACE,
    properties={"Dock": Dock},
    short_names=("Dock",),
)
CANVAS = owner_type(
    "Canvas",
    namespace=OWNER_NAMESPACE,
    properties={"Left": float, "Top": float, "Right": float, "Bottom": float, "ZIndex": int},
)
TOOL_TIP_SERVICE = owner_type(
    "ToolTipService",
    namespace=OWNER_NAMESPACE,
    properties={"ToolTip": str, "InitialShowDelay": int, "ShowOnDisabled": bool, "Visibility": Visibility},
    events={"ToolTipOpening": ScriptBlock, "ToolTipClosing": ScriptBlock},
    short_names=("ToolTip",),
)
# 'Error' is declared as both a property and an event: the bare name is ambiguous.
VALIDATION = owner_type(
    "Validation",
    namespace=OWNER_NAMESPACE,
    properties={"HasError": bool, "Error": str},
    events={"Error": ScriptBlock},
)
