# tabline/plugins/controls/entrypoint.py
from __future__ import annotations

"""
Controls command entrypoint:

Commands:
    - New-Control:    create an element, optionally inside a parent panel
    - Set-Control:    change content or attached members of an element
    - Get-Control:    list elements (optionally by type)
    - Remove-Control: delete an element and its children
    - Show-Layout:    render the element tree with attached members

Any '-Owner.Member value' argument is an attached member, e.g.
    New-Control Button ok -Content OK -Grid.Row 1 -DockPanel.Dock Bottom
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from tabline.commands import CommandResult, PoolItem, PoolRequest, command
from tabline.ui import format_table

from . import owners  # noqa: F401  registers the attached-member owner types


class ControlType(Enum):
    Button = "Button"
    TextBox = "TextBox"
    Label = "Label"
    CheckBox = "CheckBox"
    ListBox = "ListBox"
    Border = "Border"
    StackPanel = "StackPanel"
    Grid = "Grid"
    DockPanel = "DockPanel"
    Canvas = "Canvas"


PANEL_TYPES = frozenset({
    ControlType.Border, ControlType.StackPanel, ControlType.Grid,
    ControlType.DockPanel, ControlType.Canvas,
})


@dataclass(slots=True)
class UIElement:
    control_type: ControlType
    name: str
    content: str = ""
    parent: str | None = None
    width: int | None = None
    height: int | None = None
    attached: dict[str, Any] = field(default_factory=dict)

    @property
    def is_panel(self) -> bool:
        return self.control_type in PANEL_TYPES


# Element tree of the running session, by name (insertion ordered)
ELEMENTS: dict[str, UIElement] = {}


# -------------------- Completers --------------------

def _bound_type(request: PoolRequest) -> ControlType | None:
    raw = request.bound("ControlType")
    if isinstance(raw, ControlType):
        return raw
    if isinstance(raw, str):
        for member in ControlType:
            if member.name.lower() == raw.lower():
                return member
    return None


def _complete_element_name(request: PoolRequest) -> Iterator[PoolItem]:
    """Existing element names; narrowed by -ControlType when it is already typed."""
    wanted = _bound_type(request)
    for element in ELEMENTS.values():
        if wanted is not None and element.control_type is not wanted:
            continue
        yield PoolItem(element.name, tooltip=f"{element.control_type.value} {element.content!r}")


def _complete_parent(request: PoolRequest) -> Iterator[PoolItem]:
    """Panels only, and never the element being created."""
    own_name = str(request.bound("Name", "") or "")
    for element in ELEMENTS.values():
        if element.is_panel and element.name.lower() != own_name.lower():
            yield PoolItem(element.name, tooltip=element.control_type.value)


def _complete_content(request: PoolRequest) -> Iterator[str]:
    """Contents already in use; repeated texts rank by how often they occur ('!>')."""
    for element in ELEMENTS.values():
        if element.content:
            yield element.content


# -------------------- Rendering helpers --------------------

def _format_value(value: Any) -> str:
    return value.name if isinstance(value, Enum) else str(value)


def _format_attached(element: UIElement) -> str:
    return " ".join(f"{key}={_format_value(value)}" for key, value in element.attached.items())


def _children(parent: str | None) -> list[UIElement]:
    return [e for e in ELEMENTS.values() if (e.parent or None) == parent]


def _render_tree(element: UIElement, depth: int, lines: list[str]) -> None:
    label = f"{'  ' * depth}{element.control_type.value} '{element.name}'"
    if element.content:
        label += f" \"{element.content}\""
    attached = _format_attached(element)
    if attached:
        label += f"  [{attached}]"
    lines.append(label)
    for child in _children(element.name):
        _render_tree(child, depth + 1, lines)


def _lookup(name: str) -> UIElement:
    for key, element in ELEMENTS.items():
        if key.lower() == name.lower():
            return element
    raise KeyError(f"No control named '{name}'")


# -------------------- Commands --------------------

@command(
    description="Create a control; attached members (-Grid.Row 1, -DockPanel.Dock Left) set its layout.",
    example="New-Control Button ok -Content OK -Parent root -Grid.Row 1",
    parameter_aliases={"ControlType": ("Type",)},
    parameter_help={
        "ControlType": "Kind of control",
        "Name": "Unique element name",
        "Content": "Text shown by the control",
        "Parent": "Panel that hosts the control",
    },
    completers={"Parent": _complete_parent, "Content": _complete_content},
)
def new_control(
    control_type: ControlType,
    name: str,
    content: str = "",
    *,
    parent: str | None = None,
    width: int | None = None,
    height: int | None = None,
    **attached: Any,
) -> CommandResult:
    if any(key.lower() == name.lower() for key in ELEMENTS):
        return CommandResult(ok=False, message=f"[error] A control named '{name}' already exists.")
    if parent is not None:
        host = _lookup(parent)
        if not host.is_panel:
            return CommandResult(ok=False, message=f"[error] '{host.name}' is a {host.control_type.value}, not a panel.")
        parent = host.name
    element = UIElement(control_type, name, content, parent, width, height, dict(attached))
    ELEMENTS[name] = element
    where = f" in '{parent}'" if parent else ""
    return CommandResult(ok=True, message=f"Created {control_type.value} '{name}'{where}.", data=element)


@command(
    description="Change the content or attached members of an existing control.",
    example="Set-Control ok -DockPanel.Dock Right -ToolTip.ToolTip 'Close the dialog'",
    completers={"Name": _complete_element_name, "Content": _complete_content},
)
def set_control(name: str, *, content: str | None = None, **attached: Any) -> CommandResult:
    element = _lookup(name)
    if content is not None:
        element.content = content
    element.attached.update(attached)
    changed = ", ".join(attached) or ("Content" if content is not None else "nothing")
    return CommandResult(ok=True, message=f"Updated '{element.name}': {changed}.", data=element)


@command(
    description="List controls, optionally only those of one type.",
    example="Get-Control -ControlType Button",
    parameter_aliases={"ControlType": ("Type",)},
    completers={"Name": _complete_element_name},
)
def get_control(name: str | None = None, *, control_type: ControlType | None = None) -> str:
    rows = []
    for element in ELEMENTS.values():
        if control_type is not None and element.control_type is not control_type:
            continue
        if name is not None and not element.name.lower().startswith(name.lower()):
            continue
        rows.append([element.name, element.control_type.value, element.parent or "-",
                     element.content or "-", _format_attached(element) or "-"])
    if not rows:
        return "No controls."
    return format_table(rows, headers=["Name", "Type", "Parent", "Content", "Attached"], max_cell_width=40)


@command(
    description="Remove a control and everything nested in it.",
    example="Remove-Control root",
    completers={"Name": _complete_element_name},
)
def remove_control(name: str) -> CommandResult:
    element = _lookup(name)
    doomed = [element.name]
    index = 0
    while index < len(doomed):
        doomed.extend(child.name for child in _children(doomed[index]))
        index += 1
    for key in doomed:
        ELEMENTS.pop(key, None)
    return CommandResult(ok=True, message=f"Removed {len(doomed)} control(s).")


@command(
    description="Render the control tree with attached members.",
    example="Show-Layout root",
    completers={"Root": _complete_parent},
)
def show_layout(root: str | None = None) -> str:
    roots = [_lookup(root)] if root else _children(None)
    if not roots:
        return "No controls."
    lines: list[str] = []
    for element in roots:
        _render_tree(element, 0, lines)
    return "\n".join(lines)
