# tabline/plugins/controls/__init__.py
from __future__ import annotations

"""
UI element commands:
- New-Control / Set-Control / Remove-Control build an in-memory element tree
- Get-Control lists elements; Show-Layout renders the tree
Layout is expressed with attached members such as -Grid.Row 1 or -DockPanel.Dock Left.
"""

CATEGORY_DESCRIPTION = (
    "Build UI element trees with attached layout members (Grid.Row, DockPanel.Dock, ...)."
)
