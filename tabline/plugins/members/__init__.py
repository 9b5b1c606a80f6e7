# tabline/plugins/members/__init__.py
from __future__ import annotations

"""
Type inspection commands:
- Get-TypeMember lists the attachable members of registered owner types
"""

CATEGORY_DESCRIPTION = "Inspect owner types and their attachable properties and events."
