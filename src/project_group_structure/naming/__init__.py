"""Project name and hierarchy checks."""
from __future__ import annotations

from project_group_structure.naming.validator import (
    DEFAULT_NAME_REGEX,
    NAME_REGEX_KEY,
    NameCheckResult,
    NamePolicy,
    NameValidator,
)
from project_group_structure.naming.hierarchy import (
    SEPARATOR,
    HierarchyCheckResult,
    HierarchyGate,
    ProjectKind,
)

__all__ = [
    "DEFAULT_NAME_REGEX",
    "HierarchyCheckResult",
    "HierarchyGate",
    "NAME_REGEX_KEY",
    "NameCheckResult",
    "NamePolicy",
    "NameValidator",
    "ProjectKind",
    "SEPARATOR",
]
