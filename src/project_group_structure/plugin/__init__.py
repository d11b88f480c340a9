"""Plugin core package for project-group-structure.

Exports the ProjectStructurePlugin entry point, lifecycle hooks, and
configuration loader.
"""
from __future__ import annotations

from project_group_structure.plugin.config_loader import ConfigLoader, StructureConfig
from project_group_structure.plugin.structure_plugin import ProjectStructurePlugin
from project_group_structure.plugin.hooks import ProjectHooks

__all__ = [
    "ConfigLoader",
    "ProjectHooks",
    "ProjectStructurePlugin",
    "StructureConfig",
]
