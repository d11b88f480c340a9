"""Platform collaborator contracts and their in-memory implementations."""
from __future__ import annotations

from project_group_structure.platform.interfaces import (
    AccessConfigMutation,
    CapabilityChecker,
    GroupDirectory,
    ProjectConfigSource,
    ProjectStore,
)
from project_group_structure.platform.memory import (
    DEFAULT_ROOT_PROJECT,
    InMemoryCapabilityChecker,
    InMemoryGroupDirectory,
    InMemoryPlatform,
    InMemoryProjectConfig,
    InMemoryProjectStore,
)

__all__ = [
    "AccessConfigMutation",
    "CapabilityChecker",
    "DEFAULT_ROOT_PROJECT",
    "GroupDirectory",
    "InMemoryCapabilityChecker",
    "InMemoryGroupDirectory",
    "InMemoryPlatform",
    "InMemoryProjectConfig",
    "InMemoryProjectStore",
    "ProjectConfigSource",
    "ProjectStore",
]
