"""project-group-structure: policy enforcement for hierarchical project creation.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import project_group_structure as pgs
>>> pgs.__version__
'0.1.0'
>>> platform = pgs.InMemoryPlatform.create()
>>> plugin = pgs.ProjectStructurePlugin.from_platform(platform)
>>> outcome = plugin.validate_creation(
...     pgs.CreationRequest("my project", "All-Projects", requester="alice")
... )
>>> outcome.reason
<RejectionReason.CONTAINS_WHITESPACE: 'contains_whitespace'>
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Core types
# ---------------------------------------------------------------------------
from project_group_structure.errors import (
    AccessConfigCommitError,
    CollaboratorError,
    CreationRejectedError,
    GroupCreationConflictError,
    GroupCreationFatalError,
    InvalidPermissionNameError,
    InvalidRefPatternError,
    MalformedRuleError,
    ProjectStructureError,
    RejectionReason,
    TemplateEntryError,
    TemplateLoadError,
    UnresolvableGroupReferenceError,
)
from project_group_structure.groups import GroupReference
from project_group_structure.creation import CreationOutcome, CreationRequest

# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------
from project_group_structure.naming.validator import NameCheckResult, NamePolicy, NameValidator
from project_group_structure.naming.hierarchy import (
    HierarchyCheckResult,
    HierarchyGate,
    ProjectKind,
)

# ---------------------------------------------------------------------------
# Access rights
# ---------------------------------------------------------------------------
from project_group_structure.access.model import AccessConfig, AccessSection, Permission
from project_group_structure.access.rules import PermissionRule, RuleAction
from project_group_structure.access.template import AccessRightsTemplate, TemplateSection
from project_group_structure.access.applier import AccessRightsTemplateApplier, ApplyReport

# ---------------------------------------------------------------------------
# Platform collaborators
# ---------------------------------------------------------------------------
from project_group_structure.platform.interfaces import (
    CapabilityChecker,
    GroupDirectory,
    ProjectConfigSource,
    ProjectStore,
)
from project_group_structure.platform.memory import (
    InMemoryCapabilityChecker,
    InMemoryGroupDirectory,
    InMemoryPlatform,
    InMemoryProjectConfig,
    InMemoryProjectStore,
)

# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------
from project_group_structure.ownership.delegation import DelegationPolicy, DelegationResolver
from project_group_structure.ownership.gate import AuthorizationDecision, OwnershipGate
from project_group_structure.ownership.provisioner import (
    GroupProvisioner,
    fallback_group_name,
    owner_group_name,
)

# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------
from project_group_structure.audit.logger import AuditLogger

# ---------------------------------------------------------------------------
# Plugin
# ---------------------------------------------------------------------------
from project_group_structure.plugin.config_loader import ConfigLoader, StructureConfig
from project_group_structure.plugin.structure_plugin import ProjectStructurePlugin
from project_group_structure.plugin.hooks import ProjectHooks

__all__ = [
    "__version__",
    # Core types
    "CreationOutcome",
    "CreationRequest",
    "GroupReference",
    # Errors
    "AccessConfigCommitError",
    "CollaboratorError",
    "CreationRejectedError",
    "GroupCreationConflictError",
    "GroupCreationFatalError",
    "InvalidPermissionNameError",
    "InvalidRefPatternError",
    "MalformedRuleError",
    "ProjectStructureError",
    "RejectionReason",
    "TemplateEntryError",
    "TemplateLoadError",
    "UnresolvableGroupReferenceError",
    # Naming
    "HierarchyCheckResult",
    "HierarchyGate",
    "NameCheckResult",
    "NamePolicy",
    "NameValidator",
    "ProjectKind",
    # Access rights
    "AccessConfig",
    "AccessRightsTemplate",
    "AccessRightsTemplateApplier",
    "AccessSection",
    "ApplyReport",
    "Permission",
    "PermissionRule",
    "RuleAction",
    "TemplateSection",
    # Platform
    "CapabilityChecker",
    "GroupDirectory",
    "InMemoryCapabilityChecker",
    "InMemoryGroupDirectory",
    "InMemoryPlatform",
    "InMemoryProjectConfig",
    "InMemoryProjectStore",
    "ProjectConfigSource",
    "ProjectStore",
    # Ownership
    "AuthorizationDecision",
    "DelegationPolicy",
    "DelegationResolver",
    "GroupProvisioner",
    "OwnershipGate",
    "fallback_group_name",
    "owner_group_name",
    # Audit
    "AuditLogger",
    # Plugin
    "ConfigLoader",
    "ProjectHooks",
    "ProjectStructurePlugin",
    "StructureConfig",
]
