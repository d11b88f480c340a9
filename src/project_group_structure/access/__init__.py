"""Access rights: permissions, rules, the default template and its applier."""
from __future__ import annotations

from project_group_structure.access.model import AccessConfig, AccessSection, Permission
from project_group_structure.access.permissions import (
    EXCLUSIVE_GROUP_PERMISSIONS,
    PERMISSION_NAMES,
    has_range,
    is_permission,
    is_valid_ref_pattern,
    validate_ref_pattern,
)
from project_group_structure.access.rules import (
    OWNER_TOKEN,
    PermissionRule,
    RuleAction,
    substitute_owner,
)
from project_group_structure.access.template import AccessRightsTemplate, TemplateSection
from project_group_structure.access.applier import (
    COMMIT_MESSAGE,
    AccessRightsTemplateApplier,
    ApplyReport,
    SectionPlan,
)

__all__ = [
    "AccessConfig",
    "AccessRightsTemplate",
    "AccessRightsTemplateApplier",
    "AccessSection",
    "ApplyReport",
    "COMMIT_MESSAGE",
    "EXCLUSIVE_GROUP_PERMISSIONS",
    "OWNER_TOKEN",
    "PERMISSION_NAMES",
    "Permission",
    "PermissionRule",
    "RuleAction",
    "SectionPlan",
    "TemplateSection",
    "has_range",
    "is_permission",
    "is_valid_ref_pattern",
    "substitute_owner",
    "validate_ref_pattern",
]
