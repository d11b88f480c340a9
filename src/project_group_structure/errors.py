"""Error taxonomy for project creation governance.

Gate failures are reported as a :class:`RejectionReason` plus a
user-facing message.  Collaborator failures and template problems are
exceptions; the template ones are per-entry and recoverable, the
applier logs them and moves on to the next entry.
"""
from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    """Why a project creation request was refused."""

    CONTAINS_WHITESPACE = "contains_whitespace"
    NAME_DOES_NOT_MATCH_POLICY = "name_does_not_match_policy"
    ROOT_NAME_CONTAINS_SEPARATOR = "root_name_contains_separator"
    ROOT_REQUIRES_PERMISSIONS_ONLY = "root_requires_permissions_only"
    NESTED_NAME_MISSING_PARENT_PREFIX = "nested_name_missing_parent_prefix"
    NOT_OWNER_NOR_DELEGATE = "not_owner_nor_delegate"
    MALFORMED_OWNER_GROUP = "malformed_owner_group"
    INTERNAL_ERROR = "internal_error"


class ProjectStructureError(Exception):
    """Base class for every error raised by this package."""


class CreationRejectedError(ProjectStructureError):
    """Raised when a creation request must be refused.

    Attributes
    ----------
    reason:
        Machine-readable :class:`RejectionReason`.
    message:
        The message shown to the requester.
    """

    def __init__(self, reason: RejectionReason, message: str) -> None:
        self.reason = reason
        self.message = message
        super().__init__(f"[{reason.value}] {message}")


# ---------------------------------------------------------------------------
# Collaborator failures
# ---------------------------------------------------------------------------


class CollaboratorError(ProjectStructureError):
    """An external collaborator (directory, store, config) failed."""


class GroupCreationConflictError(CollaboratorError):
    """The group directory already holds a group with this name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Group '{name}' already exists")


class AccessConfigCommitError(CollaboratorError):
    """The store refused to commit an access configuration update."""

    def __init__(self, project: str, message: str) -> None:
        self.project = project
        super().__init__(f"Cannot commit access configuration of '{project}': {message}")


class GroupCreationFatalError(ProjectStructureError):
    """Owner group creation failed after the single fallback attempt."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Failed to create owner group '{name}': {message}")


class TemplateLoadError(ProjectStructureError):
    """The default access rights template is missing or unparseable."""

    def __init__(self, message: str, template_path: str | None = None) -> None:
        self.template_path = template_path
        prefix = f"[{template_path}] " if template_path else ""
        super().__init__(f"{prefix}{message}")


# ---------------------------------------------------------------------------
# Per-entry template errors (skip and continue)
# ---------------------------------------------------------------------------


class TemplateEntryError(ProjectStructureError):
    """A single template entry cannot be applied."""


class InvalidRefPatternError(TemplateEntryError):
    def __init__(self, ref_pattern: str, message: str) -> None:
        self.ref_pattern = ref_pattern
        super().__init__(f"Invalid ref pattern '{ref_pattern}': {message}")


class InvalidPermissionNameError(TemplateEntryError):
    def __init__(self, permission: str) -> None:
        self.permission = permission
        super().__init__(f"Invalid permission '{permission}'")


class MalformedRuleError(TemplateEntryError):
    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        super().__init__(f"Malformed rule '{rule}': {message}")


class UnresolvableGroupReferenceError(TemplateEntryError):
    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        super().__init__(f"Group '{group_name}' not found")
