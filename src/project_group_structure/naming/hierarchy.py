"""Structural rules of the project tree.

A request whose parent is the root marker project creates a *root*
project: its name is a single segment and it may only hold access rights
(``permissions_only``).  Any other request creates a *nested* project whose
name must start with ``<parent>/``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from project_group_structure.creation import CreationRequest
from project_group_structure.errors import RejectionReason

logger = logging.getLogger(__name__)

SEPARATOR = "/"

ROOT_NAME_CONTAINS_SEPARATOR_MESSAGE = "Root project names cannot contain slashes."

ROOT_REQUIRES_PERMISSIONS_ONLY_MESSAGE = (
    "Regular projects are not allowed as root.\n\n"
    "Please create a root parent project (project with option "
    '"Only serve as parent for other projects") that will hold '
    "all your access rights and then create your regular project that "
    "inherits rights from your root project.\n\n"
    "Example:\n"
    '"someOrganization"->parent project\n'
    '"someOrganization/someProject"->regular project.'
)

MISSING_PARENT_PREFIX_MESSAGE = "Project name must start with parent project name, e.g. %s."


class ProjectKind(str, Enum):
    ROOT = "root"
    NESTED = "nested"


@dataclass(frozen=True)
class HierarchyCheckResult:
    """Outcome of :meth:`HierarchyGate.check`; truthy when valid."""

    kind: ProjectKind
    valid: bool
    reason: RejectionReason | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.valid


class HierarchyGate:
    """Classifies creation requests and enforces the naming structure.

    Parameters
    ----------
    root_marker:
        Name of the distinguished top-level project.
    """

    def __init__(self, root_marker: str) -> None:
        self._root_marker = root_marker

    @property
    def root_marker(self) -> str:
        return self._root_marker

    def classify(self, name: str, parent_name: str) -> ProjectKind:
        if parent_name == self._root_marker:
            return ProjectKind.ROOT
        return ProjectKind.NESTED

    def check(self, request: CreationRequest) -> HierarchyCheckResult:
        name = request.candidate_name
        kind = self.classify(name, request.parent_name)

        if kind is ProjectKind.ROOT:
            if SEPARATOR in name:
                logger.debug("rejecting creation of %s: name contains slashes", name)
                return self._reject(
                    kind,
                    RejectionReason.ROOT_NAME_CONTAINS_SEPARATOR,
                    ROOT_NAME_CONTAINS_SEPARATOR_MESSAGE,
                )
            if not request.permissions_only:
                logger.debug("rejecting creation of %s: missing permissions only option", name)
                return self._reject(
                    kind,
                    RejectionReason.ROOT_REQUIRES_PERMISSIONS_ONLY,
                    ROOT_REQUIRES_PERMISSIONS_ONLY_MESSAGE,
                )
            return HierarchyCheckResult(kind=kind, valid=True)

        prefix = request.parent_name + SEPARATOR
        if not name.startswith(prefix):
            logger.debug("rejecting creation of %s: name is not starting with %s", name, prefix)
            return self._reject(
                kind,
                RejectionReason.NESTED_NAME_MISSING_PARENT_PREFIX,
                MISSING_PARENT_PREFIX_MESSAGE % (prefix + name),
            )
        return HierarchyCheckResult(kind=kind, valid=True)

    @staticmethod
    def _reject(
        kind: ProjectKind, reason: RejectionReason, message: str
    ) -> HierarchyCheckResult:
        return HierarchyCheckResult(kind=kind, valid=False, reason=reason, message=message)
