"""Final allow/deny decision for a project creation request.

Evaluation order
----------------
1. Name validation (whitespace, then ``nameRegex``).  Applies to everyone,
   administrators included.
2. Administrator bypass: a server administrator skips every remaining
   check, so projects can still be added to legacy trees that do not
   follow the naming structure.
3. Hierarchy rules (root vs. nested).
4. Nested projects only: the requester must own the parent project or be
   covered by its delegation policy.

The gate never mutates anything; owner group provisioning is left to the
caller, driven by :attr:`AuthorizationDecision.needs_owner_group`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from project_group_structure.creation import CreationRequest
from project_group_structure.errors import RejectionReason
from project_group_structure.naming.hierarchy import HierarchyGate, ProjectKind
from project_group_structure.naming.validator import (
    DEFAULT_NAME_REGEX,
    NAME_REGEX_KEY,
    NamePolicy,
    NameValidator,
)
from project_group_structure.ownership.delegation import DelegationResolver
from project_group_structure.platform.interfaces import CapabilityChecker, ProjectConfigSource

logger = logging.getLogger(__name__)

MUST_BE_OWNER_MESSAGE = (
    'You must be owner of the parent project "%s" to create a nested project.'
)


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of :meth:`OwnershipGate.authorize`; truthy when allowed.

    Attributes
    ----------
    allowed:
        Whether the project may be created.
    kind:
        Root or nested, ``None`` when the decision was taken before
        classification (name rejected or administrator bypass).
    bypassed_by_admin:
        The requester is a server administrator.
    is_owner:
        The requester already owns the parent project.
    via_delegation:
        Access was granted through the parent's delegate group.
    reason, message:
        Set when the request is denied.
    """

    allowed: bool
    kind: ProjectKind | None = None
    bypassed_by_admin: bool = False
    is_owner: bool = False
    via_delegation: bool = False
    reason: RejectionReason | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def needs_owner_group(self) -> bool:
        """True when an owner group should be provisioned for the new project."""
        return self.allowed and not self.bypassed_by_admin and not self.is_owner

    @classmethod
    def deny(
        cls,
        reason: RejectionReason,
        message: str,
        kind: ProjectKind | None = None,
    ) -> "AuthorizationDecision":
        return cls(allowed=False, kind=kind, reason=reason, message=message)


class OwnershipGate:
    """Runs every creation check in order and produces the decision.

    Parameters
    ----------
    capabilities:
        Administrator and ownership checks.
    config:
        Layered project configuration, used for ``nameRegex``.
    delegation:
        Delegation resolver for nested requests.
    hierarchy:
        Structural gate holding the root marker.
    default_name_regex:
        Global ``nameRegex`` used when no project sets one.
    """

    def __init__(
        self,
        capabilities: CapabilityChecker,
        config: ProjectConfigSource,
        delegation: DelegationResolver,
        hierarchy: HierarchyGate,
        default_name_regex: str = DEFAULT_NAME_REGEX,
        name_validator: NameValidator | None = None,
    ) -> None:
        self._capabilities = capabilities
        self._config = config
        self._delegation = delegation
        self._hierarchy = hierarchy
        self._default_name_regex = default_name_regex
        self._name_validator = name_validator or NameValidator()

    def name_policy(self, parent_project: str) -> NamePolicy:
        """Resolve the name policy visible from *parent_project*."""
        configured = self._config.get_value(parent_project, NAME_REGEX_KEY)
        pattern = str(configured) if configured else self._default_name_regex
        return NamePolicy.from_pattern(pattern)

    def authorize(self, request: CreationRequest) -> AuthorizationDecision:
        name = request.candidate_name
        logger.debug("validating creation of %s", name)

        name_check = self._name_validator.validate(name, self.name_policy(request.parent_name))
        if name_check.reason is not None:
            return AuthorizationDecision.deny(name_check.reason, name_check.message)

        if self._capabilities.can_administrate_server(request.requester):
            logger.debug("admin is creating project %s, bypassing all rules", name)
            return AuthorizationDecision(allowed=True, bypassed_by_admin=True)

        structure = self._hierarchy.check(request)
        if structure.reason is not None:
            return AuthorizationDecision.deny(structure.reason, structure.message, structure.kind)

        if structure.kind is ProjectKind.ROOT:
            logger.debug("allowing creation of root project %s", name)
            return AuthorizationDecision(allowed=True, kind=ProjectKind.ROOT)

        parent = request.parent_name
        if self._capabilities.is_owner(request.requester, parent):
            logger.debug("allowing creation of project %s: owner of %s", name, parent)
            return AuthorizationDecision(allowed=True, kind=ProjectKind.NESTED, is_owner=True)

        if self._delegation.is_delegate(request.requester, parent):
            logger.debug("allowing creation of project %s: delegate of %s", name, parent)
            return AuthorizationDecision(
                allowed=True, kind=ProjectKind.NESTED, via_delegation=True
            )

        logger.debug("rejecting creation of %s: user is not owner of %s", name, parent)
        return AuthorizationDecision.deny(
            RejectionReason.NOT_OWNER_NOR_DELEGATE,
            MUST_BE_OWNER_MESSAGE % parent,
            ProjectKind.NESTED,
        )
