"""Delegation of nested project creation to a group.

A project may name a *delegate group* in its configuration
(``delegateProjectCreationTo``, inherited down the project tree).  Members
of that group, directly or through nested groups, may create child
projects without owning the parent.

Only bound references count.  A bare group name, a malformed value or a
reference whose uuid no longer exists grants nothing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from project_group_structure.errors import CollaboratorError
from project_group_structure.groups import GroupReference
from project_group_structure.platform.interfaces import GroupDirectory, ProjectConfigSource

logger = logging.getLogger(__name__)

DELEGATE_PROJECT_CREATION_TO = "delegateProjectCreationTo"
DISABLE_GRANTING_PROJECT_OWNERSHIP = "disableGrantingProjectOwnership"

_TRUE_VALUES: frozenset[str] = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES: frozenset[str] = frozenset({"false", "no", "off", "0", ""})


def parse_boolean(value: object, default: bool = False) -> bool:
    """Interpret a git-config style boolean; unknown values yield *default*."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean value %r, using %s", value, default)
    return default


def parse_delegate_group(value: object) -> GroupReference | None:
    """Turn a configured delegate value into a reference, if it is one.

    Returns ``None`` for empty or malformed values.
    """
    if value is None:
        return None
    if isinstance(value, GroupReference):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return GroupReference.parse(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class DelegationPolicy:
    """Delegation settings visible from a parent project."""

    delegate_group: GroupReference | None = None
    disable_ownership_grant: bool = False

    @classmethod
    def for_project(cls, config: ProjectConfigSource, project: str) -> "DelegationPolicy":
        """Read the effective policy of *project* through its inherited configuration."""
        raw_delegate = config.get_value(project, DELEGATE_PROJECT_CREATION_TO)
        delegate = parse_delegate_group(raw_delegate)
        if raw_delegate not in (None, "") and delegate is None:
            logger.info(
                "malformed group reference (%s): %s in project %s",
                DELEGATE_PROJECT_CREATION_TO,
                raw_delegate,
                project,
            )
        return cls(
            delegate_group=delegate,
            disable_ownership_grant=parse_boolean(
                config.get_value(project, DISABLE_GRANTING_PROJECT_OWNERSHIP)
            ),
        )


class DelegationResolver:
    """Decides whether a requester is covered by a parent's delegation.

    Parameters
    ----------
    groups:
        Group directory used to check that the delegate group still exists
        and to fetch the requester's effective memberships.
    config:
        Layered project configuration.
    """

    def __init__(self, groups: GroupDirectory, config: ProjectConfigSource) -> None:
        self._groups = groups
        self._config = config

    def is_delegate(self, requester: str, parent_project: str) -> bool:
        try:
            policy = DelegationPolicy.for_project(self._config, parent_project)
            delegate = policy.delegate_group
            logger.debug("%s: %s", DELEGATE_PROJECT_CREATION_TO, delegate)
            if delegate is None:
                return False
            if not delegate.is_bound:
                logger.info(
                    "unbound group reference (%s): %s in project %s",
                    DELEGATE_PROJECT_CREATION_TO,
                    delegate.name,
                    parent_project,
                )
                return False

            if self._groups.lookup(delegate.identity) is None:
                logger.info(
                    "dangling group reference (%s): %s in project %s",
                    DELEGATE_PROJECT_CREATION_TO,
                    delegate,
                    parent_project,
                )
                return False

            return delegate.identity in self._groups.effective_memberships(requester)
        except CollaboratorError as exc:
            logger.error(
                "Cannot resolve delegation of %s for %s (%s): %s",
                parent_project,
                requester,
                type(exc).__name__,
                exc,
            )
            return False
