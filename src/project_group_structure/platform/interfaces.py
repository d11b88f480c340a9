"""Contracts of the platform services this package relies on.

The governance core never owns users, groups, project configuration or
storage.  It talks to them through the abstract collaborators below; a
hosting platform plugs in its own implementations, and
:mod:`project_group_structure.platform.memory` provides in-memory ones.

Every method may block.  Implementations signal infrastructure failures
with :class:`~project_group_structure.errors.CollaboratorError` (or a
subclass); the core does not retry.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from project_group_structure.access.model import AccessConfig
from project_group_structure.groups import GroupReference

AccessConfigMutation = Callable[[AccessConfig], None]


class CapabilityChecker(ABC):
    """Answers capability and ownership questions about an identity."""

    @abstractmethod
    def can_administrate_server(self, identity: str) -> bool:
        """Return True if *identity* holds server-wide administration."""

    @abstractmethod
    def is_owner(self, identity: str, project: str) -> bool:
        """Return True if *identity* may edit the access configuration of *project*.

        Ownership inherited from ancestor projects counts.
        """


class GroupDirectory(ABC):
    """The platform's group service."""

    @abstractmethod
    def lookup(self, name_or_uuid: str) -> GroupReference | None:
        """Return a bound reference for a group name or uuid, or ``None``."""

    @abstractmethod
    def create_group(self, name: str) -> GroupReference:
        """Create a group and return its bound reference.

        Raises
        ------
        GroupCreationConflictError
            If a group with this name already exists.
        """

    @abstractmethod
    def effective_memberships(self, identity: str) -> set[str]:
        """Return the uuids of every group *identity* belongs to.

        Membership is transitive: a member of a group that is itself a
        member of another group belongs to both.
        """


class ProjectConfigSource(ABC):
    """Layered project configuration lookup.

    A value set on a project overrides the value inherited from its
    ancestors, which overrides the global default.
    """

    @abstractmethod
    def get_value(self, project: str, key: str) -> object | None:
        """Return the effective value of *key* for *project*, or ``None``."""


class ProjectStore(ABC):
    """Transactional project metadata storage."""

    @abstractmethod
    def owners(self, project: str) -> list[GroupReference]:
        """Return the owner groups declared directly on *project*."""

    @abstractmethod
    def attach_owner(self, project: str, group: GroupReference) -> None:
        """Record *group* as an owner of *project*."""

    @abstractmethod
    def commit_access_config(
        self,
        project: str,
        mutation: AccessConfigMutation,
        message: str,
    ) -> None:
        """Read the access configuration, apply *mutation*, commit it.

        At most one of several concurrent commits for the same project
        wins; losers raise.

        Raises
        ------
        AccessConfigCommitError
            If the commit is rejected.
        """
