"""Owner group provisioning for newly created projects.

When the requester does not already own the new project through
inheritance, a group ``<project>-admins`` is created and attached as its
owner.  If that name is taken, the group is created once more under a
deterministic fallback name::

    <project>-admins-<first 7 hex chars of sha256("<project>-admins")>

Example
-------
>>> fallback_group_name("demo-admins")
'demo-admins-adc3cb2'
"""
from __future__ import annotations

import hashlib
import logging

from project_group_structure.errors import (
    CollaboratorError,
    GroupCreationConflictError,
    GroupCreationFatalError,
)
from project_group_structure.groups import GroupReference
from project_group_structure.ownership.delegation import DelegationPolicy
from project_group_structure.platform.interfaces import GroupDirectory, ProjectStore

logger = logging.getLogger(__name__)

OWNER_GROUP_SUFFIX = "-admins"
_HASH_PREFIX_LENGTH = 7


def owner_group_name(project_name: str) -> str:
    return project_name + OWNER_GROUP_SUFFIX


def fallback_group_name(name: str) -> str:
    """Derive the collision-free variant of group *name*."""
    digest = hashlib.sha256(name.encode("utf-8")).hexdigest()
    return f"{name}-{digest[:_HASH_PREFIX_LENGTH]}"


class GroupProvisioner:
    """Creates and attaches owner groups.

    Parameters
    ----------
    groups:
        Directory used to create the group.
    store:
        Store on which the group is attached as project owner.
    """

    def __init__(self, groups: GroupDirectory, store: ProjectStore) -> None:
        self._groups = groups
        self._store = store

    def ensure_owner_group(
        self,
        project_name: str,
        parent_policy: DelegationPolicy,
        is_already_owner: bool,
    ) -> GroupReference | None:
        """Make sure *project_name* gets an owner group.

        Returns
        -------
        GroupReference | None
            The attached group, or ``None`` when nothing had to be done.

        Raises
        ------
        GroupCreationFatalError
            If the group cannot be created under either name, or cannot be
            attached.
        """
        if is_already_owner:
            logger.debug("not creating owner group for %s: already owner", project_name)
            return None
        if parent_policy.disable_ownership_grant:
            logger.debug("not creating owner group for %s: granting disabled", project_name)
            return None

        group = self._create(owner_group_name(project_name))
        try:
            self._store.attach_owner(project_name, group)
        except CollaboratorError as exc:
            logger.error("Failed to attach owner group %s to %s: %s", group, project_name, exc)
            raise GroupCreationFatalError(group.name, str(exc)) from exc
        logger.debug("attached owner group %s to %s", group, project_name)
        return group

    def _create(self, name: str) -> GroupReference:
        try:
            try:
                return self._groups.create_group(name)
            except GroupCreationConflictError as exc:
                fallback = fallback_group_name(name)
                logger.info(
                    "Failed to create group name %s because of a conflict: %s, "
                    "trying to create %s instead",
                    name,
                    exc,
                    fallback,
                )
                return self._groups.create_group(fallback)
        except CollaboratorError as exc:
            logger.error("Failed to create owner group %s: %s", name, exc, exc_info=True)
            raise GroupCreationFatalError(name, str(exc)) from exc
