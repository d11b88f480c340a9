"""In-memory platform collaborators.

Thread-safe reference implementations of the interfaces in
:mod:`project_group_structure.platform.interfaces`.  They back the test
suite and the ``project-structure check`` command, which loads a whole
platform state from YAML through :meth:`InMemoryPlatform.from_dict`.

State document
--------------
::

    root_project: All-Projects
    administrators: [admin]
    global_config:
      nameRegex: "[a-z0-9_/-]+"
    groups:
      - name: Developers
        members: [alice]
        groups: [Contractors]        # nested member groups
      - name: Contractors
        members: [bob]
    projects:
      - name: org
        parent: All-Projects
        owners: [Developers]
        config:
          delegateProjectCreationTo: {group: Contractors}
          disableGrantingProjectOwnership: false

A ``{group: <name>}`` config value is stored as a bound reference to that
group; any other value is stored as written.
"""
from __future__ import annotations

import copy
import logging
import threading
import uuid
from dataclasses import dataclass, field

from project_group_structure.access.model import AccessConfig
from project_group_structure.errors import (
    AccessConfigCommitError,
    CollaboratorError,
    GroupCreationConflictError,
)
from project_group_structure.groups import GroupReference
from project_group_structure.platform.interfaces import (
    AccessConfigMutation,
    CapabilityChecker,
    GroupDirectory,
    ProjectConfigSource,
    ProjectStore,
)

logger = logging.getLogger(__name__)

DEFAULT_ROOT_PROJECT = "All-Projects"


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@dataclass
class _Group:
    uuid: str
    name: str
    members: set[str] = field(default_factory=set)
    subgroups: set[str] = field(default_factory=set)

    def reference(self) -> GroupReference:
        return GroupReference(name=self.name, uuid=self.uuid)


class InMemoryGroupDirectory(GroupDirectory):
    """Group directory with nested groups and rename support."""

    def __init__(self) -> None:
        self._groups: dict[str, _Group] = {}
        self._lock = threading.Lock()

    def lookup(self, name_or_uuid: str) -> GroupReference | None:
        with self._lock:
            group = self._find(name_or_uuid)
            return group.reference() if group else None

    def create_group(self, name: str, group_uuid: str | None = None) -> GroupReference:
        with self._lock:
            if self._find_by_name(name) is not None:
                raise GroupCreationConflictError(name)
            new_uuid = group_uuid or uuid.uuid4().hex
            if new_uuid in self._groups:
                raise CollaboratorError(f"Group uuid '{new_uuid}' already in use")
            group = _Group(uuid=new_uuid, name=name)
            self._groups[new_uuid] = group
            logger.debug("Created group %s (%s)", name, new_uuid)
            return group.reference()

    def effective_memberships(self, identity: str) -> set[str]:
        with self._lock:
            found = {g.uuid for g in self._groups.values() if identity in g.members}
            pending = list(found)
            while pending:
                member_uuid = pending.pop()
                for group in self._groups.values():
                    if member_uuid in group.subgroups and group.uuid not in found:
                        found.add(group.uuid)
                        pending.append(group.uuid)
            return found

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def add_members(self, group: str, *identities: str) -> None:
        with self._lock:
            self._require(group).members.update(identities)

    def add_subgroups(self, group: str, *member_groups: str) -> None:
        """Make *member_groups* members of *group*."""
        with self._lock:
            target = self._require(group)
            for member in member_groups:
                target.subgroups.add(self._require(member).uuid)

    def rename(self, group: str, new_name: str) -> GroupReference:
        with self._lock:
            target = self._require(group)
            if self._find_by_name(new_name) is not None:
                raise GroupCreationConflictError(new_name)
            target.name = new_name
            return target.reference()

    def delete(self, group: str) -> None:
        with self._lock:
            target = self._require(group)
            del self._groups[target.uuid]
            for other in self._groups.values():
                other.subgroups.discard(target.uuid)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find(self, name_or_uuid: str) -> _Group | None:
        return self._groups.get(name_or_uuid) or self._find_by_name(name_or_uuid)

    def _find_by_name(self, name: str) -> _Group | None:
        for group in self._groups.values():
            if group.name == name:
                return group
        return None

    def _require(self, name_or_uuid: str) -> _Group:
        group = self._find(name_or_uuid)
        if group is None:
            raise CollaboratorError(f"No such group: {name_or_uuid}")
        return group


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@dataclass
class _Project:
    name: str
    parent: str | None
    access: AccessConfig = field(default_factory=AccessConfig)
    version: int = 0


class InMemoryProjectStore(ProjectStore):
    """Project hierarchy, owners and versioned access configurations.

    Owners may be attached before the project itself is created, which is
    what happens while a creation request is still being validated.
    """

    def __init__(self, root_project: str = DEFAULT_ROOT_PROJECT) -> None:
        self._root_project = root_project
        self._projects: dict[str, _Project] = {root_project: _Project(root_project, None)}
        self._owners: dict[str, list[GroupReference]] = {}
        self._lock = threading.Lock()

    @property
    def root_project(self) -> str:
        return self._root_project

    def create_project(self, name: str, parent: str | None = None) -> None:
        with self._lock:
            if name in self._projects:
                raise CollaboratorError(f"Project '{name}' already exists")
            effective_parent = parent or self._root_project
            if effective_parent not in self._projects:
                raise CollaboratorError(f"No such parent project: {effective_parent}")
            self._projects[name] = _Project(name, effective_parent)

    def exists(self, name: str) -> bool:
        with self._lock:
            return name in self._projects

    def parent_of(self, name: str) -> str | None:
        with self._lock:
            project = self._projects.get(name)
            return project.parent if project else None

    def owners(self, project: str) -> list[GroupReference]:
        with self._lock:
            return list(self._owners.get(project, []))

    def attach_owner(self, project: str, group: GroupReference) -> None:
        with self._lock:
            owners = self._owners.setdefault(project, [])
            if not any(o.same_group(group) for o in owners):
                owners.append(group)

    def access_config(self, project: str) -> AccessConfig:
        """Return a copy of the committed access configuration."""
        with self._lock:
            return copy.deepcopy(self._require(project).access)

    def version(self, project: str) -> int:
        with self._lock:
            return self._require(project).version

    def commit_access_config(
        self,
        project: str,
        mutation: AccessConfigMutation,
        message: str,
    ) -> None:
        with self._lock:
            record = self._projects.get(project)
            if record is None:
                raise AccessConfigCommitError(project, "no such project")
            base_version = record.version
            working = copy.deepcopy(record.access)

        mutation(working)

        with self._lock:
            if record.version != base_version:
                raise AccessConfigCommitError(
                    project, f"concurrent update (expected version {base_version})"
                )
            record.access = working
            record.version += 1
        logger.debug("Committed access config of %s: %s", project, message)

    def _require(self, project: str) -> _Project:
        record = self._projects.get(project)
        if record is None:
            raise CollaboratorError(f"No such project: {project}")
        return record


class InMemoryProjectConfig(ProjectConfigSource):
    """Per-project configuration values inherited along the project tree."""

    def __init__(self, store: InMemoryProjectStore | None = None) -> None:
        self._store = store
        self._values: dict[str, dict[str, object]] = {}
        self._global: dict[str, object] = {}
        self._lock = threading.Lock()

    def set_value(self, project: str, key: str, value: object) -> None:
        with self._lock:
            self._values.setdefault(project, {})[key] = value

    def set_global(self, key: str, value: object) -> None:
        with self._lock:
            self._global[key] = value

    def get_value(self, project: str, key: str) -> object | None:
        seen: set[str] = set()
        current: str | None = project
        while current is not None and current not in seen:
            seen.add(current)
            with self._lock:
                values = self._values.get(current, {})
                if key in values:
                    return values[key]
            current = self._store.parent_of(current) if self._store else None
        with self._lock:
            return self._global.get(key)


class InMemoryCapabilityChecker(CapabilityChecker):
    """Administrators by identity, ownership through owner groups.

    A user owns a project when one of their effective groups owns the
    project or any of its ancestors.
    """

    def __init__(
        self,
        store: InMemoryProjectStore,
        groups: InMemoryGroupDirectory,
        administrators: set[str] | None = None,
    ) -> None:
        self._store = store
        self._groups = groups
        self._administrators: set[str] = set(administrators or ())

    def grant_administration(self, identity: str) -> None:
        self._administrators.add(identity)

    def can_administrate_server(self, identity: str) -> bool:
        return identity in self._administrators

    def is_owner(self, identity: str, project: str) -> bool:
        memberships = self._groups.effective_memberships(identity)
        seen: set[str] = set()
        current: str | None = project
        while current is not None and current not in seen:
            seen.add(current)
            for owner in self._store.owners(current):
                if owner.uuid in memberships:
                    return True
            current = self._store.parent_of(current)
        return False


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


@dataclass
class InMemoryPlatform:
    """All in-memory collaborators, wired to each other."""

    groups: InMemoryGroupDirectory
    store: InMemoryProjectStore
    config: InMemoryProjectConfig
    capabilities: InMemoryCapabilityChecker

    @classmethod
    def create(
        cls,
        root_project: str = DEFAULT_ROOT_PROJECT,
        administrators: set[str] | None = None,
    ) -> "InMemoryPlatform":
        groups = InMemoryGroupDirectory()
        store = InMemoryProjectStore(root_project=root_project)
        config = InMemoryProjectConfig(store=store)
        capabilities = InMemoryCapabilityChecker(store, groups, administrators)
        return cls(groups=groups, store=store, config=config, capabilities=capabilities)

    @classmethod
    def from_dict(cls, state: dict[str, object]) -> "InMemoryPlatform":
        """Build a platform from a state document (see module docstring)."""
        platform = cls.create(
            root_project=str(state.get("root_project", DEFAULT_ROOT_PROJECT)),
            administrators={str(a) for a in state.get("administrators", []) or []},  # type: ignore[union-attr]
        )

        raw_groups: list[dict[str, object]] = list(state.get("groups", []) or [])  # type: ignore[arg-type]
        for raw_group in raw_groups:
            group_uuid = raw_group.get("uuid")
            platform.groups.create_group(
                str(raw_group["name"]), str(group_uuid) if group_uuid else None
            )
        for raw_group in raw_groups:
            name = str(raw_group["name"])
            platform.groups.add_members(name, *[str(m) for m in raw_group.get("members", []) or []])  # type: ignore[union-attr]
            platform.groups.add_subgroups(name, *[str(g) for g in raw_group.get("groups", []) or []])  # type: ignore[union-attr]

        raw_global: dict[str, object] = dict(state.get("global_config", {}) or {})  # type: ignore[arg-type]
        for key, value in raw_global.items():
            platform.config.set_global(key, platform._config_value(value))

        raw_projects: list[dict[str, object]] = list(state.get("projects", []) or [])  # type: ignore[arg-type]
        for raw_project in raw_projects:
            name = str(raw_project["name"])
            parent = raw_project.get("parent")
            if name != platform.store.root_project:
                platform.store.create_project(name, str(parent) if parent else None)
            for owner in raw_project.get("owners", []) or []:  # type: ignore[union-attr]
                platform.store.attach_owner(name, platform._require_group(str(owner)))
            raw_config: dict[str, object] = dict(raw_project.get("config", {}) or {})  # type: ignore[arg-type]
            for key, value in raw_config.items():
                platform.config.set_value(name, key, platform._config_value(value))

        return platform

    def _require_group(self, name: str) -> GroupReference:
        ref = self.groups.lookup(name)
        if ref is None:
            raise CollaboratorError(f"No such group: {name}")
        return ref

    def _config_value(self, value: object) -> object:
        if isinstance(value, dict) and "group" in value:
            return self._require_group(str(value["group"]))
        return value
