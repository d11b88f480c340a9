"""Access configuration model of a project.

An :class:`AccessConfig` is the per-project structure that the store
persists: access sections keyed by ref pattern, each holding permissions,
each holding rules.  The ``get_*`` accessors create missing entries when
asked to, and :meth:`Permission.upsert_rule` replaces an existing rule for
the same group instead of appending a duplicate.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from project_group_structure.access.rules import PermissionRule


@dataclass
class Permission:
    """A named permission inside an access section."""

    name: str
    exclusive: bool = False
    rules: list[PermissionRule] = field(default_factory=list)

    def get_rule(self, rule: PermissionRule) -> PermissionRule | None:
        for existing in self.rules:
            if existing.group.same_group(rule.group):
                return existing
        return None

    def upsert_rule(self, rule: PermissionRule) -> bool:
        """Insert *rule*, or replace the rule already granted to its group.

        Returns
        -------
        bool
            ``True`` when the permission changed.
        """
        for index, existing in enumerate(self.rules):
            if existing.group.same_group(rule.group):
                if existing == rule:
                    return False
                self.rules[index] = rule
                return True
        self.rules.append(rule)
        return True

    @property
    def is_empty(self) -> bool:
        return not self.rules and not self.exclusive


@dataclass
class AccessSection:
    """Permissions scoped to one ref pattern."""

    ref_pattern: str
    permissions: dict[str, Permission] = field(default_factory=dict)

    def get_permission(self, name: str, create: bool = False) -> Permission | None:
        """Return the permission called *name*, ignoring case.

        A permission created here keeps the spelling of its first use.
        """
        key = name.lower()
        for permission in self.permissions.values():
            if permission.name.lower() == key:
                return permission
        if not create:
            return None
        return self.add_permission(name)

    def add_permission(self, name: str) -> Permission:
        permission = Permission(name=name)
        self.permissions[name] = permission
        return permission


@dataclass
class AccessConfig:
    """All access sections of a project."""

    sections: dict[str, AccessSection] = field(default_factory=dict)

    def get_section(self, ref_pattern: str, create: bool = False) -> AccessSection | None:
        section = self.sections.get(ref_pattern)
        if section is None and create:
            section = self.add_section(ref_pattern)
        return section

    def add_section(self, ref_pattern: str) -> AccessSection:
        section = AccessSection(ref_pattern=ref_pattern)
        self.sections[ref_pattern] = section
        return section

    def prune(self) -> None:
        """Drop permissions without rules or flags, then empty sections."""
        for ref_pattern in list(self.sections):
            section = self.sections[ref_pattern]
            for name in [n for n, p in section.permissions.items() if p.is_empty]:
                del section.permissions[name]
            if not section.permissions:
                del self.sections[ref_pattern]

    def to_dict(self) -> dict[str, object]:
        """Serialise to the same shape as the default access rights template."""
        access: dict[str, object] = {}
        for ref_pattern, section in self.sections.items():
            entries: dict[str, object] = {}
            exclusive = [p.name for p in section.permissions.values() if p.exclusive]
            if exclusive:
                entries["exclusiveGroupPermissions"] = " ".join(exclusive)
            for permission in section.permissions.values():
                if permission.rules:
                    entries[permission.name] = [r.to_config_string() for r in permission.rules]
            access[ref_pattern] = entries
        return {"access": access}
