"""Permission rule strings.

A rule string grants a permission to one group::

    [deny |block ][+force ][<low>..<high> ]group <token>

The vote range is only recognised for range-capable permissions (see
:func:`project_group_structure.access.permissions.has_range`) and never
together with ``+force``.  ``<token>`` is a group name, a uuid, or a bound
``Group[name / uuid]`` reference.

Example
-------
>>> rule = PermissionRule.parse("-2..+2 group Reviewers", might_use_range=True)
>>> (rule.min, rule.max, rule.group.name)
(-2, 2, 'Reviewers')
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from project_group_structure.errors import MalformedRuleError
from project_group_structure.groups import GroupReference

OWNER_TOKEN = "${owner}"

_RANGE_RE = re.compile(r"^([+-]?\d+)\.\.([+-]?\d+)$")
_GROUP_PREFIX = "group "


class RuleAction(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    BLOCK = "block"


def substitute_owner(rule_string: str, owner_group_name: str) -> str:
    """Replace every literal owner placeholder in *rule_string*."""
    return rule_string.replace(OWNER_TOKEN, owner_group_name)


@dataclass(frozen=True)
class PermissionRule:
    """One grant of a permission to a group.

    Attributes
    ----------
    group:
        The group the rule applies to.
    action:
        Allow, deny or block.
    force:
        Force flag (``+force``), meaningful for push-like permissions.
    min, max:
        Vote range for range-capable permissions; both zero otherwise.
    """

    group: GroupReference
    action: RuleAction = RuleAction.ALLOW
    force: bool = False
    min: int = 0
    max: int = 0

    @property
    def has_range(self) -> bool:
        return self.min != 0 or self.max != 0

    def bind(self, group: GroupReference) -> "PermissionRule":
        """Return a copy of this rule granted to *group*."""
        return replace(self, group=group)

    def to_config_string(self) -> str:
        parts: list[str] = []
        if self.action is not RuleAction.ALLOW:
            parts.append(self.action.value)
        if self.force:
            parts.append("+force")
        if self.has_range:
            parts.append(f"{_signed(self.min)}..{_signed(self.max)}")
        parts.append(_GROUP_PREFIX + self.group.to_config_string())
        return " ".join(parts)

    @classmethod
    def parse(cls, rule_string: str, might_use_range: bool = False) -> "PermissionRule":
        """Parse a rule string.

        Raises
        ------
        MalformedRuleError
            If the string does not end with ``group <token>`` or has an
            unparseable range.
        """
        src = rule_string.strip()
        action = RuleAction.ALLOW
        force = False
        low = high = 0

        if src.startswith("deny "):
            action = RuleAction.DENY
            src = src[len("deny ") :].strip()
        elif src.startswith("block "):
            action = RuleAction.BLOCK
            src = src[len("block ") :].strip()

        if src.startswith("+force "):
            force = True
            src = src[len("+force ") :].strip()

        if might_use_range and not force and " " in src:
            head, tail = src.split(" ", 1)
            match = _RANGE_RE.match(head)
            if match:
                low, high = int(match.group(1)), int(match.group(2))
                if low > high:
                    raise MalformedRuleError(rule_string, "range minimum exceeds maximum")
                src = tail.strip()

        if not src.startswith(_GROUP_PREFIX):
            raise MalformedRuleError(rule_string, "rule must include group")
        token = src[len(_GROUP_PREFIX) :].strip()
        try:
            group = GroupReference.parse(token)
        except ValueError as exc:
            raise MalformedRuleError(rule_string, str(exc)) from exc

        return cls(group=group, action=action, force=force, min=low, max=high)


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)
