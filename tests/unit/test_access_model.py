"""Tests for the access configuration model."""
from __future__ import annotations

from project_group_structure.access.model import AccessConfig, AccessSection, Permission
from project_group_structure.access.rules import PermissionRule, RuleAction
from project_group_structure.groups import GroupReference

DEVS = GroupReference("Developers", "1")


class TestPermission:
    def test_upsert_appends_new_group(self) -> None:
        permission = Permission("read")
        assert permission.upsert_rule(PermissionRule(DEVS))
        assert permission.rules == [PermissionRule(DEVS)]

    def test_upsert_same_rule_is_noop(self) -> None:
        permission = Permission("read", rules=[PermissionRule(DEVS)])
        assert not permission.upsert_rule(PermissionRule(DEVS))
        assert len(permission.rules) == 1

    def test_upsert_replaces_rule_of_same_group(self) -> None:
        permission = Permission("read", rules=[PermissionRule(DEVS)])
        renamed = GroupReference("Engineering", "1")
        assert permission.upsert_rule(PermissionRule(renamed, action=RuleAction.DENY))
        assert len(permission.rules) == 1
        assert permission.rules[0].action is RuleAction.DENY

    def test_get_rule(self) -> None:
        permission = Permission("read", rules=[PermissionRule(DEVS)])
        assert permission.get_rule(PermissionRule(DEVS, force=True)) == PermissionRule(DEVS)
        assert permission.get_rule(PermissionRule(GroupReference("Other", "2"))) is None

    def test_is_empty(self) -> None:
        assert Permission("read").is_empty
        assert not Permission("read", exclusive=True).is_empty


class TestAccessConfig:
    def test_get_section_without_create(self) -> None:
        assert AccessConfig().get_section("refs/*") is None

    def test_get_section_creates(self) -> None:
        config = AccessConfig()
        section = config.get_section("refs/*", create=True)
        assert section is not None
        assert config.get_section("refs/*") is section

    def test_prune_drops_empty_entries(self) -> None:
        config = AccessConfig()
        section = config.get_section("refs/*", create=True)
        assert section is not None
        section.get_permission("read", create=True)
        config.get_section("refs/heads/*", create=True)
        config.prune()
        assert config.sections == {}

    def test_prune_keeps_exclusive_permission(self) -> None:
        config = AccessConfig()
        section = config.get_section("refs/*", create=True)
        assert section is not None
        permission = section.get_permission("read", create=True)
        assert permission is not None
        permission.exclusive = True
        config.prune()
        assert "refs/*" in config.sections

    def test_to_dict(self) -> None:
        config = AccessConfig()
        section = config.get_section("refs/*", create=True)
        assert section is not None
        read = section.get_permission("read", create=True)
        assert read is not None
        read.exclusive = True
        read.upsert_rule(PermissionRule(DEVS))
        assert config.to_dict() == {
            "access": {
                "refs/*": {
                    "exclusiveGroupPermissions": "read",
                    "read": ["group Group[Developers / 1]"],
                }
            }
        }


class TestAccessSection:
    def test_get_permission_ignores_case(self) -> None:
        section = AccessSection("refs/*")
        read = section.get_permission("Read", create=True)
        assert section.get_permission("read") is read
        assert section.get_permission("READ", create=True) is read
        assert list(section.permissions) == ["Read"]

    def test_get_permission_without_create(self) -> None:
        assert AccessSection("refs/*").get_permission("read") is None

    def test_add_permission_keeps_spelling(self) -> None:
        section = AccessSection("refs/*")
        section.add_permission("label-Code-Review")
        assert section.get_permission("LABEL-code-review") is not None
        assert list(section.permissions) == ["label-Code-Review"]
