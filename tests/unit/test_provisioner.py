"""Tests for owner group provisioning."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from project_group_structure.errors import (
    CollaboratorError,
    GroupCreationConflictError,
    GroupCreationFatalError,
)
from project_group_structure.groups import GroupReference
from project_group_structure.ownership.delegation import DelegationPolicy
from project_group_structure.ownership.provisioner import (
    GroupProvisioner,
    fallback_group_name,
    owner_group_name,
)
from project_group_structure.platform.memory import InMemoryPlatform


@pytest.fixture()
def platform() -> InMemoryPlatform:
    return InMemoryPlatform.create()


@pytest.fixture()
def provisioner(platform: InMemoryPlatform) -> GroupProvisioner:
    return GroupProvisioner(platform.groups, platform.store)


class TestNames:
    def test_owner_group_name(self) -> None:
        assert owner_group_name("demo") == "demo-admins"

    def test_fallback_is_deterministic(self) -> None:
        assert fallback_group_name("demo-admins") == "demo-admins-adc3cb2"
        assert fallback_group_name("demo-admins") == fallback_group_name("demo-admins")

    def test_fallback_suffix_is_seven_hex_chars(self) -> None:
        suffix = fallback_group_name("x-admins").rsplit("-", 1)[1]
        assert len(suffix) == 7
        int(suffix, 16)


class TestEnsureOwnerGroup:
    def test_creates_and_attaches(
        self, platform: InMemoryPlatform, provisioner: GroupProvisioner
    ) -> None:
        group = provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)
        assert group is not None
        assert group.name == "demo-admins"
        assert platform.groups.lookup("demo-admins") == group
        assert platform.store.owners("demo") == [group]

    def test_conflict_uses_fallback(
        self, platform: InMemoryPlatform, provisioner: GroupProvisioner
    ) -> None:
        platform.groups.create_group("demo-admins")
        group = provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)
        assert group is not None
        assert group.name == "demo-admins-adc3cb2"

    def test_second_conflict_is_fatal(
        self, platform: InMemoryPlatform, provisioner: GroupProvisioner
    ) -> None:
        platform.groups.create_group("demo-admins")
        platform.groups.create_group("demo-admins-adc3cb2")
        with pytest.raises(GroupCreationFatalError):
            provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)

    def test_skipped_when_already_owner(
        self, platform: InMemoryPlatform, provisioner: GroupProvisioner
    ) -> None:
        assert provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=True) is None
        assert platform.groups.lookup("demo-admins") is None

    def test_skipped_when_granting_disabled(
        self, platform: InMemoryPlatform, provisioner: GroupProvisioner
    ) -> None:
        policy = DelegationPolicy(disable_ownership_grant=True)
        assert provisioner.ensure_owner_group("demo", policy, is_already_owner=False) is None
        assert platform.groups.lookup("demo-admins") is None
        assert platform.store.owners("demo") == []

    def test_directory_failure_is_fatal(self, platform: InMemoryPlatform) -> None:
        groups = MagicMock()
        groups.create_group.side_effect = CollaboratorError("directory down")
        provisioner = GroupProvisioner(groups, platform.store)
        with pytest.raises(GroupCreationFatalError):
            provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)

    def test_fallback_attempted_only_once(self, platform: InMemoryPlatform) -> None:
        groups = MagicMock()
        groups.create_group.side_effect = GroupCreationConflictError("taken")
        provisioner = GroupProvisioner(groups, platform.store)
        with pytest.raises(GroupCreationFatalError):
            provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)
        assert groups.create_group.call_count == 2

    def test_attach_failure_is_fatal(self, platform: InMemoryPlatform) -> None:
        store = MagicMock()
        store.attach_owner.side_effect = CollaboratorError("store down")
        provisioner = GroupProvisioner(platform.groups, store)
        with pytest.raises(GroupCreationFatalError):
            provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)

    def test_returns_bound_reference(self, provisioner: GroupProvisioner) -> None:
        group = provisioner.ensure_owner_group("demo", DelegationPolicy(), is_already_owner=False)
        assert isinstance(group, GroupReference)
        assert group.is_bound
