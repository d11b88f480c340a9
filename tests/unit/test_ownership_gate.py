"""Tests for OwnershipGate.authorize."""
from __future__ import annotations

import pytest

from project_group_structure.creation import CreationRequest
from project_group_structure.errors import RejectionReason
from project_group_structure.naming.hierarchy import HierarchyGate, ProjectKind
from project_group_structure.naming.validator import NAME_REGEX_KEY
from project_group_structure.ownership.delegation import (
    DELEGATE_PROJECT_CREATION_TO,
    DelegationResolver,
)
from project_group_structure.ownership.gate import MUST_BE_OWNER_MESSAGE, OwnershipGate
from project_group_structure.platform.memory import InMemoryPlatform

ROOT = "All-Projects"


@pytest.fixture()
def platform() -> InMemoryPlatform:
    platform = InMemoryPlatform.create(administrators={"admin"})
    platform.groups.create_group("org-admins")
    platform.groups.add_members("org-admins", "owen")
    platform.groups.create_group("Delegates")
    platform.groups.add_members("Delegates", "dana")
    platform.store.create_project("org")
    platform.store.attach_owner("org", platform.groups.lookup("org-admins"))  # type: ignore[arg-type]
    return platform


def _gate(platform: InMemoryPlatform, default_name_regex: str = ".+") -> OwnershipGate:
    return OwnershipGate(
        capabilities=platform.capabilities,
        config=platform.config,
        delegation=DelegationResolver(platform.groups, platform.config),
        hierarchy=HierarchyGate(ROOT),
        default_name_regex=default_name_regex,
    )


def _request(name: str, parent: str, user: str, permissions_only: bool = False) -> CreationRequest:
    return CreationRequest(name, parent, requester=user, permissions_only=permissions_only)


class TestNameChecks:
    def test_whitespace_rejected_for_everyone(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("org/my svc", "org", "admin"))
        assert not decision
        assert decision.reason is RejectionReason.CONTAINS_WHITESPACE

    def test_global_name_regex(self, platform: InMemoryPlatform) -> None:
        gate = _gate(platform, default_name_regex="a")
        assert gate.authorize(_request("a", ROOT, "alice", permissions_only=True))
        decision = gate.authorize(_request("b", ROOT, "alice", permissions_only=True))
        assert decision.reason is RejectionReason.NAME_DOES_NOT_MATCH_POLICY
        assert decision.message == "Project name should match the regex: a"

    def test_name_regex_applies_to_admins(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform, default_name_regex="a").authorize(_request("b", ROOT, "admin"))
        assert decision.reason is RejectionReason.NAME_DOES_NOT_MATCH_POLICY

    def test_project_name_regex_overrides_global(self, platform: InMemoryPlatform) -> None:
        platform.config.set_value("org", NAME_REGEX_KEY, "org/[a-z]+")
        gate = _gate(platform)
        assert gate.authorize(_request("org/svc", "org", "owen"))
        decision = gate.authorize(_request("org/Svc1", "org", "owen"))
        assert decision.reason is RejectionReason.NAME_DOES_NOT_MATCH_POLICY

    def test_invalid_configured_regex_falls_back(self, platform: InMemoryPlatform) -> None:
        platform.config.set_value("org", NAME_REGEX_KEY, "([")
        assert _gate(platform).name_policy("org").pattern == ".+"


class TestAdminBypass:
    def test_admin_skips_hierarchy(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("x/y", ROOT, "admin"))
        assert decision
        assert decision.bypassed_by_admin
        assert not decision.needs_owner_group

    def test_admin_may_create_regular_root(self, platform: InMemoryPlatform) -> None:
        assert _gate(platform).authorize(_request("legacy", ROOT, "admin"))


class TestRootRequests:
    def test_root_allowed_for_any_user(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("team", ROOT, "alice", permissions_only=True))
        assert decision
        assert decision.kind is ProjectKind.ROOT
        assert decision.needs_owner_group

    def test_root_with_slash(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("a/b", ROOT, "alice", permissions_only=True))
        assert decision.reason is RejectionReason.ROOT_NAME_CONTAINS_SEPARATOR

    def test_root_regular_project(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("team", ROOT, "alice"))
        assert decision.reason is RejectionReason.ROOT_REQUIRES_PERMISSIONS_ONLY


class TestNestedRequests:
    def test_owner_allowed(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("org/svc", "org", "owen"))
        assert decision
        assert decision.is_owner
        assert not decision.needs_owner_group

    def test_missing_prefix(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("svc", "org", "owen"))
        assert decision.reason is RejectionReason.NESTED_NAME_MISSING_PARENT_PREFIX

    def test_non_owner_rejected(self, platform: InMemoryPlatform) -> None:
        decision = _gate(platform).authorize(_request("org/svc", "org", "eve"))
        assert not decision
        assert decision.reason is RejectionReason.NOT_OWNER_NOR_DELEGATE
        assert decision.message == MUST_BE_OWNER_MESSAGE % "org"
        assert decision.kind is ProjectKind.NESTED

    def test_delegate_allowed(self, platform: InMemoryPlatform) -> None:
        platform.config.set_value("org", DELEGATE_PROJECT_CREATION_TO, platform.groups.lookup("Delegates"))
        decision = _gate(platform).authorize(_request("org/svc", "org", "dana"))
        assert decision
        assert decision.via_delegation
        assert decision.needs_owner_group

    def test_ownership_inherited_from_ancestor(self, platform: InMemoryPlatform) -> None:
        platform.store.create_project("org/team", "org")
        assert _gate(platform).authorize(_request("org/team/svc", "org/team", "owen"))


class TestDecisionShape:
    @pytest.mark.parametrize(
        "name, parent, user, permissions_only",
        [
            ("org/my svc", "org", "alice", False),
            ("a/b", ROOT, "alice", True),
            ("team", ROOT, "alice", False),
            ("svc", "org", "owen", False),
            ("org/svc", "org", "eve", False),
        ],
    )
    def test_every_denial_carries_reason_and_message(
        self, platform: InMemoryPlatform, name: str, parent: str, user: str, permissions_only: bool
    ) -> None:
        decision = _gate(platform).authorize(_request(name, parent, user, permissions_only))
        assert not decision
        assert decision.reason is not None
        assert decision.message

    @pytest.mark.parametrize(
        "name, parent, user, permissions_only",
        [
            ("anything", ROOT, "admin", False),
            ("team", ROOT, "alice", True),
            ("org/svc", "org", "owen", False),
        ],
    )
    def test_allowed_decision_has_no_reason(
        self, platform: InMemoryPlatform, name: str, parent: str, user: str, permissions_only: bool
    ) -> None:
        decision = _gate(platform).authorize(_request(name, parent, user, permissions_only))
        assert decision
        assert decision.reason is None
