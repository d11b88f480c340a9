"""Tests for HierarchyGate."""
from __future__ import annotations

import pytest

from project_group_structure.creation import CreationRequest
from project_group_structure.errors import RejectionReason
from project_group_structure.naming.hierarchy import (
    ROOT_NAME_CONTAINS_SEPARATOR_MESSAGE,
    ROOT_REQUIRES_PERMISSIONS_ONLY_MESSAGE,
    HierarchyGate,
    ProjectKind,
)

ROOT = "All-Projects"


@pytest.fixture()
def gate() -> HierarchyGate:
    return HierarchyGate(ROOT)


def _request(name: str, parent: str = ROOT, permissions_only: bool = False) -> CreationRequest:
    return CreationRequest(name, parent, requester="alice", permissions_only=permissions_only)


class TestClassify:
    def test_root_marker_parent_is_root(self, gate: HierarchyGate) -> None:
        assert gate.classify("org", ROOT) is ProjectKind.ROOT

    def test_other_parent_is_nested(self, gate: HierarchyGate) -> None:
        assert gate.classify("org/svc", "org") is ProjectKind.NESTED

    def test_custom_root_marker(self) -> None:
        gate = HierarchyGate("Top")
        assert gate.root_marker == "Top"
        assert gate.classify("org", "Top") is ProjectKind.ROOT
        assert gate.classify("org", ROOT) is ProjectKind.NESTED


class TestRootRules:
    def test_valid_root(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("org", permissions_only=True))
        assert result
        assert result.kind is ProjectKind.ROOT

    def test_root_with_slash_rejected(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("org/svc", permissions_only=True))
        assert not result
        assert result.reason is RejectionReason.ROOT_NAME_CONTAINS_SEPARATOR
        assert result.message == ROOT_NAME_CONTAINS_SEPARATOR_MESSAGE

    def test_root_without_permissions_only_rejected(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("org"))
        assert result.reason is RejectionReason.ROOT_REQUIRES_PERMISSIONS_ONLY
        assert result.message == ROOT_REQUIRES_PERMISSIONS_ONLY_MESSAGE

    def test_slash_reported_before_permissions_only(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("org/svc"))
        assert result.reason is RejectionReason.ROOT_NAME_CONTAINS_SEPARATOR


class TestNestedRules:
    def test_prefixed_name_accepted(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("org/svc", parent="org"))
        assert result
        assert result.kind is ProjectKind.NESTED

    def test_deeper_nesting_accepted(self, gate: HierarchyGate) -> None:
        assert gate.check(_request("org/team/svc", parent="org/team"))

    def test_missing_prefix_rejected_with_suggestion(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("svc", parent="org"))
        assert result.reason is RejectionReason.NESTED_NAME_MISSING_PARENT_PREFIX
        assert result.message == "Project name must start with parent project name, e.g. org/svc."

    def test_prefix_without_separator_rejected(self, gate: HierarchyGate) -> None:
        result = gate.check(_request("orgsvc", parent="org"))
        assert result.reason is RejectionReason.NESTED_NAME_MISSING_PARENT_PREFIX

    def test_permissions_only_irrelevant_for_nested(self, gate: HierarchyGate) -> None:
        assert gate.check(_request("org/svc", parent="org", permissions_only=True))
