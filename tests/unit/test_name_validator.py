"""Tests for NamePolicy and NameValidator."""
from __future__ import annotations

import logging

import pytest

from project_group_structure.errors import RejectionReason
from project_group_structure.naming.validator import (
    DEFAULT_NAME_REGEX,
    WHITESPACE_MESSAGE,
    NamePolicy,
    NameValidator,
)


@pytest.fixture()
def validator() -> NameValidator:
    return NameValidator()


class TestNamePolicy:
    def test_from_pattern_compiles(self) -> None:
        policy = NamePolicy.from_pattern("[a-z]+")
        assert policy.pattern == "[a-z]+"
        assert policy.matches("abc")

    @pytest.mark.parametrize("pattern", [None, ""])
    def test_missing_pattern_uses_default(self, pattern: str | None) -> None:
        assert NamePolicy.from_pattern(pattern).pattern == DEFAULT_NAME_REGEX

    def test_invalid_pattern_falls_back_with_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            policy = NamePolicy.from_pattern("([a-z")
        assert policy.pattern == DEFAULT_NAME_REGEX
        assert "falling back" in caplog.text

    def test_match_is_whole_string(self) -> None:
        policy = NamePolicy.from_pattern("a")
        assert policy.matches("a")
        assert not policy.matches("ab")
        assert not policy.matches("ba")

    def test_default_rejects_empty(self) -> None:
        assert not NamePolicy.default().matches("")


class TestWhitespace:
    @pytest.mark.parametrize("name", ["my project", "tab\tname", "new\nline", " lead", "trail "])
    def test_whitespace_rejected(self, validator: NameValidator, name: str) -> None:
        result = validator.validate(name, NamePolicy.default())
        assert not result
        assert result.reason is RejectionReason.CONTAINS_WHITESPACE
        assert result.message == WHITESPACE_MESSAGE

    def test_whitespace_wins_over_permissive_pattern(self, validator: NameValidator) -> None:
        result = validator.validate("a b", NamePolicy.from_pattern(r"[a-z ]+"))
        assert result.reason is RejectionReason.CONTAINS_WHITESPACE

    def test_whitespace_checked_before_pattern(self, validator: NameValidator) -> None:
        result = validator.validate("A B", NamePolicy.from_pattern("[a-z]+"))
        assert result.reason is RejectionReason.CONTAINS_WHITESPACE


class TestPattern:
    def test_matching_name_accepted(self, validator: NameValidator) -> None:
        result = validator.validate("org/service", NamePolicy.from_pattern("[a-z/]+"))
        assert result
        assert result.reason is None

    def test_single_letter_policy(self, validator: NameValidator) -> None:
        policy = NamePolicy.from_pattern("a")
        assert validator.validate("a", policy)
        rejected = validator.validate("b", policy)
        assert rejected.reason is RejectionReason.NAME_DOES_NOT_MATCH_POLICY
        assert rejected.message == "Project name should match the regex: a"
