"""Project name validation.

Two independent checks, always in this order:

1. A name containing any whitespace character is rejected.  No name
   pattern can relax this, even one that itself matches spaces.
2. The name must match the configured :class:`NamePolicy` as a whole
   (``re.fullmatch``, never a substring search).

Example
-------
>>> validator = NameValidator()
>>> bool(validator.validate("org/service", NamePolicy.from_pattern("[a-z_/]+")))
True
>>> validator.validate("org service", NamePolicy.from_pattern(".+")).reason
<RejectionReason.CONTAINS_WHITESPACE: 'contains_whitespace'>
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from project_group_structure.errors import RejectionReason

logger = logging.getLogger(__name__)

NAME_REGEX_KEY = "nameRegex"
DEFAULT_NAME_REGEX = ".+"

WHITESPACE_MESSAGE = "Project name cannot contain spaces or other whitespace characters."
NO_MATCH_MESSAGE = "Project name should match the regex: %s"

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True)
class NamePolicy:
    """A compiled, whole-string project name pattern."""

    pattern: str
    compiled: re.Pattern[str]

    @classmethod
    def from_pattern(cls, pattern: str | None) -> "NamePolicy":
        """Compile *pattern*, falling back to the default on bad input.

        An empty, missing or uncompilable pattern is replaced by
        ``.+`` (any non-empty name); invalid patterns are logged.
        """
        if not pattern:
            return cls.default()
        try:
            return cls(pattern=pattern, compiled=re.compile(pattern))
        except re.error as exc:
            logger.warning(
                "Invalid %s %r (%s); falling back to %r",
                NAME_REGEX_KEY,
                pattern,
                exc,
                DEFAULT_NAME_REGEX,
            )
            return cls.default()

    @classmethod
    def default(cls) -> "NamePolicy":
        return cls(pattern=DEFAULT_NAME_REGEX, compiled=re.compile(DEFAULT_NAME_REGEX))

    def matches(self, name: str) -> bool:
        return self.compiled.fullmatch(name) is not None


@dataclass(frozen=True)
class NameCheckResult:
    """Outcome of :meth:`NameValidator.validate`; truthy when accepted."""

    accepted: bool
    reason: RejectionReason | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.accepted


class NameValidator:
    """Stateless project name validator."""

    def validate(self, name: str, policy: NamePolicy) -> NameCheckResult:
        if _WHITESPACE.search(name):
            logger.debug("rejecting creation of %r: name contains whitespace", name)
            return NameCheckResult(
                accepted=False,
                reason=RejectionReason.CONTAINS_WHITESPACE,
                message=WHITESPACE_MESSAGE,
            )

        if not policy.matches(name):
            logger.debug(
                "rejecting creation of %s: name does not match %s", name, policy.pattern
            )
            return NameCheckResult(
                accepted=False,
                reason=RejectionReason.NAME_DOES_NOT_MATCH_POLICY,
                message=NO_MATCH_MESSAGE % policy.pattern,
            )

        return NameCheckResult(accepted=True)
