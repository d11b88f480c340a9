"""Permission identifiers and ref pattern validation.

Permission names are matched case-insensitively against a fixed catalogue.
Three families are open-ended and take a label name suffix:

- ``label-<Label>``        vote on a label
- ``labelAs-<Label>``      vote on a label on behalf of someone else
- ``removeLabel-<Label>``  remove someone's vote

Only these families accept a ``<low>..<high>`` range in their rules.

Ref patterns must start with ``refs/`` (or ``^refs/`` for regular
expression patterns) and compile once the ``${username}`` and
``${shardeduserid}`` placeholders are removed.
"""
from __future__ import annotations

import logging
import re

from project_group_structure.errors import InvalidRefPatternError

logger = logging.getLogger(__name__)

EXCLUSIVE_GROUP_PERMISSIONS = "exclusiveGroupPermissions"

LABEL = "label-"
LABEL_AS = "labelAs-"
REMOVE_LABEL = "removeLabel-"

_RANGE_FAMILIES: tuple[str, ...] = (LABEL, LABEL_AS, REMOVE_LABEL)

PERMISSION_NAMES: frozenset[str] = frozenset(
    [
        "abandon",
        "addPatchSet",
        "create",
        "createSignedTag",
        "createTag",
        "delete",
        "deleteChanges",
        "deleteOwnChanges",
        "editAssignee",
        "editHashtags",
        "editTopicName",
        "forgeAuthor",
        "forgeCommitter",
        "forgeServerAsCommitter",
        "owner",
        "push",
        "pushMerge",
        "read",
        "rebase",
        "removeReviewer",
        "revert",
        "submit",
        "submitAs",
        "toggleWipState",
        "viewPrivateChanges",
    ]
)

_NAMES_LC: frozenset[str] = frozenset(n.lower() for n in PERMISSION_NAMES)

_REF_PREFIX = "refs/"
_REGEX_PREFIX = "^"
_PLACEHOLDERS: tuple[str, ...] = ("${username}", "${shardeduserid}")


def _family(name: str) -> str | None:
    for prefix in _RANGE_FAMILIES:
        if name.startswith(prefix) and len(name) > len(prefix):
            return prefix
    return None


def is_permission(name: str) -> bool:
    """Return True if *name* is a recognised permission identifier."""
    if not name:
        return False
    return _family(name) is not None or name.lower() in _NAMES_LC


def has_range(name: str) -> bool:
    """Return True if rules of permission *name* may carry a vote range."""
    return _family(name) is not None


def validate_ref_pattern(ref_pattern: str) -> None:
    """Raise :class:`InvalidRefPatternError` unless *ref_pattern* is usable."""
    if not (
        ref_pattern.startswith(_REF_PREFIX)
        or ref_pattern.startswith(_REGEX_PREFIX + _REF_PREFIX)
    ):
        raise InvalidRefPatternError(
            ref_pattern, f"must start with '{_REF_PREFIX}' or '{_REGEX_PREFIX}{_REF_PREFIX}'"
        )

    candidate = ref_pattern
    for placeholder in _PLACEHOLDERS:
        candidate = candidate.replace(placeholder, "")
    try:
        re.compile(candidate)
    except re.error as exc:
        raise InvalidRefPatternError(ref_pattern, str(exc)) from exc


def is_valid_ref_pattern(ref_pattern: str) -> bool:
    try:
        validate_ref_pattern(ref_pattern)
    except InvalidRefPatternError as exc:
        logger.debug("%s", exc)
        return False
    return True
