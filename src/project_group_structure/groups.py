"""Group references.

A :class:`GroupReference` names a group and, once bound, carries the
group's opaque uuid.  A bound reference identifies its group by uuid only,
so renaming the group never breaks it.

The configuration string form of a bound reference is::

    Group[<display name> / <uuid>]

Parsing splits on the last ``/`` and trims both parts, so
``Group[Developers/3f2a9c]`` is read the same way.  Any other non-empty
string is an unbound (bare name) reference.

Example
-------
>>> ref = GroupReference.parse("Group[Developers / 3f2a9c]")
>>> ref.uuid
'3f2a9c'
>>> GroupReference.parse("Developers").is_bound
False
"""
from __future__ import annotations

from dataclasses import dataclass

_PREFIX = "Group["
_SUFFIX = "]"
_SEPARATOR = "/"


@dataclass(frozen=True)
class GroupReference:
    """A group name with an optional uuid.

    Attributes
    ----------
    name:
        Display name at the time the reference was taken.
    uuid:
        Opaque group identifier, or ``None`` for a bare name.
    """

    name: str
    uuid: str | None = None

    @property
    def is_bound(self) -> bool:
        """True when the reference carries a uuid."""
        return bool(self.uuid)

    @property
    def identity(self) -> str:
        """The uuid when bound, the display name otherwise."""
        return self.uuid if self.uuid else self.name

    def same_group(self, other: "GroupReference") -> bool:
        """Return True if both references point at the same group.

        Two bound references are compared by uuid regardless of their
        display names.  Otherwise the comparison falls back to names.
        """
        if self.is_bound and other.is_bound:
            return self.uuid == other.uuid
        return self.name == other.name

    def with_name(self, name: str) -> "GroupReference":
        return GroupReference(name=name, uuid=self.uuid)

    def to_config_string(self) -> str:
        if not self.is_bound:
            return self.name
        return f"{_PREFIX}{self.name} {_SEPARATOR} {self.uuid}{_SUFFIX}"

    @classmethod
    def is_bound_string(cls, value: str) -> bool:
        """Return True if *value* is written in the bound ``Group[...]`` form.

        The separator is the last ``/``; whitespace around it is optional.
        """
        value = value.strip()
        return (
            value.startswith(_PREFIX)
            and value.endswith(_SUFFIX)
            and _SEPARATOR in value
        )

    @classmethod
    def parse(cls, value: str) -> "GroupReference":
        """Parse a configuration string into a reference.

        Raises
        ------
        ValueError
            If *value* is empty or a ``Group[...]`` string without a
            usable name and uuid.
        """
        value = value.strip()
        if not value:
            raise ValueError("Group reference must not be empty")
        if not value.startswith(_PREFIX):
            return cls(name=value)

        if not cls.is_bound_string(value):
            raise ValueError(f"Malformed group reference: {value!r}")
        body = value[len(_PREFIX) : -len(_SUFFIX)]
        name, _, uuid = body.rpartition(_SEPARATOR)
        name = name.strip()
        uuid = uuid.strip()
        if not name or not uuid:
            raise ValueError(f"Malformed group reference: {value!r}")
        return cls(name=name, uuid=uuid)

    def __str__(self) -> str:
        return self.to_config_string()
