"""Project creation requests and their outcome."""
from __future__ import annotations

from dataclasses import dataclass, field

from project_group_structure.errors import CreationRejectedError, RejectionReason
from project_group_structure.groups import GroupReference


@dataclass
class CreationRequest:
    """A request to create a project, as handed over by the transport layer.

    Attributes
    ----------
    candidate_name:
        Full name of the project to create, e.g. ``"org/team/service"``.
    parent_name:
        Name of the declared parent project.  The platform's root marker
        (``All-Projects`` by default) makes this a root project request.
    permissions_only:
        The requester declares the project only holds access rights and
        will never hold content.
    requester:
        Identity (user name) of the requester.
    declared_owner_groups:
        Owner groups for the new project.  A provisioned owner group is
        appended here when the request is accepted.
    """

    candidate_name: str
    parent_name: str
    requester: str
    permissions_only: bool = False
    declared_owner_groups: list[GroupReference] = field(default_factory=list)


@dataclass(frozen=True)
class CreationOutcome:
    """Answer returned to the transport layer for a creation request."""

    accepted: bool
    message: str = ""
    reason: RejectionReason | None = None
    bypassed_by_admin: bool = False
    owner_group: GroupReference | None = None

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def accept(
        cls,
        bypassed_by_admin: bool = False,
        owner_group: GroupReference | None = None,
    ) -> "CreationOutcome":
        return cls(
            accepted=True,
            bypassed_by_admin=bypassed_by_admin,
            owner_group=owner_group,
        )

    @classmethod
    def reject(cls, reason: RejectionReason, message: str) -> "CreationOutcome":
        return cls(accepted=False, message=message, reason=reason)

    def raise_for_rejection(self) -> None:
        """Raise :class:`CreationRejectedError` if the request was refused."""
        if not self.accepted:
            raise CreationRejectedError(
                self.reason or RejectionReason.INTERNAL_ERROR, self.message
            )
