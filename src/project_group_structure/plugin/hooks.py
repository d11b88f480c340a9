"""Project lifecycle hooks.

ProjectHooks adapts the plugin to a transport layer that exchanges plain
dicts, e.g. a web hook endpoint or a message bus consumer.

Each hook receives the event payload and returns a plain result dict.

Example
-------
>>> hooks = ProjectHooks(plugin)
>>> hooks.pre_create_project(
...     {"name": "org/svc", "parent": "org", "requester": "alice"}
... )["accepted"]
True
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from project_group_structure.creation import CreationOutcome, CreationRequest
from project_group_structure.errors import RejectionReason
from project_group_structure.groups import GroupReference
from project_group_structure.ownership.delegation import parse_boolean

if TYPE_CHECKING:
    from project_group_structure.plugin.structure_plugin import ProjectStructurePlugin

logger = logging.getLogger(__name__)


class ProjectHooks:
    """Lifecycle hooks for project creation events.

    Parameters
    ----------
    plugin:
        The initialised :class:`ProjectStructurePlugin` instance.
    """

    def __init__(self, plugin: "ProjectStructurePlugin") -> None:
        self._plugin = plugin

    def pre_create_project(self, payload: dict[str, object]) -> dict[str, object]:
        """Called before a project is created.

        Parameters
        ----------
        payload:
            Must include ``name``, ``parent`` and ``requester``.  May
            include ``permissions_only`` (a boolean or a git-config style
            string) and ``owners`` (list of ``Group[name / uuid]`` strings or
            bare names).  An empty or malformed owner rejects the request
            with ``malformed_owner_group``.

        Returns
        -------
        dict[str, object]
            ``accepted``, ``message``, ``reason`` and ``owners``, the
            owner list including any provisioned owner group.  Callers
            should abort the creation when ``accepted`` is ``False``.
        """
        try:
            owners = [
                GroupReference.parse(str(owner))
                for owner in payload.get("owners", []) or []  # type: ignore[union-attr]
            ]
        except ValueError as exc:
            logger.warning("Rejecting creation of %s: %s", payload.get("name"), exc)
            return _outcome_payload(
                CreationOutcome.reject(RejectionReason.MALFORMED_OWNER_GROUP, str(exc)), []
            )

        request = CreationRequest(
            candidate_name=str(payload.get("name", "")),
            parent_name=str(payload.get("parent", "")),
            requester=str(payload.get("requester", "")),
            permissions_only=parse_boolean(payload.get("permissions_only")),
            declared_owner_groups=owners,
        )
        outcome = self._plugin.validate_creation(request)
        logger.debug("pre_create_project %s -> accepted=%s", request.candidate_name, outcome.accepted)
        return _outcome_payload(outcome, request.declared_owner_groups)

    def post_create_project(self, payload: dict[str, object]) -> dict[str, object]:
        """Called after a project has been created.

        Parameters
        ----------
        payload:
            Must include ``name``.

        Returns
        -------
        dict[str, object]
            ``applied`` (bool), plus ``sections``, ``skipped`` and
            ``error`` describing what the default access rights did.
        """
        name = str(payload.get("name", ""))
        report = self._plugin.on_project_created(name)
        if report is None:
            return {"applied": False, "sections": [], "skipped": [], "error": None}
        return {
            "applied": report.committed,
            "sections": [s.ref_pattern for s in report.sections],
            "skipped": report.skipped_sections,
            "error": report.error,
        }


def _outcome_payload(outcome: CreationOutcome, owners: list[GroupReference]) -> dict[str, object]:
    return {
        "accepted": outcome.accepted,
        "message": outcome.message,
        "reason": outcome.reason.value if outcome.reason else None,
        "owners": [g.to_config_string() for g in owners],
    }
