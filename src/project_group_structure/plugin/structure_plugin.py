"""ProjectStructurePlugin: entry point for the hosting platform.

The plugin wires the governance components to the platform collaborators
and exposes the two inbound calls:

- ``validate_creation(request)``: synchronous gate run before a project
  is created; may provision an owner group for the new project.
- ``on_project_created(name)``: notification after a root project has
  been durably created; seeds its default access rights.  Delivery may be
  repeated, applying the template is idempotent.

The default access rights template is loaded once, when the plugin is
constructed.  A missing or broken template is logged once and disables
default access rights only; project creation keeps being enforced.

Example
-------
>>> platform = InMemoryPlatform.create()
>>> plugin = ProjectStructurePlugin.from_platform(platform)
>>> outcome = plugin.validate_creation(
...     CreationRequest("demo", "All-Projects", requester="alice", permissions_only=True)
... )
>>> outcome.accepted, outcome.owner_group.name
(True, 'demo-admins')
"""
from __future__ import annotations

import logging
from pathlib import Path

from project_group_structure.access.applier import AccessRightsTemplateApplier, ApplyReport
from project_group_structure.access.template import AccessRightsTemplate
from project_group_structure.audit.logger import (
    CREATION_ALLOWED,
    CREATION_REJECTED,
    DEFAULT_ACCESS_APPLIED,
    DEFAULT_ACCESS_FAILED,
    OWNER_GROUP_CREATED,
    AuditLogger,
)
from project_group_structure.creation import CreationOutcome, CreationRequest
from project_group_structure.errors import (
    CollaboratorError,
    GroupCreationFatalError,
    RejectionReason,
    TemplateLoadError,
)
from project_group_structure.naming.hierarchy import SEPARATOR, HierarchyGate
from project_group_structure.ownership.delegation import DelegationPolicy, DelegationResolver
from project_group_structure.ownership.gate import AuthorizationDecision, OwnershipGate
from project_group_structure.ownership.provisioner import GroupProvisioner
from project_group_structure.platform.interfaces import (
    CapabilityChecker,
    GroupDirectory,
    ProjectConfigSource,
    ProjectStore,
)
from project_group_structure.platform.memory import InMemoryPlatform
from project_group_structure.plugin.config_loader import ConfigLoader, StructureConfig

logger = logging.getLogger(__name__)

AN_ERROR_OCCURRED_MSG = "An error occurred while creating project, please contact support"


class ProjectStructurePlugin:
    """Enforces the project structure and seeds root project access rights.

    Instantiate once per process.

    Parameters
    ----------
    capabilities, groups, config_source, store:
        Platform collaborators.
    config:
        Plugin configuration; defaults apply when omitted.
    template:
        Pre-loaded template.  When omitted, ``config.template_path`` is
        loaded (if set).
    audit:
        Optional audit trail; built from ``config.audit`` when enabled.
    """

    def __init__(
        self,
        capabilities: CapabilityChecker,
        groups: GroupDirectory,
        config_source: ProjectConfigSource,
        store: ProjectStore,
        config: StructureConfig | None = None,
        template: AccessRightsTemplate | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self._config = config if config is not None else ConfigLoader().defaults()
        self._groups = groups
        self._config_source = config_source
        self._store = store

        if audit is None and self._config.audit.enabled:
            audit = AuditLogger(log_path=self._config.audit.log_path)
        self._audit = audit

        self._hierarchy = HierarchyGate(self._config.root_project)
        self._gate = OwnershipGate(
            capabilities=capabilities,
            config=config_source,
            delegation=DelegationResolver(groups, config_source),
            hierarchy=self._hierarchy,
            default_name_regex=self._config.name_regex,
        )
        self._provisioner = GroupProvisioner(groups, store)

        if template is None and self._config.template_path is not None:
            template = self._load_template(self._config.template_path)
        self._applier = AccessRightsTemplateApplier(template, groups, store)

    @classmethod
    def from_platform(
        cls,
        platform: InMemoryPlatform,
        config: StructureConfig | None = None,
        template: AccessRightsTemplate | None = None,
        audit: AuditLogger | None = None,
    ) -> "ProjectStructurePlugin":
        """Build a plugin on top of the in-memory collaborators."""
        if config is None:
            config = StructureConfig(root_project=platform.store.root_project)
        return cls(
            capabilities=platform.capabilities,
            groups=platform.groups,
            config_source=platform.config,
            store=platform.store,
            config=config,
            template=template,
            audit=audit,
        )

    # ------------------------------------------------------------------
    # Inbound calls
    # ------------------------------------------------------------------

    def validate_creation(self, request: CreationRequest) -> CreationOutcome:
        """Decide whether *request* may proceed.

        On acceptance an owner group may be created and appended to
        ``request.declared_owner_groups``.
        """
        decision = self._gate.authorize(request)
        if decision.reason is not None:
            return self._reject(request, decision.reason, decision.message)

        owner_group = None
        if decision.needs_owner_group:
            try:
                policy = DelegationPolicy.for_project(self._config_source, request.parent_name)
                owner_group = self._provisioner.ensure_owner_group(
                    request.candidate_name, policy, is_already_owner=decision.is_owner
                )
            except (GroupCreationFatalError, CollaboratorError) as exc:
                logger.error("Failed to create project %s: %s", request.candidate_name, exc)
                return self._reject(request, RejectionReason.INTERNAL_ERROR, AN_ERROR_OCCURRED_MSG)

            if owner_group is not None:
                request.declared_owner_groups.append(owner_group)
                self._record(
                    OWNER_GROUP_CREATED,
                    project=request.candidate_name,
                    group=owner_group.name,
                    group_uuid=owner_group.uuid,
                )

        self._record_allowed(request, decision)
        return CreationOutcome.accept(
            bypassed_by_admin=decision.bypassed_by_admin, owner_group=owner_group
        )

    def on_project_created(self, project_name: str) -> ApplyReport | None:
        """Seed the default access rights of a freshly created root project.

        Never raises for collaborator failures; returns ``None`` when the
        project is not eligible.
        """
        if SEPARATOR in project_name or not self._applier.enabled:
            return None

        try:
            owner_name = self._owner_group_name(project_name)
        except CollaboratorError as exc:
            logger.error("Could not retrieve owners of project %s: %s", project_name, exc)
            self._record(DEFAULT_ACCESS_FAILED, project=project_name, error=str(exc))
            return None

        report = self._applier.apply(project_name, owner_name)
        if report.committed:
            self._record(
                DEFAULT_ACCESS_APPLIED,
                project=project_name,
                owner_group=owner_name,
                sections=[s.ref_pattern for s in report.sections],
                rules=report.rule_count,
                problems=[str(p) for p in report.problems],
            )
        elif report.error is not None:
            self._record(DEFAULT_ACCESS_FAILED, project=project_name, error=report.error)
        return report

    # ------------------------------------------------------------------
    # Properties for direct component access
    # ------------------------------------------------------------------

    @property
    def config(self) -> StructureConfig:
        return self._config

    @property
    def gate(self) -> OwnershipGate:
        return self._gate

    @property
    def applier(self) -> AccessRightsTemplateApplier:
        return self._applier

    @property
    def audit(self) -> AuditLogger | None:
        return self._audit

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _load_template(template_path: Path) -> AccessRightsTemplate | None:
        try:
            return AccessRightsTemplate.load(template_path)
        except TemplateLoadError as exc:
            logger.error(
                "Failed to load default access rights template %s, "
                "no access right will be set on root projects: %s",
                template_path,
                exc,
            )
            return None

    def _owner_group_name(self, project_name: str) -> str | None:
        owners = self._store.owners(project_name)
        if not owners:
            logger.warning("No owners for project %s", project_name)
            return None
        owner = owners[0]
        current = self._groups.lookup(owner.identity)
        if current is None:
            logger.warning("Owner group %s of project %s not found", owner, project_name)
            return None
        return current.name

    def _reject(
        self, request: CreationRequest, reason: RejectionReason, message: str
    ) -> CreationOutcome:
        self._record(
            CREATION_REJECTED,
            project=request.candidate_name,
            parent=request.parent_name,
            requester=request.requester,
            reason=reason.value,
        )
        return CreationOutcome.reject(reason, self._config.with_documentation(message))

    def _record_allowed(self, request: CreationRequest, decision: AuthorizationDecision) -> None:
        self._record(
            CREATION_ALLOWED,
            project=request.candidate_name,
            parent=request.parent_name,
            requester=request.requester,
            bypassed_by_admin=decision.bypassed_by_admin,
            via_delegation=decision.via_delegation,
        )

    def _record(self, event: str, **fields: object) -> None:
        if self._audit is not None:
            self._audit.record(event, **fields)
