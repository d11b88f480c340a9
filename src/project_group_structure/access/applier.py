"""Apply the default access rights template to a new root project.

The applier first builds a plan from the template: it validates every ref
pattern, permission name and rule, substitutes the owner group name and
resolves bare group names through the directory.  Anything invalid is
logged and left out, never aborting the rest of the template.  The plan
is then written in a single store commit that upserts each rule by
(section, permission, group), so applying the template again leaves the
project unchanged.

A failed commit is logged and reported, never raised: the project simply
stays without its default access rights.

Example
-------
>>> applier = AccessRightsTemplateApplier(template, groups, store)
>>> report = applier.apply("demo", "demo-admins")
>>> report.committed
True
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from project_group_structure.access.model import AccessConfig
from project_group_structure.access.permissions import (
    EXCLUSIVE_GROUP_PERMISSIONS,
    has_range,
    is_permission,
    validate_ref_pattern,
)
from project_group_structure.access.rules import (
    OWNER_TOKEN,
    PermissionRule,
    substitute_owner,
)
from project_group_structure.access.template import AccessRightsTemplate, TemplateSection
from project_group_structure.errors import (
    CollaboratorError,
    InvalidPermissionNameError,
    InvalidRefPatternError,
    TemplateEntryError,
    UnresolvableGroupReferenceError,
)

if TYPE_CHECKING:
    from project_group_structure.platform.interfaces import GroupDirectory, ProjectStore

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "Set default access rights\n"

_EXCLUSIVE_SPLIT = re.compile(r"[, \t]+")


@dataclass
class SectionPlan:
    """Validated content of one template section."""

    ref_pattern: str
    exclusive: list[str] = field(default_factory=list)
    rules: list[tuple[str, PermissionRule]] = field(default_factory=list)


@dataclass
class ApplyReport:
    """What happened when the template was applied to a project."""

    project: str
    sections: list[SectionPlan] = field(default_factory=list)
    problems: list[TemplateEntryError] = field(default_factory=list)
    committed: bool = False
    error: str | None = None

    @property
    def rule_count(self) -> int:
        return sum(len(s.rules) for s in self.sections)

    @property
    def skipped_sections(self) -> list[str]:
        return [p.ref_pattern for p in self.problems if isinstance(p, InvalidRefPatternError)]


class AccessRightsTemplateApplier:
    """Writes default access rights to root projects.

    Parameters
    ----------
    template:
        The loaded template, or ``None`` when loading failed at startup.
    groups:
        Directory used to resolve bare group names.
    store:
        Store receiving the single access configuration commit.
    """

    def __init__(
        self,
        template: AccessRightsTemplate | None,
        groups: GroupDirectory,
        store: ProjectStore,
    ) -> None:
        self._template = template
        self._groups = groups
        self._store = store

    @property
    def template(self) -> AccessRightsTemplate | None:
        return self._template

    @property
    def enabled(self) -> bool:
        return self._template is not None and not self._template.is_empty

    def apply(self, project: str, owner_group_name: str | None) -> ApplyReport:
        """Apply the template to *project* in one commit."""
        report = ApplyReport(project=project)
        if not self.enabled:
            logger.debug("No default access rights configured, skipping %s", project)
            return report

        self.plan(owner_group_name, report)
        if not report.sections:
            logger.warning("No valid access section in template, nothing set on %s", project)
            return report

        sections = list(report.sections)

        def mutation(config: AccessConfig) -> None:
            _write_sections(config, sections)

        try:
            self._store.commit_access_config(project, mutation, COMMIT_MESSAGE)
        except CollaboratorError as exc:
            logger.error(
                "Failed to set default access rights on %s: %s", project, exc, exc_info=True
            )
            report.error = str(exc)
            return report

        report.committed = True
        logger.info(
            "Set default access rights on %s: %d sections, %d rules",
            project,
            len(sections),
            report.rule_count,
        )
        return report

    def plan(self, owner_group_name: str | None, report: ApplyReport | None = None) -> ApplyReport:
        """Validate the template for *owner_group_name* without writing anything."""
        if report is None:
            report = ApplyReport(project="")
        if self._template is None:
            return report
        for section in self._template.sections:
            try:
                validate_ref_pattern(section.ref_pattern)
            except InvalidRefPatternError as exc:
                logger.error("Invalid ref name: %s", exc)
                report.problems.append(exc)
                continue
            report.sections.append(self._plan_section(section, owner_group_name, report))
        return report

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _plan_section(
        self,
        section: TemplateSection,
        owner_group_name: str | None,
        report: ApplyReport,
    ) -> SectionPlan:
        plan = SectionPlan(ref_pattern=section.ref_pattern)

        for value in section.exclusive:
            for name in _EXCLUSIVE_SPLIT.split(value):
                if not name:
                    continue
                if is_permission(name):
                    plan.exclusive.append(name)
                else:
                    logger.debug(
                        "Ignoring unknown permission %s in %s of %s",
                        name,
                        EXCLUSIVE_GROUP_PERMISSIONS,
                        section.ref_pattern,
                    )

        for permission, rule_strings in section.entries:
            if not is_permission(permission):
                error = InvalidPermissionNameError(permission)
                logger.error("%s in access section %s", error, section.ref_pattern)
                report.problems.append(error)
                continue
            for rule_string in rule_strings:
                try:
                    rule = self._plan_rule(permission, rule_string, owner_group_name)
                except TemplateEntryError as exc:
                    logger.error(
                        "Invalid rule in access.%s.%s: %s", section.ref_pattern, permission, exc
                    )
                    report.problems.append(exc)
                    continue
                plan.rules.append((permission, rule))

        return plan

    def _plan_rule(
        self, permission: str, rule_string: str, owner_group_name: str | None
    ) -> PermissionRule:
        if owner_group_name is not None:
            rule_string = substitute_owner(rule_string, owner_group_name)
        elif OWNER_TOKEN in rule_string:
            raise UnresolvableGroupReferenceError(OWNER_TOKEN)

        rule = PermissionRule.parse(rule_string, might_use_range=has_range(permission))
        if rule.group.is_bound:
            return rule

        try:
            group = self._groups.lookup(rule.group.name)
        except CollaboratorError as exc:
            logger.error("Cannot look up group %s: %s", rule.group.name, exc)
            group = None
        if group is None:
            raise UnresolvableGroupReferenceError(rule.group.name)
        return rule.bind(group)


def _write_sections(config: AccessConfig, sections: list[SectionPlan]) -> None:
    for plan in sections:
        section = config.get_section(plan.ref_pattern) or config.add_section(plan.ref_pattern)
        for name in plan.exclusive:
            permission = section.get_permission(name) or section.add_permission(name)
            permission.exclusive = True
        for name, rule in plan.rules:
            permission = section.get_permission(name) or section.add_permission(name)
            permission.upsert_rule(rule)
    config.prune()
