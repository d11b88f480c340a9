"""CLI entry point for project-group-structure.

Invoked as::

    project-structure [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m project_group_structure.cli.main

Commands
--------
- check            Evaluate a project creation request against a platform state
- fallback-name    Show the owner group name of a project and its fallback
- template check   Show what a default access rights template would set
- audit show       Display recent audit entries
- version          Show version information
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import yaml
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from project_group_structure.platform.memory import InMemoryPlatform
    from project_group_structure.plugin.config_loader import StructureConfig

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("project-structure.yaml")


def _load_config(config_path: str, root_project: str | None = None) -> "StructureConfig":
    from project_group_structure.plugin.config_loader import ConfigLoader, StructureConfig

    cfg_path = Path(config_path)
    if cfg_path.exists():
        return ConfigLoader().load(cfg_path)
    if root_project is not None:
        return StructureConfig(root_project=root_project)
    return ConfigLoader().defaults()


def _load_platform(state_path: str | None) -> "InMemoryPlatform":
    from project_group_structure.errors import CollaboratorError
    from project_group_structure.platform.memory import InMemoryPlatform

    if state_path is None:
        return InMemoryPlatform.create()
    try:
        with Path(state_path).open("r", encoding="utf-8") as fh:
            state: dict[str, object] = yaml.safe_load(fh) or {}
        return InMemoryPlatform.from_dict(state)
    except (yaml.YAMLError, CollaboratorError, KeyError, TypeError, AttributeError) as exc:
        err_console.print(f"[red]Invalid platform state {state_path}:[/red] {escape(str(exc))}")
        sys.exit(2)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="project-group-structure")
def cli() -> None:
    """Project structure CLI: creation checks, owner groups and access templates."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from project_group_structure import __version__

    console.print(
        Panel(
            f"[bold]project-group-structure[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Hierarchical project creation policy enforcement.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.option(
    "--state",
    "-s",
    "state_path",
    required=True,
    type=click.Path(exists=True),
    help="YAML platform state (groups, projects, owners, configuration).",
)
@click.option("--name", "-n", required=True, help="Name of the project to create.")
@click.option("--parent", "-p", default=None, help="Parent project; defaults to the root project.")
@click.option("--user", "-u", "requester", required=True, help="Identity of the requester.")
@click.option(
    "--permissions-only",
    is_flag=True,
    default=False,
    help="Create a project that only holds access rights.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(),
    help="Path to project-structure.yaml.",
)
def check_command(
    state_path: str,
    name: str,
    parent: str | None,
    requester: str,
    permissions_only: bool,
    config_path: str,
) -> None:
    """Evaluate a project creation request."""
    from project_group_structure.creation import CreationRequest
    from project_group_structure.plugin.structure_plugin import ProjectStructurePlugin

    platform = _load_platform(state_path)
    config = _load_config(config_path, root_project=platform.store.root_project)
    plugin = ProjectStructurePlugin.from_platform(platform, config=config)

    request = CreationRequest(
        candidate_name=name,
        parent_name=parent or config.root_project,
        requester=requester,
        permissions_only=permissions_only,
    )
    outcome = plugin.validate_creation(request)

    if outcome.accepted:
        status_str = "[green]ACCEPTED[/green]"
        if outcome.bypassed_by_admin:
            status_str += " [dim](administrator)[/dim]"
    else:
        status_str = "[red]REJECTED[/red]"
    console.print(Panel(status_str, title="Project Creation Check", border_style="blue"))

    if outcome.reason is not None:
        console.print(f"  Reason: [bold red]{outcome.reason.value}[/bold red]")
    if outcome.message:
        console.print(f"  Message: {escape(outcome.message)}")
    if outcome.owner_group is not None:
        console.print(f"  Owner group: [cyan]{escape(outcome.owner_group.name)}[/cyan]")

    sys.exit(0 if outcome.accepted else 1)


# ---------------------------------------------------------------------------
# fallback-name
# ---------------------------------------------------------------------------


@cli.command(name="fallback-name")
@click.argument("project_name")
def fallback_name_command(project_name: str) -> None:
    """Show the owner group name of PROJECT_NAME and its conflict fallback."""
    from project_group_structure.ownership.provisioner import fallback_group_name, owner_group_name

    group_name = owner_group_name(project_name)
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Kind", style="dim")
    table.add_column("Name", style="cyan")
    table.add_row("owner group", escape(group_name))
    table.add_row("fallback", escape(fallback_group_name(group_name)))
    console.print(table)


# ---------------------------------------------------------------------------
# template group
# ---------------------------------------------------------------------------


@cli.group(name="template")
def template_group() -> None:
    """Default access rights template commands."""


@template_group.command(name="check")
@click.option(
    "--template",
    "-t",
    "template_path",
    required=True,
    type=click.Path(),
    help="Path to the access rights template YAML.",
)
@click.option(
    "--state",
    "-s",
    "state_path",
    default=None,
    type=click.Path(exists=True),
    help="YAML platform state used to resolve group names.",
)
@click.option("--owner", "-o", default=None, help="Owner group name substituted for ${owner}.")
def template_check_command(
    template_path: str, state_path: str | None, owner: str | None
) -> None:
    """Show the access rights a template would set on a root project."""
    from project_group_structure.access.applier import AccessRightsTemplateApplier
    from project_group_structure.access.template import AccessRightsTemplate
    from project_group_structure.errors import TemplateLoadError

    try:
        template = AccessRightsTemplate.load(template_path)
    except TemplateLoadError as exc:
        err_console.print(f"[red]Template error:[/red] {escape(str(exc))}")
        sys.exit(1)

    platform = _load_platform(state_path)
    applier = AccessRightsTemplateApplier(template, platform.groups, platform.store)
    report = applier.plan(owner)

    table = Table(title="Access Rights", box=box.SIMPLE)
    table.add_column("Ref", style="cyan")
    table.add_column("Permission", style="magenta")
    table.add_column("Rule")
    for section in report.sections:
        for name in section.exclusive:
            table.add_row(escape(section.ref_pattern), name, "[dim]exclusive[/dim]")
        for name, rule in section.rules:
            table.add_row(escape(section.ref_pattern), name, escape(rule.to_config_string()))
    console.print(table)

    if report.problems:
        problems = Table(title="Skipped Entries", box=box.SIMPLE)
        problems.add_column("Kind", style="yellow")
        problems.add_column("Detail")
        for problem in report.problems:
            problems.add_row(type(problem).__name__, escape(str(problem)))
        console.print(problems)

    console.print(
        f"  Sections: [cyan]{len(report.sections)}[/cyan]  "
        f"Rules: [cyan]{report.rule_count}[/cyan]  "
        f"Skipped: [yellow]{len(report.problems)}[/yellow]"
    )


# ---------------------------------------------------------------------------
# audit group
# ---------------------------------------------------------------------------


@cli.group(name="audit")
def audit_group() -> None:
    """Audit trail commands."""


@audit_group.command(name="show")
@click.option("--last", "-n", default=20, show_default=True, type=int, help="Number of recent entries to show.")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    type=click.Path(),
    help="Path to project-structure.yaml.",
)
def audit_show_command(last: int, config_path: str) -> None:
    """Show recent audit log entries."""
    from project_group_structure.audit.logger import AuditLogger

    config = _load_config(config_path)
    audit = AuditLogger(log_path=config.audit.log_path)
    records = audit.last_n(last)

    if not records:
        console.print("[yellow]No audit entries found.[/yellow]")
        return

    table = Table(title=f"Last {last} Audit Events", box=box.SIMPLE)
    table.add_column("Timestamp", style="dim", no_wrap=True)
    table.add_column("Event", style="cyan")
    table.add_column("Project", style="magenta")
    table.add_column("Detail")

    for record in records:
        ts = str(record.get("timestamp", ""))[:19].replace("T", " ")
        event = str(record.get("event", ""))
        project = str(record.get("project", ""))
        detail = str(record.get("reason") or record.get("group") or record.get("error") or "")
        table.add_row(ts, event, escape(project), escape(detail))

    console.print(table)
    console.print(f"  Total audit records: [cyan]{audit.count()}[/cyan]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
