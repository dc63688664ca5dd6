# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from stitchcounter.model.project import ProjectPatch
from stitchcounter.service.engine import COUNTER_ENGINE
from stitchcounter.terminal.custom_typer import AliasedTyperGroup
from stitchcounter.terminal.feedback import confirm_destructive, console, engine_errors
from stitchcounter.terminal.parse import parse_id_list, resolve_project_id
from stitchcounter.view.views import project as project_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _update(id: int, patch: ProjectPatch) -> None:
    with engine_errors():
        project = COUNTER_ENGINE.update_project(resolve_project_id(id), patch)
    project_report.single_project_view(project)


@app.command("add, a", no_args_is_help=True)
def add(
    name: str,
    description: Annotated[
        Optional[str],
        typer.Option("--description", "-d"),
    ] = None,
) -> None:
    """Create a new project."""
    with engine_errors():
        project = COUNTER_ENGINE.create_project(name, description)

    project_report.single_project_view(project)


@app.command("list, ls")
def list_projects(
    all: Annotated[
        bool, typer.Option("--all", "-a", help="Include completed projects")
    ] = False,
    completed: Annotated[
        bool, typer.Option("--completed", "-c", help="Only completed projects")
    ] = False,
) -> None:
    """List projects, active ones by default."""
    with engine_errors():
        projects = COUNTER_ENGINE.list_projects()

    report_name = "active projects"
    if completed:
        projects = [p for p in projects if not p["is_active"]]
        report_name = "completed projects"
    elif not all:
        projects = [p for p in projects if p["is_active"]]
    else:
        report_name = "all projects"

    project_report.projects_view(report_name, projects)


@app.command("show, s", no_args_is_help=True)
def show(id: int) -> None:
    """Show a project with its counters."""
    with engine_errors():
        project = COUNTER_ENGINE.get_project(resolve_project_id(id))

    project_report.single_project_view(project)


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: int,
    name: Annotated[Optional[str], typer.Option("--name", "-n")] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
    remove_description: Annotated[
        bool, typer.Option("--remove-description", "-rd")
    ] = False,
) -> None:
    """Rename a project or change its description."""
    patch: ProjectPatch = {}
    if name is not None:
        patch["name"] = name
    if description is not None:
        patch["description"] = description
    if remove_description:
        patch["description"] = None

    _update(id, patch)


@app.command("complete, done", no_args_is_help=True)
def complete(id: int) -> None:
    """Mark a project as completed."""
    _update(id, {"is_active": False})


@app.command("activate, act", no_args_is_help=True)
def activate(id: int) -> None:
    """Mark a completed project as active again."""
    _update(id, {"is_active": True})


@app.command("collapse, col", no_args_is_help=True)
def collapse(id: int) -> None:
    """Hide a project's counters in the project view."""
    _update(id, {"is_expanded": False})


@app.command("expand, exp", no_args_is_help=True)
def expand(id: int) -> None:
    """Show a project's counters in the project view."""
    _update(id, {"is_expanded": True})


@app.command("delete, d", no_args_is_help=True)
def delete(
    id: str,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete project(s) and all of their counters."""
    ids: list[int] = parse_id_list(id)

    for project_id in ids:
        with engine_errors():
            real_id = resolve_project_id(project_id)
            project = COUNTER_ENGINE.get_project(real_id)

        confirm_destructive(
            f"Delete project '{project['name']}' and its "
            f"{len(project['counters'])} counter(s)?",
            yes,
        )

        with engine_errors():
            COUNTER_ENGINE.delete_project(real_id)
        console.print(f"Deleted project [bold]{project['name']}[/bold]")
