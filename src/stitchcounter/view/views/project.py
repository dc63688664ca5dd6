# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from stitchcounter.model.entity_id import EntityId
from stitchcounter.model.project import Project
from stitchcounter.repository.id_map import ID_MAP_REPO
from stitchcounter.service.counter import is_linked_parent, project_progress
from stitchcounter.time import (
    datetime_to_age_str,
    datetime_to_display_local_date_str,
)
from stitchcounter.view.util import (
    STATE_COLORS,
    counter_state,
    describe_counter,
    format_progress,
    format_range,
    should_show_range,
)
from stitchcounter.view.views.header import header


def project_status(project: Project) -> str:
    return "Active" if project["is_active"] else "Completed"


def projects_view(
    report_name: str,
    projects: list[Project],
    columns: list[str] = ["id", "name", "status", "counters", "progress", "age"],
) -> None:
    """Display list of projects in a table."""
    header(report_name)

    projects_table = Table(box=box.SIMPLE)
    for column in columns:
        projects_table.add_column(column)

    for project in projects:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = str(ID_MAP_REPO.associate_id("projects", project["id"]))
            elif column == "name":
                column_value = project["name"]
            elif column == "status":
                column_value = project_status(project)
            elif column == "counters":
                column_value = str(len(project["counters"]))
            elif column == "progress":
                column_value = format_progress(*project_progress(project))
            elif column == "age":
                column_value = datetime_to_age_str(project["created_at"])
            elif column == "description":
                column_value = project["description"] or ""

            if not project["is_active"]:
                column_value = f"[bright_black]{column_value}[/bright_black]"

            row.append(column_value)
        projects_table.add_row(*row)

    console = Console()
    console.print(projects_table)


def single_project_view(
    project: Project,
    triggered_counter_ids: Optional[list[EntityId]] = None,
) -> None:
    """
    Display a project and, when expanded, its counters.

    Counters advanced by a cascade in the last operation are marked.
    """
    header("project")
    console = Console()

    project_table = Table(box=box.SIMPLE, show_header=False)
    project_table.add_column("property")
    project_table.add_column("value")
    project_table.add_row(
        "id", str(ID_MAP_REPO.associate_id("projects", project["id"]))
    )
    project_table.add_row("name", project["name"])
    project_table.add_row("description", project["description"] or "")
    project_table.add_row("status", project_status(project))
    project_table.add_row(
        "created", datetime_to_display_local_date_str(project["created_at"])
    )
    project_table.add_row(
        "progress", format_progress(*project_progress(project))
    )
    console.print(project_table)

    if not project["is_expanded"]:
        hidden = len(project["counters"])
        console.print(f" [bright_black]{hidden} counter(s) hidden[/bright_black]")
        return

    counters_table(project, triggered_counter_ids or [])


def counters_table(project: Project, triggered_counter_ids: list[EntityId]) -> None:
    table = Table(box=box.SIMPLE)
    for column in ("id", "name", "value", "range", "rule", ""):
        table.add_column(column)

    for counter in project["counters"]:
        state = counter_state(counter)
        color = STATE_COLORS[state]

        markers = []
        if is_linked_parent(project, counter["id"]):
            markers.append("linked")
        if state == "disabled":
            markers.append("auto-only")
        if counter["id"] in triggered_counter_ids:
            markers.append("[bold magenta]triggered[/bold magenta]")

        table.add_row(
            str(ID_MAP_REPO.associate_id("counters", counter["id"])),
            counter["name"],
            f"[{color}]{counter['value']}[/{color}]",
            format_range(counter) if should_show_range(counter) else "",
            describe_counter(project, counter),
            ", ".join(markers),
        )

    console = Console()
    console.print(table)
