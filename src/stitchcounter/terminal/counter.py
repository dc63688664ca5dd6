# SPDX-License-Identifier: MIT

from typing import Annotated, Optional, cast

import typer

from stitchcounter.model.counter import CounterLink, CounterPatch
from stitchcounter.model.entity_id import EntityId
from stitchcounter.repository.configuration import CONFIGURATION_REPO
from stitchcounter.repository.id_map import ID_MAP_REPO
from stitchcounter.service.counter import get_counter, linkable_counters
from stitchcounter.service.engine import COUNTER_ENGINE
from stitchcounter.terminal.custom_typer import AliasedTyperGroup
from stitchcounter.terminal.feedback import confirm_destructive, console, engine_errors
from stitchcounter.terminal.parse import (
    parse_id_list,
    resolve_counter_id,
    resolve_project_id,
)
from stitchcounter.view.views import project as project_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _build_link(
    project_id: EntityId,
    link: Optional[int],
    trigger: Optional[int],
    counter_id: Optional[EntityId] = None,
) -> Optional[CounterLink]:
    if link is None:
        if trigger is not None:
            raise typer.BadParameter("--trigger requires --link")
        return None

    # Only counters of the same project, other than the edited one, qualify
    project = COUNTER_ENGINE.get_project(project_id)
    candidates = {
        ID_MAP_REPO.associate_id("counters", counter["id"]): counter
        for counter in linkable_counters(project, counter_id)
    }
    if link not in candidates:
        choices = ", ".join(
            f"{synthetic_id} ({counter['name']})"
            for synthetic_id, counter in candidates.items()
        )
        raise typer.BadParameter(
            f"counter {link} cannot be linked, choose one of: {choices or 'none'}",
            param_hint="--link",
        )

    return cast(
        CounterLink,
        {"target_counter_id": candidates[link]["id"], "trigger_value": trigger},
    )


@app.command("add, a", no_args_is_help=True)
def add(
    project: int,
    name: str,
    min: Annotated[Optional[int], typer.Option("--min")] = None,
    max: Annotated[Optional[int], typer.Option("--max")] = None,
    step: Annotated[Optional[int], typer.Option("--step", "-s")] = None,
    link: Annotated[
        Optional[int],
        typer.Option("--link", "-l", help="id of the counter that drives this one"),
    ] = None,
    trigger: Annotated[
        Optional[int],
        typer.Option("--trigger", "-t", help="advance every N of the linked counter"),
    ] = None,
    auto_only: Annotated[
        bool,
        typer.Option("--auto-only", help="only change through the linked counter"),
    ] = False,
) -> None:
    """Add a counter to a project."""
    config = CONFIGURATION_REPO.get_config()

    with engine_errors():
        project_id = resolve_project_id(project)
        counter_link = _build_link(project_id, link, trigger)
        COUNTER_ENGINE.create_counter(
            project_id,
            name,
            config["default_counter_min"] if min is None else min,
            config["default_counter_max"] if max is None else max,
            config["default_counter_step"] if step is None else step,
            counter_link,
            auto_only,
        )
        updated_project = COUNTER_ENGINE.get_project(project_id)

    project_report.single_project_view(updated_project)


@app.command("modify, m", no_args_is_help=True)
def modify(
    id: int,
    name: Annotated[Optional[str], typer.Option("--name", "-n")] = None,
    min: Annotated[Optional[int], typer.Option("--min")] = None,
    max: Annotated[Optional[int], typer.Option("--max")] = None,
    step: Annotated[Optional[int], typer.Option("--step", "-s")] = None,
    link: Annotated[Optional[int], typer.Option("--link", "-l")] = None,
    trigger: Annotated[Optional[int], typer.Option("--trigger", "-t")] = None,
    unlink: Annotated[bool, typer.Option("--unlink", "-ul")] = False,
    auto_only: Annotated[
        Optional[bool],
        typer.Option("--auto-only/--manual"),
    ] = None,
) -> None:
    """Edit a counter. The value is clamped into the new range."""
    with engine_errors():
        project_id, counter_id = resolve_counter_id(id)

        patch: CounterPatch = {}
        if name is not None:
            patch["name"] = name
        if min is not None:
            patch["min"] = min
        if max is not None:
            patch["max"] = max
        if step is not None:
            patch["step"] = step
        if auto_only is not None:
            patch["is_manually_disabled"] = auto_only
        if unlink:
            patch["link"] = None
        elif link is not None:
            patch["link"] = _build_link(project_id, link, trigger, counter_id)
        elif trigger is not None:
            # Keep the current parent, change only the trigger
            current = get_counter(COUNTER_ENGINE.get_project(project_id), counter_id)
            if current["linked_to_counter_id"] is None:
                raise typer.BadParameter("--trigger requires --link")
            patch["link"] = {
                "target_counter_id": current["linked_to_counter_id"],
                "trigger_value": trigger,
            }

        COUNTER_ENGINE.update_counter(project_id, counter_id, patch)
        updated_project = COUNTER_ENGINE.get_project(project_id)

    project_report.single_project_view(updated_project)


@app.command("inc, i", no_args_is_help=True)
def inc(id: int) -> None:
    """Increment a counter, advancing linked counters on their trigger."""
    with engine_errors():
        project_id, counter_id = resolve_counter_id(id)
        result = COUNTER_ENGINE.increment_counter(project_id, counter_id)

    updated_project = result["project"]
    counter = get_counter(updated_project, counter_id)
    console.print(f"[bold]{counter['name']}[/bold] → {counter['value']}")
    for triggered_id in result["triggered_counter_ids"]:
        triggered = get_counter(updated_project, triggered_id)
        console.print(
            f"  [magenta]triggered[/magenta] "
            f"{triggered['name']} → {triggered['value']}"
        )

    project_report.single_project_view(
        updated_project, result["triggered_counter_ids"]
    )


@app.command("dec", no_args_is_help=True)
def dec(id: int) -> None:
    """Decrement a counter. Linked counters are left alone."""
    with engine_errors():
        project_id, counter_id = resolve_counter_id(id)
        updated_project = COUNTER_ENGINE.decrement_counter(project_id, counter_id)

    counter = get_counter(updated_project, counter_id)
    console.print(f"[bold]{counter['name']}[/bold] → {counter['value']}")
    project_report.single_project_view(updated_project)


@app.command("reset, r", no_args_is_help=True)
def reset(
    id: int,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Reset a counter and the counters linked to it to their minimum."""
    with engine_errors():
        project_id, counter_id = resolve_counter_id(id)
        counter = get_counter(COUNTER_ENGINE.get_project(project_id), counter_id)

    confirm_destructive(f"Reset '{counter['name']}' and its linked counters?", yes)

    with engine_errors():
        updated_project = COUNTER_ENGINE.reset_counter(project_id, counter_id)

    project_report.single_project_view(updated_project)


@app.command("delete, d", no_args_is_help=True)
def delete(
    id: str,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete counter(s). Counters linked to them become unlinked."""
    ids: list[int] = parse_id_list(id)

    for counter_synthetic_id in ids:
        with engine_errors():
            project_id, counter_id = resolve_counter_id(counter_synthetic_id)
            counter = get_counter(COUNTER_ENGINE.get_project(project_id), counter_id)

        confirm_destructive(f"Delete counter '{counter['name']}'?", yes)

        with engine_errors():
            COUNTER_ENGINE.delete_counter(project_id, counter_id)
        console.print(f"Deleted counter [bold]{counter['name']}[/bold]")
