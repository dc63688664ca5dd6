# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from stitchcounter import configuration
from stitchcounter.repository.configuration import CONFIGURATION_REPO
from stitchcounter.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _config_table(title: Optional[str] = None) -> Table:
    config = CONFIGURATION_REPO.get_config()

    table = Table(title=title)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("default_counter_min", str(config["default_counter_min"]))
    table.add_row("default_counter_max", str(config["default_counter_max"]))
    table.add_row("default_counter_step", str(config["default_counter_step"]))
    table.add_row(
        "show_header",
        "✓ Enabled" if config["show_header"] else "✗ Disabled",
    )
    table.add_row(
        "confirm_destructive",
        "✓ Enabled" if config.get("confirm_destructive", True) else "✗ Disabled",
    )
    table.add_row("log_level", config.get("log_level", "WARNING"))
    return table


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    console = Console()
    console.print(_config_table())


@app.command("set, s")
def set(
    data_path: Annotated[
        Optional[str],
        typer.Option(
            "--data-path",
            help="Directory path for storing data files",
        ),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option(
            "--remove-data-path",
            help="Reset data path to the platform default",
        ),
    ] = False,
    default_counter_min: Annotated[
        Optional[int],
        typer.Option("--default-min", help="Min for new counters"),
    ] = None,
    default_counter_max: Annotated[
        Optional[int],
        typer.Option("--default-max", help="Max for new counters"),
    ] = None,
    default_counter_step: Annotated[
        Optional[int],
        typer.Option("--default-step", min=1, help="Step for new counters"),
    ] = None,
    show_header: Annotated[
        Optional[bool],
        typer.Option("--show-header/--no-show-header"),
    ] = None,
    confirm_destructive: Annotated[
        Optional[bool],
        typer.Option(
            "--confirm/--no-confirm",
            help="Ask before deleting or resetting",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    CONFIGURATION_REPO.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        default_counter_min=default_counter_min,
        default_counter_max=default_counter_max,
        default_counter_step=default_counter_step,
        show_header=show_header,
        confirm_destructive=confirm_destructive,
        log_level=log_level,
    )
    CONFIGURATION_REPO.flush()

    console = Console()
    console.print("[green]Configuration updated successfully![/green]\n")
    console.print(_config_table("Updated Configuration"))
