# SPDX-License-Identifier: MIT

from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console

from stitchcounter.repository.configuration import CONFIGURATION_REPO
from stitchcounter.service.error import (
    InvalidOperationError,
    NotFoundError,
    StorageError,
    ValidationError,
)

console = Console()


@contextmanager
def engine_errors() -> Iterator[None]:
    """
    Map engine errors to terminal output and exit codes.

    Refused operations (ceiling, floor, auto-only) are a no-op for the user
    and exit cleanly, everything else exits with 1.
    """
    try:
        yield
    except InvalidOperationError as e:
        console.print(f"[bright_black]{e.reason}[/bright_black]")
        raise typer.Exit(0)
    except ValidationError as e:
        console.print(f"[red]Invalid {e.field}:[/red] {e.message}")
        raise typer.Exit(1)
    except NotFoundError as e:
        console.print(f"[red]No {e.kind} with id {e.entity_id}[/red]")
        raise typer.Exit(1)
    except StorageError as e:
        console.print(f"[red]Storage error:[/red] {e}")
        raise typer.Exit(1)


def confirm_destructive(message: str, yes: bool) -> None:
    """Ask before deleting, unless --yes or the config turned prompts off."""
    if yes:
        return
    config = CONFIGURATION_REPO.get_config()
    if not config.get("confirm_destructive", True):
        return
    if not typer.confirm(message):
        console.print("[bright_black]Cancelled[/bright_black]")
        raise typer.Exit(0)
