# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from stitchcounter.logging_config import configure_logging
from stitchcounter.repository.configuration import CONFIGURATION_REPO
from stitchcounter.terminal import configuration, counter, project
from stitchcounter.terminal.custom_typer import OrderedAliasedTyperGroup
from stitchcounter.view import state as view_state

app = typer.Typer(
    cls=OrderedAliasedTyperGroup,
    help="stitchcounter - row and stitch counters for craft projects",
    no_args_is_help=True,
)
app.add_typer(project.app, name="project, p")
app.add_typer(counter.app, name="counter, c")
app.add_typer(configuration.app, name="config, cf")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Log engine activity to stderr"),
    ] = False,
) -> None:
    """
    stitchcounter - row and stitch counters for craft projects

    Global options that apply to all commands.
    """
    config = CONFIGURATION_REPO.get_config()
    configure_logging(config.get("log_level", "WARNING"), verbose=verbose)
    view_state.set_show_header(config["show_header"] and not no_header)


def run() -> None:
    app()
