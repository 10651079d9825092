"""CLI entry point; importing the command modules registers them."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="codetally",
    help="codetally - code, comment and blank line statistics per language",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"codetally {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Count code, comment and blank lines across a project tree."""


# Import subcommands to register them
from .info import info as _info  # noqa: F401, E402
from .languages import languages as _languages  # noqa: F401, E402
