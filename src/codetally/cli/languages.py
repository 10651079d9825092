"""Languages command: list the recognized languages."""

import typer
from rich.table import Table
from rich.text import Text

from ..scanning import LANGUAGES
from . import app
from ._common import console


@app.command()
def languages(
    names_only: bool = typer.Option(
        False,
        "--names",
        help="Print language names only, one per line",
    ),
):
    """List recognized languages, their extensions and comment syntax."""
    if names_only:
        for name in sorted(LANGUAGES):
            typer.echo(name)
        return

    table = Table(show_header=True, header_style="bold", show_edge=False)
    table.add_column("language", style="cyan")
    table.add_column("extensions / filenames", overflow="fold")
    table.add_column("line comment")
    table.add_column("block comment")
    table.add_column("structure", justify="center")

    for name in sorted(LANGUAGES):
        spec = LANGUAGES[name]
        matches = " ".join(list(spec.extensions) + list(spec.filenames))
        line = " ".join(spec.line_comments) or "-"
        block = " ".join(f"{start} {end}" for start, end in spec.block_comments) or "-"
        structural = "yes" if spec.structural else ""
        table.add_row(name, Text(matches), Text(line), Text(block), structural)

    console.print(table)
