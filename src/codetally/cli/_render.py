"""Rich table and JSON rendering of a ProjectSummary."""

import json
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ..config import ScanOptions
from ..scanning.languages import UNKNOWN
from ..scanning.models import ProjectSummary


def summary_json(summary: ProjectSummary) -> str:
    return json.dumps(summary.as_dict(), indent=2)


def _count(value: Optional[int]) -> str:
    return str(value or 0)


def language_table(summary: ProjectSummary, options: ScanOptions) -> Table:
    """Per-language rows plus a TOTAL row.

    The Unknown bucket is left out of the table; code percentages are
    relative to the languages shown.
    """
    table = Table(show_header=True, header_style="bold", show_edge=False)
    table.add_column("language", style="cyan")
    for header in ("files", "code", "comments", "blanks", "code%", "lines"):
        table.add_column(header, justify="right")
    if options.with_functions:
        table.add_column("funcs", justify="right")
    if options.with_structs:
        table.add_column("structs", justify="right")

    shown = {name: s for name, s in summary.languages.items() if name != UNKNOWN}
    shown_code = sum(s.stats.code for s in shown.values())

    totals = {"files": 0, "code": 0, "comment": 0, "blank": 0, "funcs": 0, "structs": 0}
    for name, lang in shown.items():
        pct = lang.stats.code * 100 / shown_code if shown_code else 0.0
        row = [
            name,
            str(lang.file_count),
            str(lang.stats.code),
            str(lang.stats.comment),
            str(lang.stats.blank),
            f"{pct:.1f}%",
            str(lang.stats.total),
        ]
        if options.with_functions:
            row.append(_count(lang.functions))
        if options.with_structs:
            row.append(_count(lang.structs))
        table.add_row(*row)

        totals["files"] += lang.file_count
        totals["code"] += lang.stats.code
        totals["comment"] += lang.stats.comment
        totals["blank"] += lang.stats.blank
        totals["funcs"] += lang.functions or 0
        totals["structs"] += lang.structs or 0

    if shown:
        row = [
            "TOTAL",
            str(totals["files"]),
            str(totals["code"]),
            str(totals["comment"]),
            str(totals["blank"]),
            "100.0%",
            str(totals["code"] + totals["comment"] + totals["blank"]),
        ]
        if options.with_functions:
            row.append(str(totals["funcs"]))
        if options.with_structs:
            row.append(str(totals["structs"]))
        table.add_row(*row, style="bold")
    return table


def file_table(summary: ProjectSummary, options: ScanOptions) -> Table:
    """One row per file, in the summary's (language, path) order."""
    table = Table(show_header=True, header_style="bold", show_edge=False)
    table.add_column("path", overflow="fold")
    table.add_column("language", style="cyan")
    for header in ("code", "comments", "blanks", "lines"):
        table.add_column(header, justify="right")
    if options.with_functions:
        table.add_column("funcs", justify="right")
    if options.with_structs:
        table.add_column("structs", justify="right")

    for record in summary.files:
        row = [
            Text(record.path),
            record.language,
            str(record.stats.code),
            str(record.stats.comment),
            str(record.stats.blank),
            str(record.stats.total),
        ]
        details = record.details
        if options.with_functions:
            row.append(_count(details.functions) if details else "-")
        if options.with_structs:
            row.append(_count(details.structs) if details else "-")
        table.add_row(*row)
    return table


def render_rich(
    console: Console,
    summary: ProjectSummary,
    options: ScanOptions,
    root: Optional[Path] = None,
    show_header: bool = True,
) -> None:
    if show_header and root is not None:
        console.print(f"[bold]Project:[/bold] {escape(str(root))}")
    console.print(language_table(summary, options))

    if options.with_file_details and summary.files:
        console.print()
        console.print("[bold]Files:[/bold]")
        console.print(file_table(summary, options))

    if summary.skipped:
        console.print()
        console.print(f"[yellow]Skipped {len(summary.skipped)} file(s):[/yellow]")
        for skipped in summary.skipped:
            console.print(f"  {skipped.path}: {skipped.reason}", markup=False)
