"""Info command: scan a project and print per-language line statistics."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..config import load_options
from ..exceptions import CodetallyError, ScanCancelledError
from ..logging_config import setup_logging
from ..scanning import CancelToken, scan_project
from . import app
from ._common import console, err_console, flag
from ._render import render_rich, summary_json

FORMATS = ("rich", "json")


@app.command()
def info(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory to scan",
    ),
    include: Optional[List[str]] = typer.Option(
        None,
        "--include",
        "-i",
        help="Only count files matching this glob (repeatable)",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Skip paths matching this glob (repeatable, wins over --include)",
    ),
    no_gitignore: bool = typer.Option(
        False,
        "--no-gitignore",
        help="Do not evaluate .gitignore files",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        help="Follow symbolic links to files and directories",
    ),
    max_size: Optional[int] = typer.Option(
        None,
        "--max-size",
        min=0,
        help="Skip files larger than this many bytes (0 = unlimited)",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=0,
        help="Worker threads (0 = CPU count)",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        min=0,
        help="Cancel the scan after this many seconds",
    ),
    functions: bool = typer.Option(
        False,
        "--functions",
        help="Count function declarations (Go, Python, Rust)",
    ),
    structs: bool = typer.Option(
        False,
        "--structs",
        help="Count struct/type declarations (Go, Python, Rust)",
    ),
    files: bool = typer.Option(
        False,
        "--files",
        help="List every counted file",
    ),
    language_files: bool = typer.Option(
        False,
        "--language-files",
        help="Keep per-language file lists (JSON output)",
    ),
    language_specific: bool = typer.Option(
        False,
        "--language-specific",
        help="Extract package and import metadata (JSON output)",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich, json",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress warnings",
    ),
):
    """
    Count code, comment and blank lines per language.

    [bold cyan]EXAMPLES:[/bold cyan]

      [dim]# Scan the current directory[/dim]
      codetally info

      [dim]# Only Go sources, with function and struct counts[/dim]
      codetally info ./src -i "*.go" --functions --structs

      [dim]# Machine-readable output with per-file detail[/dim]
      codetally info --format json --files

      [dim]# Skip vendored code and large files[/dim]
      codetally info -e "vendor/" --max-size 1000000
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    if output_format not in FORMATS:
        err_console.print(
            f"[red]Error:[/red] unknown format '{output_format}' (choose from {', '.join(FORMATS)})"
        )
        raise typer.Exit(2)

    try:
        options = load_options(
            config_file=config,
            include=include or None,
            exclude=exclude or None,
            respect_gitignore=False if no_gitignore else None,
            follow_symlinks=flag(follow_symlinks),
            max_file_size_bytes=max_size,
            concurrency=workers,
            with_functions=flag(functions),
            with_structs=flag(structs),
            with_file_details=flag(files),
            with_language_files=flag(language_files),
            with_language_specific=flag(language_specific),
        )
        token = CancelToken(timeout=timeout)

        if output_format == "json":
            summary = scan_project(path, options, token)
            typer.echo(summary_json(summary))
        else:
            with console.status("[bold green]Scanning..."):
                summary = scan_project(path, options, token)
            render_rich(console, summary, options, root=path.resolve())

    except typer.Exit:
        raise

    except ScanCancelledError as e:
        err_console.print(f"[yellow]Scan cancelled:[/yellow] {escape(e.reason)}")
        if e.partial is not None:
            err_console.print(f"[dim]{e.partial.total.file_count} files counted before stopping[/dim]")
        raise typer.Exit(130)

    except CodetallyError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Scan failed")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
