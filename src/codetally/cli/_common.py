"""Shared CLI helpers."""

from typing import Optional

from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def flag(value: bool) -> Optional[bool]:
    """Map an unset boolean flag to None so config files keep their value."""
    return True if value else None
