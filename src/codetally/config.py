"""Scan options and their loading.

Option sources are merged in priority order:
    1. Defaults (defined in ScanOptions)
    2. Global config (~/.codetally.toml)
    3. Project config (./codetally.toml)
    4. Explicit config file
    5. Environment variables (CODETALLY_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> options = load_options(with_functions=True, concurrency=4)
    >>> options.concurrency
    4
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import InvalidConfigError


@dataclass(frozen=True)
class ScanOptions:
    """Immutable options for one scan invocation.

    Attributes:
        Filtering:
            include: Globs a file must match (empty = everything)
            exclude: Globs that exclude a path, overriding include
            respect_gitignore: Evaluate .gitignore files found under the root
            follow_symlinks: Follow symlinks (directory cycles are guarded)
            max_file_size_bytes: Skip larger files (0 = unlimited)

        Performance:
            concurrency: Worker threads (0 = logical CPU count)

        Structural counts:
            with_functions: Count function declarations where supported
            with_structs: Count struct/type declarations where supported

        Result detail:
            with_file_details: Keep the flat list of every FileRecord
            with_language_files: Keep each language's FileRecords
            with_language_specific: Extract package/import metadata
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    respect_gitignore: bool = True
    follow_symlinks: bool = False
    max_file_size_bytes: int = 0

    concurrency: int = 0

    with_functions: bool = False
    with_structs: bool = False

    with_file_details: bool = False
    with_language_files: bool = False
    with_language_specific: bool = False

    def __post_init__(self) -> None:
        """Normalize pattern collections and validate values."""
        for name in ("include", "exclude"):
            value = getattr(self, name)
            if isinstance(value, str):
                value = (value,)
            patterns = tuple(p.strip() for p in value if p and p.strip())
            for pattern in patterns:
                reason = glob_syntax_error(pattern)
                if reason:
                    raise InvalidConfigError(name, pattern, reason)
            object.__setattr__(self, name, patterns)

        if self.max_file_size_bytes < 0:
            raise InvalidConfigError(
                "max_file_size_bytes", self.max_file_size_bytes, "must be non-negative"
            )
        if self.concurrency < 0:
            raise InvalidConfigError("concurrency", self.concurrency, "must be non-negative")

    @property
    def wants_structures(self) -> bool:
        return self.with_functions or self.with_structs

    @property
    def workers(self) -> int:
        """Resolved worker count."""
        if self.concurrency > 0:
            return self.concurrency
        return max(os.cpu_count() or 1, 1)


def glob_syntax_error(pattern: str) -> Optional[str]:
    """Return why a glob pattern is malformed, or None if it is valid.

    fnmatch accepts anything, so the two malformed shapes are checked
    here: an unterminated character class and a dangling escape.
    """
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\":
            if i + 1 >= n:
                return "trailing escape character"
            i += 2
            continue
        if ch == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                return "unterminated character class"
            i = j + 1
            continue
        i += 1
    return None


def load_options(config_file: Optional[Path] = None, **overrides: Any) -> ScanOptions:
    """Load scan options with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset flags fall through.

    Returns:
        Validated ScanOptions instance

    Raises:
        InvalidConfigError: If a config file is missing or holds bad values
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".codetally.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "codetally.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidConfigError("config_file", config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(ScanOptions)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise InvalidConfigError(unknown[0], merged[unknown[0]], "unknown option")

    for key in ("include", "exclude"):
        if key in merged:
            value = merged[key]
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, (list, tuple)):
                raise InvalidConfigError(key, value, "expected a list of globs")
            merged[key] = tuple(value)

    return ScanOptions(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load options from CODETALLY_* environment variables.

    Bool fields accept true/false/1/0/yes/no/on/off, int fields accept
    integers and pattern fields accept comma-separated globs, e.g.
    ``CODETALLY_EXCLUDE=vendor,dist``.
    """
    type_hints = get_type_hints(ScanOptions)
    result: dict[str, Any] = {}

    for f in fields(ScanOptions):
        env_key = f"CODETALLY_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[f.name] = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    if type_hint is bool:
        lower = value.strip().lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # tuple[str, ...]
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file; options may sit at top level or under [scan]."""
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError("config_file", path, str(e))

    section = data.get("scan")
    if isinstance(section, dict):
        return dict(section)
    return data
