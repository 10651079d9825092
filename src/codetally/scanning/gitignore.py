"""Gitignore rule evaluation.

Each ``.gitignore`` compiles to a GitIgnoreFile scoped to the directory
that holds it. GitIgnoreRules stacks those files from the scan root down
to the directory being walked and answers "is this path ignored?" with
git's precedence: within a file the last matching pattern wins, and a
nearer file's verdict overrides a farther one. Negated patterns (``!``)
re-include. Directory-only patterns (``build/``) only match directories.

Pattern syntax itself is compiled by pathspec's "gitignore" pattern factory.
This module is pure: loading is the only function that touches disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from ..logging_config import get_logger

logger = get_logger(__name__)

GITIGNORE_NAME = ".gitignore"


@dataclass(frozen=True)
class GitIgnoreFile:
    """Patterns from one .gitignore, scoped to ``base``.

    Attributes:
        base: Directory holding the file, relative to the scan root
              ("" for the root itself), "/"-separated
        patterns: Compiled patterns in file order (comments removed)
    """

    base: str
    patterns: tuple[pathspec.Pattern, ...]

    @classmethod
    def from_lines(cls, lines: Iterable[str], base: str = "") -> GitIgnoreFile:
        spec = pathspec.PathSpec.from_lines("gitignore", lines)
        patterns = tuple(p for p in spec.patterns if p.include is not None)
        return cls(base=base.strip("/"), patterns=patterns)

    def match(self, rel_path: str, is_dir: bool = False) -> Optional[bool]:
        """Evaluate a root-relative path against this file.

        Returns:
            True if ignored, False if re-included by a negation, None if
            no pattern matched (or the path lies outside ``base``)
        """
        if self.base:
            prefix = self.base + "/"
            if not rel_path.startswith(prefix):
                return None
            rel_path = rel_path[len(prefix) :]
        if not rel_path:
            return None
        candidate = rel_path + "/" if is_dir else rel_path

        verdict: Optional[bool] = None
        for pattern in self.patterns:
            if pattern.regex.match(candidate) is not None:
                verdict = bool(pattern.include)
        return verdict


class GitIgnoreRules:
    """The .gitignore files in effect for one directory, farthest first."""

    def __init__(self, files: Iterable[GitIgnoreFile] = ()):
        self.files: tuple[GitIgnoreFile, ...] = tuple(files)

    def with_file(self, gitignore: Optional[GitIgnoreFile]) -> GitIgnoreRules:
        """Return a new rule stack with a nearer file appended."""
        if gitignore is None or not gitignore.patterns:
            return self
        return GitIgnoreRules(self.files + (gitignore,))

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        ignored = False
        for gitignore in self.files:
            verdict = gitignore.match(rel_path, is_dir)
            if verdict is not None:
                ignored = verdict
        return ignored

    def __bool__(self) -> bool:
        return bool(self.files)

    def __repr__(self) -> str:
        bases = ", ".join(repr(f.base) for f in self.files)
        return f"GitIgnoreRules([{bases}])"


def load_gitignore(directory: Path, base: str = "") -> Optional[GitIgnoreFile]:
    """Load ``directory/.gitignore`` if it exists.

    An unreadable file is logged and treated as absent; it never fails
    the scan.
    """
    path = directory / GITIGNORE_NAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return None
    return GitIgnoreFile.from_lines(text.splitlines(), base=base)
