"""Directory traversal producing eligible files.

Depth-first, entries in sorted name order, pruning directories before
they are opened. Symlinked directories are only entered when following
symlinks, and a set of canonical directory paths stops cycles. When
following symlinks, a file reachable by several paths is yielded once,
under the first path in walk order.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable, Iterator, NamedTuple, Optional

from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .cancel import CancelToken
from .filters import EntryInfo, PathFilter
from .gitignore import GitIgnoreRules, load_gitignore

logger = get_logger(__name__)

ErrorCallback = Callable[[str, str], None]


class WalkEntry(NamedTuple):
    """An eligible regular file."""

    path: Path  # absolute path on disk
    rel: str  # root-relative, "/"-separated


def validate_root(root: Path) -> Path:
    """Resolve the scan root, failing fast if it cannot be walked.

    Raises:
        InvalidPathError: If the root is missing, not a directory, or unreadable
    """
    root = Path(root).expanduser()
    if not root.exists():
        raise InvalidPathError(root, "path does not exist")
    if not root.is_dir():
        raise InvalidPathError(root, "not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise InvalidPathError(root, f"cannot read directory: {e.strerror or e}")
    return root.resolve()


def walk(
    root: Path,
    path_filter: PathFilter,
    token: Optional[CancelToken] = None,
    on_error: Optional[ErrorCallback] = None,
) -> Iterator[WalkEntry]:
    """Yield eligible files under ``root``.

    Each call starts a fresh traversal. Root validation happens eagerly,
    so a bad root raises before the first ``next()``.

    Args:
        root: Directory to walk
        path_filter: Eligibility rules
        token: Stops the traversal once cancelled
        on_error: Called with (rel_path, reason) for unreadable entries

    Raises:
        InvalidPathError: If the root cannot be walked
    """
    root = validate_root(root)
    return _walk(root, path_filter, token, on_error)


def _walk(
    root: Path,
    path_filter: PathFilter,
    token: Optional[CancelToken],
    on_error: Optional[ErrorCallback],
) -> Iterator[WalkEntry]:
    options = path_filter.options
    visited: set[str] = {os.path.realpath(root)}
    # canonical paths of yielded files, only tracked when following links
    seen_files: set[str] = set()

    rules = GitIgnoreRules()
    if options.respect_gitignore:
        rules = rules.with_file(load_gitignore(root))

    # (absolute dir, rel dir, gitignore rules in effect)
    stack: list[tuple[Path, str, GitIgnoreRules]] = [(root, "", rules)]

    while stack:
        if token is not None and token.cancelled:
            logger.debug("Walk cancelled")
            return
        directory, rel_dir, rules = stack.pop()

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            _report(on_error, rel_dir or ".", f"cannot read directory: {e.strerror or e}")
            continue

        subdirs: list[tuple[Path, str, GitIgnoreRules]] = []
        for entry in entries:
            if token is not None and token.cancelled:
                return
            rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_symlink = entry.is_symlink()
                is_dir = entry.is_dir(follow_symlinks=options.follow_symlinks)
            except OSError as e:
                _report(on_error, rel, f"cannot stat: {e.strerror or e}")
                continue

            if is_dir:
                if is_symlink and not options.follow_symlinks:
                    continue
                if path_filter.prune_dir(rel, rules):
                    logger.debug(f"Pruned directory: {rel}")
                    continue
                real = os.path.realpath(entry.path)
                if real in visited:
                    logger.debug(f"Skipped directory cycle: {rel} -> {real}")
                    continue
                visited.add(real)
                child_rules = rules
                if options.respect_gitignore:
                    child_rules = rules.with_file(load_gitignore(Path(entry.path), base=rel))
                subdirs.append((Path(entry.path), rel, child_rules))
                continue

            if is_symlink and not options.follow_symlinks:
                logger.debug(f"Skipped symlink: {rel}")
                continue
            try:
                st = entry.stat(follow_symlinks=True)
            except OSError as e:
                # Broken symlink or a file removed mid-walk
                _report(on_error, rel, f"cannot stat: {e.strerror or e}")
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            size = st.st_size

            reason = path_filter.skip_reason(rel, EntryInfo(is_symlink, size), rules)
            if reason is not None:
                logger.debug(f"Skipped ({reason}): {rel}")
                continue
            if options.follow_symlinks:
                real = os.path.realpath(entry.path)
                if real in seen_files:
                    logger.debug(f"Skipped duplicate: {rel} -> {real}")
                    continue
                seen_files.add(real)
            yield WalkEntry(Path(entry.path), rel)

        # Reverse so the first directory in sorted order is walked first.
        stack.extend(reversed(subdirs))


def _report(on_error: Optional[ErrorCallback], rel: str, reason: str) -> None:
    logger.warning(f"{rel}: {reason}")
    if on_error is not None:
        on_error(rel, reason)
