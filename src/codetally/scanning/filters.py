"""Path eligibility: include/exclude globs, gitignore, symlinks, size.

Paths are root-relative and "/"-separated. Evaluation order:
    (a) directories: .git, gitignored and excluded directories are pruned
    (b) include globs: when given, a file must match one
    (c) exclude globs: a match excludes, even if an include matched
    (d) gitignore: nearer .gitignore files override farther ones
    (e) symlinks: skipped unless following is enabled
    (f) size: files over max_file_size_bytes are skipped

A glob matches a path when fnmatch matches the whole path, when a
slash-free glob matches any single segment (``*.go``, ``vendor``), or
when the glob names a directory prefix (``pkg``, ``pkg/``, ``pkg/*``).
A ``**/`` matches zero or more directories, so ``**/*.go`` also matches
a top-level ``main.go``.
"""

from fnmatch import fnmatchcase
from typing import Iterator, NamedTuple, Optional, Sequence

from ..config import ScanOptions
from .gitignore import GitIgnoreRules

GIT_DIR = ".git"


class EntryInfo(NamedTuple):
    """Filesystem facts the walker already has for a candidate file."""

    is_symlink: bool
    size: int


def normalize_pattern(raw: str) -> str:
    """Use "/" separators and drop a leading "./"."""
    pattern = raw.strip().replace("\\", "/")
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def _ancestors(rel: str) -> list[str]:
    """``a/b/c`` -> ``["a", "a/b", "a/b/c"]``."""
    parts = rel.split("/")
    return ["/".join(parts[: i + 1]) for i in range(len(parts))]


def _expand_globstar(pattern: str) -> Iterator[str]:
    """Yield the pattern with each ``**/`` kept or dropped.

    fnmatch's ``*`` already crosses "/", so dropping ``**/`` is the only
    extra case needed for it to match zero directories.
    """
    head, sep, tail = pattern.partition("**/")
    if not sep:
        yield pattern
        return
    for rest in _expand_globstar(tail):
        yield head + sep + rest
        yield head + rest


def glob_match(rel: str, raw_pattern: str) -> bool:
    """Check a root-relative path against one include/exclude glob."""
    pattern = normalize_pattern(raw_pattern)
    if not pattern:
        return False
    return any(_match_one(rel, p) for p in _expand_globstar(pattern) if p)


def _match_one(rel: str, pattern: str) -> bool:
    if pattern.endswith("/*"):
        prefix = pattern[:-2]
        return any(fnmatchcase(a, prefix) for a in _ancestors(rel))
    if pattern.endswith("/"):
        prefix = pattern.rstrip("/")
        return any(fnmatchcase(a, prefix) for a in _ancestors(rel))

    if fnmatchcase(rel, pattern):
        return True
    if "/" not in pattern:
        return any(fnmatchcase(segment, pattern) for segment in rel.split("/"))
    return any(fnmatchcase(a, pattern) for a in _ancestors(rel))


def matches_any(rel: str, patterns: Sequence[str]) -> bool:
    return any(glob_match(rel, p) for p in patterns)


class PathFilter:
    """Decides which directories to enter and which files to scan."""

    def __init__(self, options: ScanOptions):
        self.options = options

    def prune_dir(self, rel: str, rules: GitIgnoreRules) -> bool:
        """True if the directory at ``rel`` must not be descended into."""
        name = rel.rsplit("/", 1)[-1]
        if name == GIT_DIR:
            return True
        if self.options.respect_gitignore and rules.is_ignored(rel, is_dir=True):
            return True
        return matches_any(rel, self.options.exclude)

    def skip_reason(self, rel: str, info: EntryInfo, rules: GitIgnoreRules) -> Optional[str]:
        """Why a file is filtered out, or None if it is eligible."""
        opts = self.options
        if opts.include and not matches_any(rel, opts.include):
            return "not included"
        if matches_any(rel, opts.exclude):
            return "excluded"
        if opts.respect_gitignore and rules.is_ignored(rel):
            return "gitignored"
        if info.is_symlink and not opts.follow_symlinks:
            return "symlink"
        if opts.max_file_size_bytes > 0 and info.size > opts.max_file_size_bytes:
            return f"size {info.size} > {opts.max_file_size_bytes}"
        return None

    def eligible(self, rel: str, info: EntryInfo, rules: GitIgnoreRules) -> bool:
        return self.skip_reason(rel, info, rules) is None
