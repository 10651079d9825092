"""Project scanner: walker thread, worker pool, single aggregator.

    walker ──► paths queue ──► N workers ──► results queue ──► aggregator

Both queues are bounded, so a fast walker blocks until workers catch up.
The aggregator runs in the calling thread and is the only code that
touches the accumulating maps.

Outcomes:
    - Done: the ProjectSummary is returned
    - Failed: a CodetallyError is raised before any work (bad root/options)
    - Cancelled: ScanCancelledError is raised, with ``partial`` holding the
      summary of everything merged before cancellation was observed

A scan counts as cancelled only if the token stopped the walker or made a
worker drop a path. A token that fires after every file was scanned does
not turn the finished summary into a partial one.
"""

from __future__ import annotations

import queue
import threading
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import ScanOptions
from ..exceptions import FileAccessError, ScanCancelledError
from ..logging_config import get_logger
from .aggregator import Aggregator
from .cancel import CancelToken
from .classifier import decode_content, get_classifier, split_lines, tally_lines
from .filters import PathFilter
from .languages import get_language_spec
from .models import FileRecord, LanguageDetails, ProjectSummary, SkippedFile
from .structure import get_structure_counter
from .walker import WalkEntry, validate_root, walk

logger = get_logger(__name__)

ProgressCallback = Callable[[FileRecord], None]

# End-of-stream marker on both queues
_DONE = object()

_QUEUE_FACTOR = 4


def scan_file(path: Path, rel: str, options: ScanOptions) -> FileRecord:
    """Read and classify one file.

    Raises:
        FileAccessError: If the file cannot be read
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e))

    spec = get_language_spec(rel)
    lines = list(get_classifier(spec).classify_lines(split_lines(decode_content(data))))
    record = FileRecord(path=rel, language=spec.name, stats=tally_lines(lines))

    if not (options.wants_structures or options.with_language_specific):
        return record
    counter = get_structure_counter(spec.name)
    if counter is None:
        return record

    details = LanguageDetails()
    if options.wants_structures:
        counts = counter.count(lines)
        if options.with_functions:
            details.functions = counts.functions
        if options.with_structs:
            details.structs = counts.structs
    if options.with_language_specific:
        details.package, details.imports = counter.metadata(lines)
    record.details = details
    return record


class ProjectScanner:
    """Runs one scan. Not reusable: create one per invocation.

    Args:
        options: Scan options (defaults if None)
        token: Cancellation token (a fresh, never-cancelled one if None)
        progress: Called from the aggregating thread for each merged record
    """

    def __init__(
        self,
        options: Optional[ScanOptions] = None,
        token: Optional[CancelToken] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        self.options = options or ScanOptions()
        self.token = token or CancelToken()
        self.progress = progress
        self.workers = self.options.workers
        self._paths: queue.Queue = queue.Queue(maxsize=self.workers * _QUEUE_FACTOR)
        self._results: queue.Queue = queue.Queue(maxsize=self.workers * _QUEUE_FACTOR)
        self._walker_error: Optional[BaseException] = None
        self._finished_workers = 0
        # set once the walker or a worker stopped early because of the token
        self._interrupted = False

    def scan(self, root: Union[str, Path]) -> ProjectSummary:
        """Scan ``root`` and return its summary.

        Raises:
            InvalidPathError: If the root cannot be walked
            ScanCancelledError: If the token is cancelled mid-scan
        """
        root = validate_root(Path(root))
        logger.debug(f"Scanning {root} with {self.workers} workers")

        aggregator = Aggregator(self.options)
        threads = [threading.Thread(target=self._produce, args=(root,), name="codetally-walker")]
        threads += [
            threading.Thread(target=self._consume, name=f"codetally-worker-{i}")
            for i in range(self.workers)
        ]
        for thread in threads:
            thread.daemon = True
            thread.start()

        try:
            self._aggregate(aggregator)
        except BaseException:
            # Unblock the pipeline before propagating (e.g. a failing progress callback).
            self.token.cancel("aborted")
            self._discard_remaining()
            raise
        finally:
            for thread in threads:
                thread.join()

        if self._walker_error is not None:
            raise self._walker_error

        summary = aggregator.finalize()
        if self._interrupted:
            logger.warning(
                f"Scan cancelled ({self.token.reason}) after {summary.total.file_count} files"
            )
            raise ScanCancelledError(self.token.reason, partial=summary)

        logger.info(
            f"Scan complete: {summary.total.file_count} files, "
            f"{len(summary.languages)} languages, {len(summary.skipped)} skipped"
        )
        return summary

    # ── Stages ─────────────────────────────────────────────────

    def _produce(self, root: Path) -> None:
        path_filter = PathFilter(self.options)
        try:
            for entry in walk(root, path_filter, self.token, on_error=self._walk_error):
                self._paths.put(entry)
            if self.token.cancelled:
                self._interrupted = True
        except Exception as e:
            logger.error(f"Walk failed: {e}")
            self._walker_error = e
            self.token.cancel("walk failed")
        finally:
            for _ in range(self.workers):
                self._paths.put(_DONE)

    def _walk_error(self, rel: str, reason: str) -> None:
        self._results.put(SkippedFile(rel, reason))

    def _consume(self) -> None:
        try:
            while True:
                entry = self._paths.get()
                if entry is _DONE:
                    break
                if self.token.cancelled:
                    # Drain without scanning so the walker never blocks.
                    self._interrupted = True
                    continue
                self._results.put(self._scan_entry(entry))
        finally:
            self._results.put(_DONE)

    def _scan_entry(self, entry: WalkEntry) -> Union[FileRecord, SkippedFile]:
        try:
            return scan_file(entry.path, entry.rel, self.options)
        except FileAccessError as e:
            logger.warning(f"Access error for {entry.rel}: {e.reason}")
            return SkippedFile(entry.rel, e.reason)
        except Exception as e:
            logger.error(f"Unexpected error scanning {entry.rel}: {e}")
            return SkippedFile(entry.rel, f"unexpected error: {e}")

    def _aggregate(self, aggregator: Aggregator) -> None:
        while self._finished_workers < self.workers:
            item = self._results.get()
            if item is _DONE:
                self._finished_workers += 1
            elif isinstance(item, SkippedFile):
                aggregator.add_skipped(item)
            else:
                aggregator.add(item)
                if self.progress is not None:
                    self.progress(item)

    def _discard_remaining(self) -> None:
        while self._finished_workers < self.workers:
            if self._results.get() is _DONE:
                self._finished_workers += 1


def scan_project(
    root: Union[str, Path],
    options: Optional[ScanOptions] = None,
    token: Optional[CancelToken] = None,
    progress: Optional[ProgressCallback] = None,
) -> ProjectSummary:
    """Scan a project tree and summarize its lines per language.

    Args:
        root: Directory to scan
        options: Scan options (defaults if None)
        token: Cancellation token; cancel it (or give it a timeout) to
            stop early
        progress: Optional per-file callback, run on the calling thread

    Returns:
        ProjectSummary with per-language totals

    Raises:
        InvalidPathError: If the root is missing, not a directory, or unreadable
        ScanCancelledError: If cancelled; ``partial`` carries the merged summary

    Example:
        >>> summary = scan_project(".", ScanOptions(with_functions=True))
        >>> summary.languages["Go"].functions
    """
    return ProjectScanner(options, token, progress).scan(root)
