"""Diagnostic channel for the scan engine.

Every scan reports through the Diagnostics object it is given. The default
implementation writes to the standard logging tree.
"""

import logging
import threading

from logscan.models import EntryFailure, EntryStats


class Diagnostics:
    """Receives progress and problem reports from the scanner and its workers.

    Methods may be called from worker threads concurrently.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger('logscan.scan')

    def scan_started(self, root: str, entries: int, workers: int) -> None:
        self.logger.info(f'[SCAN] {root}: {entries} entries, up to {workers} workers')

    def skipped(self, name: str, reason: str) -> None:
        self.logger.debug(f'[SCAN] Skipping {name}: {reason}')

    def entry_started(self, path: str) -> None:
        thread_id = threading.current_thread().name
        self.logger.debug(f'[WORKER {thread_id}] Scanning {path}')

    def entry_scanned(self, stats: EntryStats) -> None:
        self.logger.debug(
            f'[SCAN] {stats.path}: {stats.matches} matches in {stats.lines_scanned} lines '
            f'({stats.sources_scanned} sources, {stats.elapsed_ms}ms)'
        )

    def entry_failed(self, failure: EntryFailure) -> None:
        self.logger.error(f'[SCAN] {failure.describe()}')

    def invalid_pattern(self, pattern: str, error: Exception) -> None:
        self.logger.warning(f'Invalid pattern {pattern!r} treated as non-matching: {error}')

    def scan_finished(self, matches: int, failures: int, elapsed: float) -> None:
        self.logger.info(f'[SCAN] Completed: {matches} matches, {failures} failures in {elapsed:.3f}s')
