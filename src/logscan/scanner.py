"""Concurrent directory scan.

The coordinating thread lists the directory, applies the file name filter and
submits one task per remaining entry to a bounded thread pool. It then waits
for every task (the barrier) and aggregates statistics and failures. A failing
entry never stops its siblings; failures are reported together once all
workers have finished.
"""

import codecs
import logging
import os
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from logscan.config import get_encoding, get_max_workers
from logscan.diagnostics import Diagnostics
from logscan.dispatch import DirectoryEntry, EntryOutcome, dispatch_entry
from logscan.errors import EntryError, ScanConfigError, ScanError
from logscan.matcher import LineMatcher, NameFilter
from logscan.models import EntryFailure, ScanRequest, ScanSummary
from logscan.reader import OnMatch


logger = logging.getLogger(__name__)


@dataclass
class HookCallbacks:
    """Callbacks for per-entry events during a scan.

    Called from the coordinating thread as workers complete, in completion order.
    A hook that raises is logged and otherwise ignored.
    """

    on_file_scanned: Callable[[dict], None] | None = None
    on_entry_failed: Callable[[dict], None] | None = None


def list_entries(root: str) -> list[DirectoryEntry]:
    """List the immediate entries of root, sorted by name.

    Raises:
        ScanConfigError: if the directory cannot be listed
    """
    try:
        with os.scandir(root) as it:
            entries = [
                DirectoryEntry(name=e.name, path=e.path, is_dir=e.is_dir(), is_file=e.is_file()) for e in it
            ]
    except OSError as e:
        raise ScanConfigError(f'Cannot list directory {root}: {e}', original_error=e) from e

    entries.sort(key=lambda e: e.name)
    return entries


def select_entries(
    entries: list[DirectoryEntry], name_filter: NameFilter, diagnostics: Diagnostics
) -> list[DirectoryEntry]:
    selected = []
    for entry in entries:
        if entry.is_dir:
            diagnostics.skipped(entry.name, 'directory')
            continue
        if not entry.is_file:
            # FIFOs, sockets and devices would block or never end
            diagnostics.skipped(entry.name, 'not a regular file')
            continue
        if not name_filter.accepts(entry.name):
            diagnostics.skipped(entry.name, 'file filter')
            continue
        selected.append(entry)
    return selected


def _call_hook(hook: Callable[[dict], None] | None, payload: dict) -> None:
    if hook is None:
        return
    try:
        hook(payload)
    except Exception as e:
        logger.warning(f'[SCAN] Hook {getattr(hook, "__name__", hook)!r} failed: {e}')


def scan_directory(
    request: ScanRequest,
    on_match: OnMatch,
    diagnostics: Diagnostics | None = None,
    max_workers: int | None = None,
    hooks: HookCallbacks | None = None,
    raise_on_failure: bool = True,
) -> ScanSummary:
    """
    Scan the immediate entries of request.root and report matching lines.

    on_match is shared by all workers and is called concurrently; it must be
    safe for that. Returning False from it stops only the stream that produced
    the event.

    Args:
        request: What to scan and how to filter
        on_match: Callback receiving every MatchEvent
        diagnostics: Diagnostics channel, defaults to a logger-backed one
        max_workers: Upper bound on concurrent workers (default: LOGSCAN_MAX_WORKERS)
        hooks: Optional per-entry callbacks
        raise_on_failure: Raise ScanError after the join when any entry failed

    Returns:
        ScanSummary for the whole scan

    Raises:
        InvalidPatternError: if a regex filter does not compile (before any I/O)
        ScanConfigError: if the root directory cannot be listed or the encoding is unknown
        ScanError: if raise_on_failure and at least one entry failed
    """
    diagnostics = diagnostics or Diagnostics()
    max_workers = max_workers or get_max_workers()
    start_time = time.perf_counter()

    # Validate everything before the first worker starts
    name_filter = NameFilter(request.file_filter, request.file_filter_is_regex)
    matcher = LineMatcher(request.line_filters, request.line_filter_is_regex)
    encoding = get_encoding()
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ScanConfigError(f'Unknown encoding {encoding!r}: {e}', original_error=e) from e
    entries = list_entries(request.root)
    selected = select_entries(entries, name_filter, diagnostics)

    summary = ScanSummary(
        root=request.root,
        entries_total=len(entries),
        entries_skipped=len(entries) - len(selected),
    )

    workers = max(1, min(max_workers, len(selected)))
    diagnostics.scan_started(request.root, len(selected), workers)

    if selected:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='ScanWorker') as executor:
            future_to_entry = {
                executor.submit(dispatch_entry, entry.path, matcher, on_match, diagnostics, encoding): entry
                for entry in selected
            }

            for future in as_completed(future_to_entry):
                entry = future_to_entry[future]
                try:
                    outcome: EntryOutcome = future.result()
                except EntryError as e:
                    # Matches delivered before a mid-read failure still count
                    summary.total_matches += e.matches
                    failure = e.to_failure()
                    _record_failure(summary, failure, diagnostics, hooks)
                    continue
                except Exception as e:
                    # A worker must never take the barrier down with it
                    failure = EntryFailure(path=entry.path, kind='error', message=f'{type(e).__name__}: {e}')
                    _record_failure(summary, failure, diagnostics, hooks)
                    continue

                summary.entries_scanned += 1
                summary.total_matches += outcome.stats.matches
                summary.stats.append(outcome.stats)
                diagnostics.entry_scanned(outcome.stats)
                if hooks:
                    _call_hook(hooks.on_file_scanned, outcome.stats.model_dump())

                # Member failures inside an otherwise readable archive
                for failure in outcome.failures:
                    summary.failures.append(failure)
                    if hooks:
                        _call_hook(hooks.on_entry_failed, failure.model_dump())

    summary.stats.sort(key=lambda s: s.path)
    summary.failures.sort(key=lambda f: (f.path, f.member or ''))
    summary.elapsed = time.perf_counter() - start_time
    diagnostics.scan_finished(summary.total_matches, len(summary.failures), summary.elapsed)

    if summary.failures and raise_on_failure:
        raise ScanError(summary)
    return summary


def _record_failure(
    summary: ScanSummary, failure: EntryFailure, diagnostics: Diagnostics, hooks: HookCallbacks | None
) -> None:
    summary.failures.append(failure)
    diagnostics.entry_failed(failure)
    if hooks:
        _call_hook(hooks.on_entry_failed, failure.model_dump())
