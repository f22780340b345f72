"""Per-entry dispatch: plain files are scanned directly, zip archives member by member"""

import logging
import threading
import time
import zipfile
from dataclasses import dataclass, field

from logscan.diagnostics import Diagnostics
from logscan.errors import ArchiveError, EntryError, EntryOpenError
from logscan.matcher import LineMatcher
from logscan.models import EntryFailure, EntryStats
from logscan.reader import OnMatch, StreamStats, scan_stream


logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = ('.zip',)


@dataclass
class DirectoryEntry:
    name: str
    path: str
    is_dir: bool
    is_file: bool = True


@dataclass
class ArchiveMember:
    """A member of an open archive. Only valid while the archive is open."""

    name: str
    info: zipfile.ZipInfo

    @property
    def is_dir(self) -> bool:
        return self.info.is_dir()


@dataclass
class EntryOutcome:
    """What one worker produced for one directory entry."""

    stats: EntryStats
    failures: list[EntryFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def is_archive(name: str) -> bool:
    return name.lower().endswith(ARCHIVE_SUFFIXES)


def _add(stats: EntryStats, stream_stats: StreamStats) -> None:
    stats.sources_scanned += 1
    stats.lines_scanned += stream_stats.lines
    stats.matches += stream_stats.matches


def scan_plain_file(
    path: str, matcher: LineMatcher, on_match: OnMatch, stats: EntryStats, encoding: str | None = None
) -> None:
    try:
        f = open(path, 'rb')
    except OSError as e:
        raise EntryOpenError(path, original_error=e) from e

    with f:
        _add(stats, scan_stream(f, path, matcher, on_match, encoding=encoding))


def scan_archive(
    path: str,
    matcher: LineMatcher,
    on_match: OnMatch,
    stats: EntryStats,
    diagnostics: Diagnostics,
    encoding: str | None = None,
) -> list[EntryFailure]:
    """
    Scan every non-directory member of a zip archive in archive order.

    Each member is a separate source with its own line numbering. A member that
    fails to read is recorded and the remaining members are still scanned.

    Returns:
        Failures of individual members (empty when all members were read)

    Raises:
        ArchiveError: if the archive itself cannot be opened
    """
    thread_id = threading.current_thread().name
    try:
        archive = zipfile.ZipFile(path)
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(path, original_error=e) from e

    failures = []
    with archive:
        members = [ArchiveMember(name=info.filename, info=info) for info in archive.infolist()]
        logger.debug(f'[ARCHIVE {thread_id}] {path}: {len(members)} members')

        for index, member in enumerate(members):
            if member.is_dir:
                continue
            try:
                with archive.open(member.info) as stream:
                    stream_stats = scan_stream(
                        stream, path, matcher, on_match, member=member.name, encoding=encoding, member_index=index
                    )
                _add(stats, stream_stats)
            except EntryError as e:
                # Matches before the failure were already delivered
                stats.lines_scanned += e.lines
                stats.matches += e.matches
                failures.append(e.to_failure())
                diagnostics.entry_failed(failures[-1])
            except (OSError, zipfile.BadZipFile, NotImplementedError, RuntimeError) as e:
                # Raised by archive.open for bad headers, unsupported compression or encryption
                failure = EntryFailure(path=path, member=member.name, kind='archive', message=str(e))
                failures.append(failure)
                diagnostics.entry_failed(failure)

    return failures


def dispatch_entry(
    path: str,
    matcher: LineMatcher,
    on_match: OnMatch,
    diagnostics: Diagnostics | None = None,
    encoding: str | None = None,
) -> EntryOutcome:
    """
    Scan one directory entry, choosing archive or plain handling from its name.

    Args:
        path: Path of the entry
        matcher: Line filter set
        on_match: Callback receiving every MatchEvent
        diagnostics: Diagnostics channel, defaults to a logger-backed one
        encoding: Line encoding (default: LOGSCAN_ENCODING)

    Returns:
        EntryOutcome with statistics and member-level failures

    Raises:
        EntryError: if the entry cannot be opened or a plain file fails mid-read
    """
    diagnostics = diagnostics or Diagnostics()
    diagnostics.entry_started(path)

    start_time = time.perf_counter()
    stats = EntryStats(path=path)
    failures = []

    if is_archive(path):
        failures = scan_archive(path, matcher, on_match, stats, diagnostics, encoding)
    else:
        scan_plain_file(path, matcher, on_match, stats, encoding)

    stats.elapsed_ms = int((time.perf_counter() - start_time) * 1000)
    return EntryOutcome(stats=stats, failures=failures)
