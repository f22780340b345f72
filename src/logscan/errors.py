"""Exceptions raised by the scan engine.

Exception Hierarchy
-------------------
- LogScanError (base exception)

  - ScanConfigError (bad request: unreadable root directory, invalid patterns)
    - InvalidPatternError (regex that does not compile)

  - EntryError (failure confined to one directory entry)
    - EntryOpenError (file cannot be opened)
    - ArchiveError (zip container cannot be opened or is corrupt)
    - ReadError (stream read failed mid-file)

  - ScanError (aggregate raised after all workers joined)

Configuration errors are raised before any worker starts. Entry errors are
captured per worker and surface only through ScanError or the ScanSummary.
"""

from logscan.models import EntryFailure, ScanSummary


class LogScanError(Exception):
    """Base exception class for all logscan errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ScanConfigError(LogScanError):
    """The scan request cannot be executed at all."""


class InvalidPatternError(ScanConfigError):
    """A filter pattern is not a valid regular expression."""

    def __init__(self, pattern: str, original_error: Exception | None = None):
        message = f'Invalid regular expression {pattern!r}'
        if original_error is not None:
            message = f'{message}: {original_error}'
        super().__init__(message, original_error=original_error)
        self.pattern = pattern


class EntryError(LogScanError):
    """Failure confined to a single directory entry (or one member of an archive).

    Attributes
    ----------
    path : str
        Path of the directory entry
    member : str or None
        Archive member name, when the failure happened inside an archive
    lines, matches : int
        Lines read and matches already delivered before the failure
    """

    kind = 'entry'

    def __init__(
        self, message: str, path: str, member: str | None = None, original_error: Exception | None = None
    ):
        super().__init__(message, original_error=original_error)
        self.path = path
        self.member = member
        self.lines = 0
        self.matches = 0

    def to_failure(self) -> EntryFailure:
        return EntryFailure(path=self.path, member=self.member, kind=self.kind, message=self.message)


class EntryOpenError(EntryError):
    kind = 'open'

    def __init__(self, path: str, original_error: Exception | None = None):
        super().__init__(f'Cannot open {path}: {original_error}', path, original_error=original_error)


class ArchiveError(EntryError):
    kind = 'archive'

    def __init__(self, path: str, original_error: Exception | None = None):
        super().__init__(f'Cannot read archive {path}: {original_error}', path, original_error=original_error)


class ReadError(EntryError):
    kind = 'read'

    def __init__(
        self,
        path: str,
        member: str | None = None,
        original_error: Exception | None = None,
        lines: int = 0,
        matches: int = 0,
    ):
        source = f'{path}/{member}' if member else path
        super().__init__(f'Read failed for {source}: {original_error}', path, member, original_error=original_error)
        self.lines = lines
        self.matches = matches


class ScanError(LogScanError):
    """One or more entries failed. Matches from the other entries were still delivered.

    Attributes
    ----------
    summary : ScanSummary
        Full result of the scan, including every failure
    """

    def __init__(self, summary: ScanSummary):
        failures = summary.failures
        noun = 'entry' if len(failures) == 1 else 'entries'
        details = '; '.join(f.describe() for f in failures)
        super().__init__(f'{len(failures)} {noun} failed: {details}')
        self.summary = summary

    @property
    def failures(self) -> list[EntryFailure]:
        return self.summary.failures
