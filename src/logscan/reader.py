"""Line-by-line scanning of a single byte stream"""

import zipfile
import zlib
from collections.abc import Callable
from dataclasses import dataclass
from typing import BinaryIO

from logscan.config import get_encoding
from logscan.errors import ReadError
from logscan.matcher import LineMatcher
from logscan.models import MatchEvent


OnMatch = Callable[[MatchEvent], bool]

# Exceptions a stream can raise mid-read. zipfile members surface corruption
# as BadZipFile (CRC mismatch), zlib.error or EOFError (truncated data).
READ_ERRORS = (OSError, zipfile.BadZipFile, zlib.error, EOFError)


@dataclass
class StreamStats:
    lines: int = 0
    matches: int = 0
    stopped: bool = False


def strip_line_ending(raw: bytes) -> bytes:
    if raw.endswith(b'\n'):
        raw = raw[:-1]
        if raw.endswith(b'\r'):
            raw = raw[:-1]
    return raw


def scan_stream(
    stream: BinaryIO,
    path: str,
    matcher: LineMatcher,
    on_match: OnMatch,
    member: str | None = None,
    encoding: str | None = None,
    member_index: int | None = None,
) -> StreamStats:
    """
    Scan a binary stream and report every matching line to on_match.

    Lines are numbered from 1 and counted whether or not they match. When
    on_match returns False the rest of the stream is abandoned. The stream
    belongs to the caller, who must close it.

    Args:
        stream: Binary file-like object, iterated line by line (no line length limit)
        path: File path (or archive path) reported in match events
        matcher: Filter set to apply to each line
        on_match: Callback receiving each MatchEvent; returning False stops this stream
        member: Archive member name, if the stream comes from an archive
        encoding: Text encoding for lines, undecodable bytes are replaced
        member_index: Position of the member in its archive, tells apart members sharing a name

    Returns:
        StreamStats with lines read, matches reported and whether the callback stopped the scan

    Raises:
        ReadError: if reading the stream fails before end of stream
    """
    encoding = encoding or get_encoding()
    stats = StreamStats()

    lines = iter(stream)

    while True:
        # Only the read is guarded: errors raised by on_match propagate unchanged
        try:
            raw = next(lines)
        except StopIteration:
            break
        except READ_ERRORS as e:
            raise ReadError(path, member, original_error=e, lines=stats.lines, matches=stats.matches) from e

        stats.lines += 1
        line = strip_line_ending(raw).decode(encoding, errors='replace')

        if not matcher.matches(line):
            continue

        stats.matches += 1
        event = MatchEvent(
            path=path, member=member, member_index=member_index, line_number=stats.lines, line=line
        )
        if not on_match(event):
            stats.stopped = True
            break

    return stats
