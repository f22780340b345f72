"""Output sink for match events.

OutputSink is the on_match callback used by the CLI. Workers call it
concurrently, so every write happens under a lock.
"""

import threading
from typing import TextIO

from logscan.models import MatchEvent


def format_match(event: MatchEvent, member_names: bool = False) -> str:
    """Render a match as `source[line]text`."""
    return f'{event.display_source(member_names)}[{event.line_number}]{event.line}'


class OutputSink:
    """
    Thread-safe writer for match events.

    Args:
        stream: Text stream to write to
        member_names: Render archive matches as archive.zip/member instead of the archive path
        max_per_source: Stop each source stream after this many matches (None = unlimited)
        json_lines: Write one JSON object per match instead of the text format
    """

    def __init__(
        self,
        stream: TextIO,
        member_names: bool = False,
        max_per_source: int | None = None,
        json_lines: bool = False,
    ):
        self.stream = stream
        self.member_names = member_names
        self.max_per_source = max_per_source
        self.json_lines = json_lines
        self.count = 0
        self._per_source: dict[tuple[str, int | None], int] = {}
        self._lock = threading.Lock()

    def __call__(self, event: MatchEvent) -> bool:
        if self.json_lines:
            text = event.model_dump_json()
        else:
            text = format_match(event, self.member_names)

        with self._lock:
            self.stream.write(text + '\n')
            self.count += 1

            if self.max_per_source is None:
                return True
            # Member position, not name: an archive may hold two members with one name
            key = (event.path, event.member_index)
            seen = self._per_source.get(key, 0) + 1
            self._per_source[key] = seen
            return seen < self.max_per_source

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()
