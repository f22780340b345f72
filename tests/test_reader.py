"""Tests for scanning a single stream"""

import io

import pytest

from logscan.errors import ReadError
from logscan.matcher import LineMatcher
from logscan.reader import scan_stream, strip_line_ending


class Collector:
    """on_match callback that records events and stops after `stop_after` matches"""

    def __init__(self, stop_after=None):
        self.events = []
        self.stop_after = stop_after

    def __call__(self, event):
        self.events.append(event)
        return self.stop_after is None or len(self.events) < self.stop_after


class FailingStream(io.RawIOBase):
    """Yields some lines, then fails like a disk error would"""

    def __init__(self, lines):
        self._lines = list(lines)

    def __iter__(self):
        return self

    def __next__(self):
        if self._lines:
            return self._lines.pop(0)
        raise OSError("device not ready")


class TestScanStream:
    """Test scan_stream()"""

    def test_reports_matching_lines_with_numbers(self):
        """Only matching lines are reported, numbered by their position in the stream"""
        stream = io.BytesIO(b"INFO start\nERROR boom\nINFO done\n")
        collect = Collector()

        stats = scan_stream(stream, "app.log", LineMatcher(["ERROR"], False), collect)

        assert [(e.path, e.line_number, e.line) for e in collect.events] == [("app.log", 2, "ERROR boom")]
        assert stats.lines == 3
        assert stats.matches == 1
        assert stats.stopped is False

    def test_line_numbers_strictly_increasing(self):
        data = "".join(f"{'hit' if i % 3 == 0 else 'miss'} {i}\n" for i in range(1, 31)).encode()
        collect = Collector()

        scan_stream(io.BytesIO(data), "f", LineMatcher(["hit"], False), collect)

        numbers = [e.line_number for e in collect.events]
        assert numbers == list(range(3, 31, 3))

    def test_empty_filters_report_every_line(self):
        collect = Collector()
        scan_stream(io.BytesIO(b"a\nb\n\nc"), "f", LineMatcher([], False), collect)
        assert [(e.line_number, e.line) for e in collect.events] == [(1, "a"), (2, "b"), (3, ""), (4, "c")]

    def test_last_line_without_newline(self):
        collect = Collector()
        scan_stream(io.BytesIO(b"x1\nx2"), "f", LineMatcher(["x"], False), collect)
        assert [e.line for e in collect.events] == ["x1", "x2"]

    def test_crlf_is_stripped(self):
        collect = Collector()
        scan_stream(io.BytesIO(b"ERROR one\r\nERROR two\r\n"), "f", LineMatcher(["ERROR"], False), collect)
        assert [e.line for e in collect.events] == ["ERROR one", "ERROR two"]

    def test_long_lines_are_not_truncated(self):
        """Lines far longer than any read buffer come through whole"""
        long_line = "x" * (1024 * 1024) + "ERROR"
        stream = io.BytesIO(f"short\n{long_line}\nshort\n".encode())
        collect = Collector()

        scan_stream(stream, "f", LineMatcher(["ERROR"], False), collect)

        assert len(collect.events) == 1
        assert collect.events[0].line == long_line
        assert collect.events[0].line_number == 2

    def test_undecodable_bytes_are_replaced(self):
        collect = Collector()
        scan_stream(io.BytesIO(b"ERROR \xff\xfe here\n"), "f", LineMatcher(["ERROR"], False), collect)
        assert collect.events[0].line == "ERROR �� here"

    def test_custom_encoding(self):
        collect = Collector()
        data = "ERROR café\n".encode("latin-1")
        scan_stream(io.BytesIO(data), "f", LineMatcher(["café"], False), collect, encoding="latin-1")
        assert collect.events[0].line == "ERROR café"

    def test_member_name_is_carried(self):
        collect = Collector()
        scan_stream(io.BytesIO(b"a1\n"), "bundle.zip", LineMatcher([], False), collect, member="x.txt")
        event = collect.events[0]
        assert event.path == "bundle.zip"
        assert event.member == "x.txt"
        assert event.source == "bundle.zip"


class TestEarlyStop:
    """on_match returning False abandons the stream"""

    def test_stop_on_first_match(self):
        stream = io.BytesIO(b"ERROR 1\nERROR 2\nERROR 3\n")
        collect = Collector(stop_after=1)

        stats = scan_stream(stream, "f", LineMatcher(["ERROR"], False), collect)

        assert [e.line_number for e in collect.events] == [1]
        assert stats.stopped is True
        assert stats.lines == 1

    def test_no_events_after_stop(self):
        """After the callback stops at line i no later line of the stream is reported"""
        data = b"".join(b"ERROR %d\n" % i for i in range(1, 101))
        collect = Collector(stop_after=7)

        scan_stream(io.BytesIO(data), "f", LineMatcher(["ERROR"], False), collect)

        assert max(e.line_number for e in collect.events) == 7
        assert len(collect.events) == 7


class TestReadErrors:
    """Read failures surface as ReadError"""

    def test_read_error_carries_source(self):
        stream = FailingStream([b"ERROR first\n"])
        collect = Collector()

        with pytest.raises(ReadError) as exc_info:
            scan_stream(stream, "broken.log", LineMatcher(["ERROR"], False), collect)

        error = exc_info.value
        assert error.path == "broken.log"
        assert isinstance(error.original_error, OSError)
        # Lines read before the failure were still reported
        assert [e.line for e in collect.events] == ["ERROR first"]

    def test_read_error_carries_partial_counts(self):
        """Lines and matches delivered before the failure travel with the error"""
        stream = FailingStream([b"ERROR first\n", b"INFO second\n"])

        with pytest.raises(ReadError) as exc_info:
            scan_stream(stream, "broken.log", LineMatcher(["ERROR"], False), Collector())

        assert exc_info.value.lines == 2
        assert exc_info.value.matches == 1

    def test_callback_errors_are_not_wrapped(self):
        """Exceptions from on_match propagate unchanged"""

        def explode(event):
            raise OSError("sink closed")

        with pytest.raises(OSError, match="sink closed") as exc_info:
            scan_stream(io.BytesIO(b"ERROR\n"), "f", LineMatcher([], False), explode)
        assert not isinstance(exc_info.value, ReadError)


def test_strip_line_ending():
    assert strip_line_ending(b"abc\n") == b"abc"
    assert strip_line_ending(b"abc\r\n") == b"abc"
    assert strip_line_ending(b"abc") == b"abc"
    assert strip_line_ending(b"abc\r") == b"abc\r"
