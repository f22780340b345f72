"""Tests for the output sink"""

import io
import json
import threading

from logscan.models import MatchEvent
from logscan.sink import OutputSink, format_match


def event(path="app.log", line_number=1, line="ERROR boom", member=None, member_index=None):
    return MatchEvent(path=path, member=member, member_index=member_index, line_number=line_number, line=line)


class TestFormatMatch:
    def test_plain_format(self):
        assert format_match(event(line_number=2)) == "app.log[2]ERROR boom"

    def test_archive_collapses_to_archive_path(self):
        """By default archive matches report only the archive path"""
        e = event(path="bundle.zip", member="x.txt", line="a1")
        assert format_match(e) == "bundle.zip[1]a1"

    def test_member_names(self):
        e = event(path="bundle.zip", member="x.txt", line="a1")
        assert format_match(e, member_names=True) == "bundle.zip/x.txt[1]a1"

    def test_member_names_ignored_for_plain_files(self):
        assert format_match(event(), member_names=True) == "app.log[1]ERROR boom"


class TestOutputSink:
    def test_writes_lines_and_counts(self):
        out = io.StringIO()
        sink = OutputSink(out)

        assert sink(event(line_number=1, line="a")) is True
        assert sink(event(line_number=5, line="b")) is True

        assert out.getvalue() == "app.log[1]a\napp.log[5]b\n"
        assert sink.count == 2

    def test_json_lines(self):
        out = io.StringIO()
        sink = OutputSink(out, json_lines=True)

        sink(event(path="bundle.zip", member="x.txt", line_number=3, line="b2"))

        record = json.loads(out.getvalue())
        assert record == {"path": "bundle.zip", "member": "x.txt", "line_number": 3, "line": "b2"}

    def test_max_per_source_stops_each_stream(self):
        """The limit applies to each file or member separately"""
        sink = OutputSink(io.StringIO(), max_per_source=2)

        assert sink(event(path="a.log", line_number=1)) is True
        assert sink(event(path="a.log", line_number=2)) is False
        assert sink(event(path="b.log", line_number=1)) is True
        assert sink(event(path="z.zip", member="m1", member_index=0, line_number=1)) is True
        assert sink(event(path="z.zip", member="m2", member_index=1, line_number=1)) is True
        assert sink(event(path="z.zip", member="m1", member_index=0, line_number=2)) is False

    def test_members_sharing_a_name_have_separate_limits(self):
        """Two archive members with the same name are still two streams"""
        sink = OutputSink(io.StringIO(), max_per_source=2)

        assert sink(event(path="z.zip", member="x.txt", member_index=0, line="hit 1")) is True
        assert sink(event(path="z.zip", member="x.txt", member_index=1, line="hit 3")) is True
        assert sink(event(path="z.zip", member="x.txt", member_index=0, line="hit 2")) is False

    def test_member_index_is_not_serialised(self):
        out = io.StringIO()
        OutputSink(out, json_lines=True)(event(path="z.zip", member="x.txt", member_index=4))

        assert "member_index" not in json.loads(out.getvalue())

    def test_concurrent_writes_are_not_interleaved(self):
        out = io.StringIO()
        sink = OutputSink(out)

        def worker(n):
            for i in range(1, 201):
                sink(event(path=f"f{n}.log", line_number=i, line="x" * 50))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = out.getvalue().splitlines()
        assert len(lines) == 8 * 200
        assert sink.count == 8 * 200
        assert all(line.endswith("]" + "x" * 50) for line in lines)
