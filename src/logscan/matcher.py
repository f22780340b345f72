"""Line and file name filtering.

A filter set is an ordered list of patterns that must all match (logical AND).
Patterns are either literal, case-sensitive substrings or regular expressions
searched anywhere in the text. Evaluation stops at the first failing pattern.
"""

import logging
import re
from collections.abc import Sequence

from logscan.diagnostics import Diagnostics
from logscan.errors import InvalidPatternError


logger = logging.getLogger(__name__)


def matches(line: str, filters: Sequence[str], is_regex: bool, diagnostics: Diagnostics | None = None) -> bool:
    """Return True when every filter matches the line.

    An empty filter list matches every line. In regex mode a pattern that does
    not compile never matches; the problem is reported to diagnostics (the
    module logger by default) instead of being raised.
    """
    if not is_regex:
        return all(f in line for f in filters)

    for pattern in filters:
        try:
            if re.search(pattern, line) is None:
                return False
        except re.error as e:
            (diagnostics or Diagnostics(logger)).invalid_pattern(pattern, e)
            return False
    return True


def compile_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, original_error=e) from e


def validate_patterns(patterns: Sequence[str], is_regex: bool) -> list[tuple[str, str]]:
    """Return (pattern, error message) for every pattern that would be rejected."""
    if not is_regex:
        return []

    invalid = []
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            invalid.append((pattern, str(e)))
    return invalid


class LineMatcher:
    """Precompiled filter set shared by every worker of one scan.

    Regex patterns are compiled up front, so a bad pattern fails the scan
    request before any file is opened.
    """

    def __init__(self, filters: Sequence[str], is_regex: bool):
        self.filters = tuple(filters)
        self.is_regex = is_regex
        self._compiled = [compile_pattern(f) for f in self.filters] if is_regex else []

    def matches(self, line: str) -> bool:
        if not self.is_regex:
            for f in self.filters:
                if f not in line:
                    return False
            return True

        for regex in self._compiled:
            if regex.search(line) is None:
                return False
        return True

    def __repr__(self) -> str:
        mode = 'regex' if self.is_regex else 'literal'
        return f'LineMatcher({list(self.filters)!r}, {mode})'


class NameFilter:
    """File name filter: a single literal substring or regex. Empty accepts everything."""

    def __init__(self, pattern: str, is_regex: bool):
        self.pattern = pattern
        self.is_regex = is_regex
        self._regex = compile_pattern(pattern) if is_regex and pattern else None

    def accepts(self, name: str) -> bool:
        if not self.pattern:
            return True
        if self._regex is not None:
            return self._regex.search(name) is not None
        return self.pattern in name
