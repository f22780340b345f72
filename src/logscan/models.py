"""Pydantic models for scan requests, match events and scan results"""

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ScanRequest(BaseModel):
    """Parameters of one directory scan. Immutable for the duration of the scan."""

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., description='Directory whose immediate entries are scanned')
    file_filter: str = Field(default='', description='File name filter; empty accepts every name')
    file_filter_is_regex: bool = Field(default=False, description='Treat file_filter as a regular expression')
    line_filters: tuple[str, ...] = Field(default=(), description='Line filters, all of which must match')
    line_filter_is_regex: bool = Field(default=False, description='Treat line_filters as regular expressions')

    @field_validator('line_filters', mode='before')
    @classmethod
    def _coerce_filters(cls, value):
        if isinstance(value, str):
            return (value,)
        return tuple(value)


class MatchEvent(BaseModel):
    """A single matching line.

    Attributes:
        path: Path of the plain file, or of the archive containing the line
        member: Archive member name, None for plain files
        member_index: Position of the member in its archive (not serialised)
        line_number: 1-based line number within the scanned stream
        line: Line text without the trailing newline
    """

    model_config = ConfigDict(frozen=True)

    path: str
    member: str | None = None
    member_index: int | None = Field(default=None, exclude=True)
    line_number: int = Field(..., ge=1)
    line: str

    @property
    def source(self) -> str:
        """Source identifier as the archive-collapsing output reports it."""
        return self.path

    def display_source(self, member_names: bool = False) -> str:
        if member_names and self.member is not None:
            return f'{self.path}/{self.member}'
        return self.path


class EntryFailure(BaseModel):
    """A directory entry (or archive member) that could not be scanned."""

    path: str
    member: str | None = None
    kind: str = Field(..., description='open, archive or read')
    message: str

    def describe(self) -> str:
        source = f'{self.path}/{self.member}' if self.member else self.path
        return f'{source} ({self.kind}): {self.message}'


class EntryStats(BaseModel):
    path: str
    sources_scanned: int = 0
    lines_scanned: int = 0
    matches: int = 0
    elapsed_ms: int = 0


class ScanSummary(BaseModel):
    """Outcome of scan_directory after every worker has been joined"""

    root: str
    entries_total: int = 0
    entries_skipped: int = 0
    entries_scanned: int = 0
    total_matches: int = 0
    stats: list[EntryStats] = Field(default_factory=list)
    failures: list[EntryFailure] = Field(default_factory=list)
    elapsed: float = 0.0

    @computed_field
    @property
    def ok(self) -> bool:
        return not self.failures

    def to_cli(self, colorize: bool = False) -> str:
        """Format summary for CLI output"""
        GREY = '\033[90m'
        BOLD_CYAN = '\033[1;36m'
        GREEN = '\033[32m'
        RED = '\033[91m'
        RESET = '\033[0m'

        lines = []
        if colorize:
            lines.append(f'{GREY}Directory:{RESET} {BOLD_CYAN}{self.root}{RESET}')
        else:
            lines.append(f'Directory: {self.root}')
        lines.append(
            f'Entries: {self.entries_total} total, {self.entries_scanned} scanned, {self.entries_skipped} skipped'
        )
        if colorize:
            lines.append(f'Matches: {GREEN}{self.total_matches}{RESET}')
        else:
            lines.append(f'Matches: {self.total_matches}')
        lines.append(f'Time: {self.elapsed:.3f}s')

        if self.failures:
            header = f'Failures ({len(self.failures)}):'
            lines.append(f'{RED}{header}{RESET}' if colorize else header)
            for failure in self.failures:
                lines.append(f'  {failure.describe()}')

        return '\n'.join(lines)
