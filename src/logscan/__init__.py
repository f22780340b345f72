"""logscan - concurrent line filter for directories of log files and zip archives"""

from logscan.__version__ import __version__
from logscan.errors import InvalidPatternError, LogScanError, ScanConfigError, ScanError
from logscan.models import MatchEvent, ScanRequest, ScanSummary
from logscan.scanner import scan_directory

__all__ = [
    '__version__',
    'InvalidPatternError',
    'LogScanError',
    'MatchEvent',
    'ScanConfigError',
    'ScanError',
    'ScanRequest',
    'ScanSummary',
    'scan_directory',
]
