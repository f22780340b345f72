"""CLI scan command for logscan"""

import logging
import sys

import click

from logscan.config import get_log_level, get_max_workers
from logscan.errors import ScanConfigError, ScanError
from logscan.models import ScanRequest
from logscan.scanner import scan_directory
from logscan.sink import OutputSink


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(log_file: str, level_name: str) -> None:
    """Send logs to log_file (appending), or to stderr when log_file is '-'."""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    if log_file == '-':
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=log_file, filemode='a', force=True)


@click.command()
@click.option('-d', '--dir', 'folder', default='./logs/', show_default=True, help='The log folder to scan')
@click.option('-f', '--file-filter', default='', help='File name filter (substring, or regex with --fr)')
@click.option('--fr', '--file-regex', 'file_regex', is_flag=True, help='The file filter is a regular expression')
@click.option(
    '-l',
    '--line-filter',
    'line_filters',
    multiple=True,
    help='Line filter; repeat for several filters, all of which must match',
)
@click.option('--lr', '--line-regex', 'line_regex', is_flag=True, help='The line filters are regular expressions')
@click.option('-o', '--output', default='-', show_default=True, help='Output file, "-" for stdout')
@click.option('-g', '--log-file', default='-', show_default=True, help='Log file (appended), "-" for stderr')
@click.option('--log-level', default=None, help='Log level (default: LOGSCAN_LOG_LEVEL or WARNING)')
@click.option('-j', '--workers', type=click.IntRange(min=1), help='Maximum concurrent workers')
@click.option(
    '-m', '--max-count', type=click.IntRange(min=1), help='Stop reading each file (or archive member) after N matches'
)
@click.option('--member-names', is_flag=True, help='Report archive matches as archive.zip/member')
@click.option('--json', 'output_json', is_flag=True, help='Write matches as JSON lines')
@click.option('--summary', is_flag=True, help='Print a scan summary to stderr')
@click.option('--no-color', is_flag=True, help='Disable colored summary output')
def scan_command(
    folder,
    file_filter,
    file_regex,
    line_filters,
    line_regex,
    output,
    log_file,
    log_level,
    workers,
    max_count,
    member_names,
    output_json,
    summary,
    no_color,
):
    """
    Scan a directory of log files and zip archives for matching lines.

    Every regular file directly inside the folder whose name passes the file
    filter is scanned; files ending in .zip are opened as archives and each
    member is scanned separately. Subdirectories are not descended into.
    Each matching line is written as `file[line]text`.

    \b
    Examples:
      logscan -d /var/log/app -l ERROR                  # literal filter
      logscan -d logs -l ERROR -l timeout               # both must occur
      logscan -d logs -l '^\\d{4}-\\d{2}' --lr           # regex filter
      logscan -d logs -f '\\.zip$' --fr --member-names   # archives only

    \b
    Exit codes:
      0  scan completed
      1  some entries could not be read (matches from the rest were written)
      2  invalid filters, unreadable folder or unwritable output/log file
    """
    try:
        configure_logging(log_file, log_level or get_log_level())
    except OSError as e:
        click.echo(f'Error: cannot open log file {log_file}: {e}', err=True)
        sys.exit(2)
    logger.info(
        f'PARAMS: d : {folder}, f : {file_filter}, fr : {file_regex}, l : {",".join(line_filters)}, '
        f'lr : {line_regex}, o : {output}, g : {log_file}'
    )

    request = ScanRequest(
        root=folder,
        file_filter=file_filter,
        file_filter_is_regex=file_regex,
        line_filters=line_filters,
        line_filter_is_regex=line_regex,
    )
    colorize = not no_color and sys.stderr.isatty()

    try:
        out = click.open_file(output, 'w')
    except OSError as e:
        click.echo(f'Error: cannot open output {output}: {e}', err=True)
        sys.exit(2)

    with out:
        sink = OutputSink(out, member_names=member_names, max_per_source=max_count, json_lines=output_json)
        try:
            result = scan_directory(request, sink, max_workers=workers or get_max_workers())
        except ScanConfigError as e:
            click.echo(f'Error: {e}', err=True)
            sys.exit(2)
        except ScanError as e:
            sink.flush()
            click.echo(e.summary.to_cli(colorize=colorize), err=True)
            sys.exit(1)
        sink.flush()

    if summary:
        click.echo(result.to_cli(colorize=colorize), err=True)
