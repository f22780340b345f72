"""Check command: validate filters without touching the file system"""

import sys

import click

from logscan.matcher import validate_patterns


@click.command()
@click.option('-l', '--line-filter', 'line_filters', multiple=True, help='Line filter to validate (repeatable)')
@click.option('--lr', '--line-regex', 'line_regex', is_flag=True, help='Line filters are regular expressions')
@click.option('-f', '--file-filter', default='', help='File name filter to validate')
@click.option('--fr', '--file-regex', 'file_regex', is_flag=True, help='File filter is a regular expression')
def check_command(line_filters, line_regex, file_filter, file_regex):
    """
    Validate filters before running a scan.

    Literal filters are always valid. Regex filters are compiled with the same
    engine the scanner uses; every pattern that fails to compile is reported.
    Exits with code 2 when any filter is invalid.

    \b
    Examples:
      logscan check -l 'ERROR [0-9]+' --lr
      logscan check -f '*.log' --fr
    """
    invalid = validate_patterns(line_filters, line_regex)
    if file_filter:
        invalid += validate_patterns([file_filter], file_regex)

    if not invalid:
        total = len(line_filters) + (1 if file_filter else 0)
        click.echo(f'OK: {total} filter(s) valid')
        return

    for pattern, error in invalid:
        click.echo(f'Invalid pattern {pattern!r}: {error}', err=True)
    sys.exit(2)
