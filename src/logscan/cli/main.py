"""Main CLI entry point with command groups"""

import click

from logscan.__version__ import __version__
from logscan.cli.check import check_command
from logscan.cli.scan import scan_command


class DefaultCommandGroup(click.Group):
    """Custom Click Group that falls back to the scan command"""

    def parse_args(self, ctx, args):
        if ctx.resilient_parsing:
            return super().parse_args(ctx, args)

        # If --help or --version is requested, show group help/version
        if args and args[0] in ('--help', '-h', '--version'):
            return super().parse_args(ctx, args)

        if args and args[0] in self.commands:
            return super().parse_args(ctx, args)

        return super().parse_args(ctx, ['scan'] + args)


@click.group(cls=DefaultCommandGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name='logscan')
@click.pass_context
def cli(ctx):
    """
    logscan - filter lines across a directory of log files and zip archives.

    \b
    Commands:
      logscan [scan] [OPTIONS]     Scan a directory (default command)
      logscan check -l PATTERN     Validate line/file filters

    \b
    Examples:
      logscan -d /var/log/app -l ERROR
      logscan -d ./logs -f '\\.log$' --fr -l 'timeout|refused' --lr
      logscan -d ./logs -f .zip -l ERROR --member-names
      logscan check -l '(unclosed' --lr
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


cli.add_command(scan_command, name='scan')
cli.add_command(check_command, name='check')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
