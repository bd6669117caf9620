"""
Main CLI for biblint.

Combines all subcommands: clean, check, dups
"""

import click
import colorama
from biblint import __version__
from biblint.cli_check import check, dups
from biblint.cli_clean import clean


@click.group()
@click.version_option(version=__version__)
def cli():
    """biblint - Clean up and check BibTeX files."""
    colorama.just_fix_windows_console()


# Add subcommands
cli.add_command(clean, 'clean')
cli.add_command(check, 'check')
cli.add_command(dups, 'dups')


def main():
    cli()


if __name__ == '__main__':
    main()
