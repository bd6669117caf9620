"""CLI commands for reporting problems and duplicates."""

import click
from biblint.bib.writer import format_errors
from biblint.cli_common import load_database, start
from biblint.lint.engine import LintEngine


@click.command()
@click.argument('bib_file', type=click.Path())
@click.option('--config', type=click.Path(), help='Config file path')
@click.option('--quiet', is_flag=True, help='Minimize output messages')
def check(bib_file, config, quiet):
    """
    Look for errors that can't be automatically corrected.

    Example:
        biblint check refs.bib
    """
    cfg = start(config, quiet)
    engine = LintEngine(cfg.data)
    db = load_database(engine, bib_file)

    found = engine.check(db)
    click.echo(format_errors(db), nl=False)

    if not quiet:
        color = "yellow" if found else "green"
        click.echo(click.style(f"Found {found} problem(s).", fg=color), err=True)


@click.command()
@click.argument('bib_file', type=click.Path())
@click.option('--config', type=click.Path(), help='Config file path')
@click.option('--quiet', is_flag=True, help='Minimize output messages')
def dups(bib_file, config, quiet):
    """
    Look for duplicate entries.

    Entries are grouped by a fingerprint of their title (case, braces,
    punctuation and small words ignored).

    Example:
        biblint dups refs.bib
    """
    cfg = start(config, quiet)
    engine = LintEngine(cfg.data)
    db = load_database(engine, bib_file)

    groups = engine.find_duplicates(db)
    for entries in groups.values():
        click.echo("Possible Duplicates:")
        for entry in entries:
            # title exists since the fingerprint is non-empty
            click.echo(f'   {entry.key} "{entry.fields["title"].text}"')

    if not quiet:
        color = "yellow" if groups else "green"
        click.echo(click.style(f"Found {len(groups)} group(s) of possible duplicates.",
                               fg=color), err=True)
