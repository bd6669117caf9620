"""CLI command for cleaning a BibTeX file."""

import click
from pathlib import Path
from biblint.bib.writer import format_database
from biblint.cli_common import fail, load_database, start
from biblint.lint.engine import LintEngine


@click.command()
@click.argument('bib_file', type=click.Path())
@click.option('--sort', 'sort_by', help='Sort the entries by this field')
@click.option('--reverse/--no-reverse', default=None,
              help='Reverse the sort order')
@click.option('--blessed', help='Comma separated list of extra fields to keep')
@click.option('--by-title', is_flag=True, default=None,
              help='Also merge contained entries that share a title')
@click.option('--output', '-o', type=click.Path(), help='Write to a file instead of stdout')
@click.option('--config', type=click.Path(), help='Config file path')
@click.option('--quiet', is_flag=True, help='Minimize output messages')
def clean(bib_file, sort_by, reverse, blessed, by_title, output, config, quiet):
    """
    Clean up nonsense in a BibTeX file.

    Normalises whitespace, braces, numbers, months, author names and page
    ranges, drops unknown and empty fields, removes duplicate and
    contained entries, then sorts.

    Example:
        biblint clean refs.bib --sort year --blessed "eprint,archiveprefix" -o clean.bib
    """
    cfg = start(config, quiet)
    engine = LintEngine(cfg.data)
    db = load_database(engine, bib_file)

    blessed_fields = None
    if blessed is not None:
        blessed_fields = [b.strip().lower() for b in blessed.split(',') if b.strip()]
        blessed_fields += cfg.get_blessed_fields()

    removed = engine.clean(
        db,
        sort_by=sort_by,
        reverse=reverse,
        blessed=blessed_fields,
        by_title=by_title
    )

    text = format_database(db)
    if output:
        try:
            Path(output).write_text(text, encoding='utf-8')
        except OSError as e:
            engine.audit.log_error("write_error", str(e), {"output": output})
            fail(f"couldn't write {output}: {e}")
    else:
        click.echo(text, nl=False)

    if not quiet:
        click.echo(click.style(f"✓ Wrote {len(db.pubs)} publications.", fg="green"), err=True)
        if any(removed.values()):
            summary = ", ".join(f"{n} {kind}" for kind, n in removed.items() if n)
            click.echo(click.style(f"  Removed duplicates: {summary}", fg="cyan"), err=True)


if __name__ == '__main__':
    clean()
