"""Helpers shared by the CLI commands."""

import logging
import sys
from typing import List

import click
from biblint import __version__
from biblint.bib.parser import ParserError
from biblint.config import BiblintConfig, ConfigError, load_config
from biblint.lint.engine import LintEngine


def print_banner():
    click.echo(click.style(f"biblint {__version__}", fg="cyan"), err=True)


def configure_logging(level: str, quiet: bool = False):
    """Send module log records to stderr with a biblint: prefix."""
    logging.basicConfig(
        stream=sys.stderr,
        format="biblint: %(message)s",
        level=logging.ERROR if quiet else getattr(logging, level),
        force=True,
    )


def print_syntax_errors(errors: List[ParserError]):
    """Write parser errors to stderr."""
    for e in errors:
        click.echo(click.style(str(e), fg="red"), err=True)


def fail(message: str):
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


def start(config_path, quiet: bool) -> BiblintConfig:
    """Load configuration, set up logging and print the banner."""
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        fail(f"Config error: {e}")

    configure_logging(cfg.get_log_level(), quiet)
    if not quiet:
        print_banner()
    return cfg


def load_database(engine: LintEngine, bib_file: str):
    """Parse the input file, reporting syntax errors on stderr."""
    try:
        db, errors = engine.load(bib_file)
    except FileNotFoundError as e:
        engine.audit.log_error("file_not_found", str(e))
        fail(str(e))
    except UnicodeDecodeError as e:
        engine.audit.log_error("decode_error", str(e), {"source_path": bib_file})
        fail(f"couldn't read {bib_file}: {e}")

    print_syntax_errors(errors)
    return db
