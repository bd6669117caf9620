"""
biblint - Clean up and check BibTeX files.

Parses BibTeX into a structured database, normalises it, reports problems
that need a human, and finds duplicate entries.
"""

__version__ = "0.4.0"
__author__ = "Your Name"

from biblint.config import BiblintConfig, load_config
from biblint.lint.engine import LintEngine
from biblint.bib import Database, parse_file, parse_string

__all__ = ['BiblintConfig', 'load_config', 'LintEngine', 'Database', 'parse_file', 'parse_string']
