"""
BibTeX data model and processing.

- Lexer and error-tolerant parser
- Brace-tree model for field text
- Values, symbols and their ordering
- Author name parsing
- Clean-up transforms, checks and duplicate detection
- Writer for cleaned output
"""

from .authors import Author, normalize_name
from .braces import BraceNode, is_strange_case, parse_brace_tree
from .database import BibTeXError, Database
from .entry import BLESSED_FIELDS, OPTIONAL_FIELDS, REQUIRED_FIELDS, Entry, EntryKind
from .lexer import Lexer, Token, TokenType
from .parser import Parser, ParserError, parse_file, parse_string
from .values import PREDEFINED_SYMBOLS, Value, ValueType
from .writer import format_database, format_errors

__all__ = [
    'Author',
    'normalize_name',
    'BraceNode',
    'is_strange_case',
    'parse_brace_tree',
    'BibTeXError',
    'Database',
    'BLESSED_FIELDS',
    'OPTIONAL_FIELDS',
    'REQUIRED_FIELDS',
    'Entry',
    'EntryKind',
    'Lexer',
    'Token',
    'TokenType',
    'Parser',
    'ParserError',
    'parse_file',
    'parse_string',
    'PREDEFINED_SYMBOLS',
    'Value',
    'ValueType',
    'format_database',
    'format_errors',
]
