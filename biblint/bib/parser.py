"""
BibTeX parser.

The accepted language overlaps imperfectly with what bibtex itself takes:

- commas between tag = value pairs are optional (a common error, and not
  needed to parse correctly)
- () may delimit an entry as well as {}
- the # concatenation operator is not supported
- @string values may be numbers, and one @string may define several symbols
- @preamble "text" is accepted as well as @preamble{text}

Syntax errors never raise: they are recorded, the broken construct is
dropped, and parsing picks up again at the next `@`.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO, Union

from .database import Database
from .entry import Entry, EntryKind
from .lexer import Lexer, Token, TokenType
from .values import Value

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")


def parse_int(text: str) -> Optional[int]:
    """Parse a plain decimal integer; None if `text` is anything else."""
    if _INTEGER_RE.match(text):
        return int(text)
    return None


@dataclass
class ParserError:
    """A syntax error at the position of the offending token."""

    message: str
    token: Token
    expected: Optional[TokenType] = None

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def col(self) -> int:
        return self.token.col

    def __str__(self) -> str:
        return f"error: line {self.line}, col {self.col}: {self.message}"


class Parser:
    """Reads a token stream into a Database."""

    def __init__(self, stream: Union[TextIO, str]):
        """
        Create a parser.

        Args:
            stream: Text stream or string holding BibTeX source
        """
        self.lexer = Lexer(stream)
        self.errors: List[ParserError] = []
        self.braces_as_string = False
        self.cur_token: Optional[Token] = None
        self.peek_token: Optional[Token] = None
        self.database: Optional[Database] = None
        # fill both cur and peek
        self._advance()
        self._advance()

    # ------------------------------------------------------------------
    # Token handling
    # ------------------------------------------------------------------

    def _advance(self):
        """The peek token becomes current and a new peek is read."""
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token(self.braces_as_string)

    def _cur_is(self, t: TokenType) -> bool:
        return self.cur_token.type is t

    def _peek_is(self, t: TokenType) -> bool:
        return self.peek_token.type is t

    def _peek_error(self, expected: TokenType):
        self.errors.append(ParserError(
            message=f"expected {expected}, got {self.peek_token.type} instead",
            token=self.peek_token,
            expected=expected,
        ))

    def _add_error(self, message: str):
        self.errors.append(ParserError(message=message, token=self.peek_token))

    def _expect_peek(self, t: TokenType) -> bool:
        """Advance if the peek token has type `t`; otherwise record an error."""
        if self._peek_is(t):
            self._advance()
            return True
        self._peek_error(t)
        return False

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _read_tag_value(self, entry: Entry) -> bool:
        """
        Read IDENT = (STRING | IDENT) with the tag IDENT as current token.

        A bare integer becomes a number and any other bare word a symbol.
        When a tag repeats, the first value wins.
        """
        tag = self.cur_token.literal.lower()

        if not self._expect_peek(TokenType.EQUALS):
            return False

        if self._peek_is(TokenType.IDENT):
            self._advance()
            literal = self.cur_token.literal
            number = parse_int(literal)
            value = Value.integer(number) if number is not None else Value.symbol(literal)
        elif self._peek_is(TokenType.STRING):
            self._advance()
            value = Value.string(self.cur_token.literal)
        else:
            self._peek_error(TokenType.STRING)
            return False

        if tag in entry.fields:
            logger.warning("%s: duplicate field %r ignored (line %d)",
                           entry.key or entry.entry_string, tag, self.cur_token.line)
            if self.database is not None and entry.kind is not EntryKind.STRING:
                self.database.add_error(entry, tag, f'duplicate field "{tag}" ignored')
            return True

        entry.fields[tag] = value
        return True

    def _parse_preamble(self) -> Optional[Entry]:
        """Parse @preamble{text}; the text ends up in the entry's key."""
        entry = Entry(kind=EntryKind.PREAMBLE, line_no=self.cur_token.line)
        self.braces_as_string = True
        try:
            if not self._expect_peek(TokenType.IDENT):
                return None
            entry.entry_string = self.cur_token.literal
            if not self._expect_peek(TokenType.STRING):
                return None
            entry.key = self.cur_token.literal
            return entry
        finally:
            self.braces_as_string = False

    def _parse_entry(self) -> Optional[Entry]:
        """
        Parse @type{key, tag = value, ...} with the `@` as current token.

        @string blocks have no key; their symbols come back as fields.
        """
        if self._peek_is(TokenType.IDENT) and \
                EntryKind.from_ident(self.peek_token.literal) is EntryKind.PREAMBLE:
            return self._parse_preamble()

        entry = Entry(line_no=self.cur_token.line)

        if not self._expect_peek(TokenType.IDENT):
            return None
        entry.kind = EntryKind.from_ident(self.cur_token.literal)
        entry.entry_string = self.cur_token.literal

        if not self._expect_peek(TokenType.LBRACE):
            return None

        if entry.kind is not EntryKind.STRING:
            if not self._expect_peek(TokenType.IDENT):
                return None
            entry.key = self.cur_token.literal

            if not self._expect_peek(TokenType.COMMA):
                return None

        # inside the tag/value pairs a '{' starts a string
        self.braces_as_string = True
        try:
            while not self._peek_is(TokenType.RBRACE):
                if not self._expect_peek(TokenType.IDENT):
                    return None
                if not self._read_tag_value(entry):
                    return None
                # the comma is optional, so missing ones are not an error
                if self._peek_is(TokenType.COMMA):
                    self._advance()
        finally:
            self.braces_as_string = False

        return entry

    def parse(self) -> Database:
        """
        Read the whole input.

        Returns:
            The Database; syntax errors are left in `self.errors`
        """
        self.braces_as_string = False
        database = Database()
        self.database = database

        while not self._cur_is(TokenType.EOF):
            if self._cur_is(TokenType.AT):
                entry = self._parse_entry()
                if entry is not None:
                    self._store(database, entry)
            self._advance()

        return database

    def _store(self, database: Database, entry: Entry):
        if entry.kind is EntryKind.STRING:
            if not entry.fields:
                self._add_error("Wrong number of string definitions in @string")
            for name, value in entry.fields.items():
                database.symbols[name] = value
        elif entry.kind is EntryKind.PREAMBLE:
            database.preamble.append(entry.key)
        else:
            database.pubs.append(entry)


def parse_string(text: str):
    """
    Parse BibTeX source held in a string.

    Returns:
        (Database, list of ParserError)
    """
    parser = Parser(text)
    database = parser.parse()
    return database, parser.errors


def parse_file(file_path: Union[str, Path]):
    """
    Parse a .bib file.

    Args:
        file_path: Path to the file

    Returns:
        (Database, list of ParserError)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"BibTeX file not found: {file_path}")

    with open(path, "r", encoding="utf-8") as f:
        parser = Parser(f)
        database = parser.parse()
    return database, parser.errors
