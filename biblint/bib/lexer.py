"""
Tokenizer for BibTeX-family files.

`Lexer.next_token()` returns one token per call. Whether a `{` opens an
entry or starts a string depends on the parser's context, so the caller
passes that mode in on every call.
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO, Union


class TokenType(str, Enum):
    """Kinds of tokens the lexer can produce."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"
    IDENT = "IDENT"
    STRING = "STRING"
    AT = "@"
    COMMA = ","
    LBRACE = "{"
    RBRACE = "}"
    HASH = "#"
    EQUALS = "="

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A single token with the 1-based position where it starts."""

    type: TokenType
    literal: str
    line: int = 0
    col: int = 0

    def position(self):
        return self.line, self.col


# Characters that end an identifier
RESERVED = '@#,{}="('

SINGLE_CHAR_TOKENS = {
    '@': TokenType.AT,
    ',': TokenType.COMMA,
    '=': TokenType.EQUALS,
    '#': TokenType.HASH,
    '}': TokenType.RBRACE,
    ')': TokenType.RBRACE,  # ) closes where } would
    '(': TokenType.LBRACE,
}


class Lexer:
    """
    Single-character-lookahead tokenizer over a text stream.

    The current character is always the next unprocessed one; it is the
    empty string once the stream is exhausted.
    """

    def __init__(self, stream: Union[TextIO, str]):
        """
        Create a lexer.

        Args:
            stream: Text stream (or a plain string) to tokenize
        """
        if isinstance(stream, str):
            stream = io.StringIO(stream)
        self.stream = stream
        self.ch = ""
        self.line = 1
        self.col = 0
        self._next_line = 1
        self._next_col = 1
        self._partial = ""
        self._advance()

    def _advance(self) -> bool:
        """Read the next character; returns False at end of input."""
        ch = self.stream.read(1)
        if not ch:
            self.ch = ""
            return False

        self.ch = ch
        self.line = self._next_line
        self.col = self._next_col
        if ch == "\n":
            self._next_line += 1
            self._next_col = 1
        else:
            self._next_col += 1
        return True

    def at_eof(self) -> bool:
        return self.ch == ""

    def _skip_whitespace(self):
        while not self.at_eof() and self.ch.isspace():
            self._advance()

    def skip_to_newline(self):
        """Skip the rest of the current line."""
        while not self.at_eof() and self.ch != "\n":
            self._advance()

    def _read_quote_string(self) -> Optional[str]:
        """
        Read a "-delimited string; the current character is the opening quote.

        A backslash escapes the next character, so \\" stays in the string.
        The closing quote is consumed but not returned. Returns None when
        the input ends before the closing quote (partial text is kept in
        `self._partial`).
        """
        escape = False
        chars = []
        while self._advance():
            if self.ch == '"' and not escape:
                self._advance()
                return "".join(chars)
            chars.append(self.ch)
            escape = not escape and self.ch == "\\"
        self._partial = "".join(chars)
        return None

    def _read_braces_string(self) -> Optional[str]:
        """
        Read a {}-delimited string; the current character is the opening brace.

        Nested pairs are counted, and \\{ or \\} do not change the count.
        Returns None when the input ends before the matching brace.
        """
        escape = False
        chars = []
        depth = 1
        while self._advance():
            if self.ch == "{" and not escape:
                depth += 1
            elif self.ch == "}" and not escape:
                depth -= 1

            if depth == 0:
                self._advance()
                return "".join(chars)
            chars.append(self.ch)
            escape = not escape and self.ch == "\\"
        self._partial = "".join(chars)
        return None

    def _read_ident(self) -> str:
        chars = [self.ch]
        while self._advance():
            if self.ch.isspace() or self.ch in RESERVED:
                break
            chars.append(self.ch)
        return "".join(chars)

    def next_token(self, braces_as_string: bool = False) -> Token:
        """
        Produce the next token.

        Args:
            braces_as_string: If True, a `{` starts a balanced-brace STRING
                token; otherwise it is a bare LBRACE

        Returns:
            The next Token; EOF once input is exhausted
        """
        self._skip_whitespace()
        if self.at_eof():
            return Token(TokenType.EOF, "", self._next_line, self._next_col)

        line, col = self.line, self.col
        ch = self.ch

        if ch in SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[ch], ch, line, col)

        if ch == "{" and not braces_as_string:
            self._advance()
            return Token(TokenType.LBRACE, ch, line, col)

        if ch == "{" or ch == '"':
            if ch == "{":
                text = self._read_braces_string()
            else:
                text = self._read_quote_string()
            if text is None:
                return Token(TokenType.ILLEGAL, self._partial, line, col)
            return Token(TokenType.STRING, text, line, col)

        return Token(TokenType.IDENT, self._read_ident(), line, col)
