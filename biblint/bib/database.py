"""
The parsed database: entries, @string symbols, preambles and diagnostics.
"""

import functools
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from .braces import parse_brace_tree
from .entry import Entry
from .values import PREDEFINED_SYMBOLS, Value

# Depth used when resolving symbols for comparisons
SORT_SYMBOL_DEPTH = 10

FieldTransform = Callable[[str, Value], Value]


@dataclass
class BibTeXError:
    """A semantic problem found in the database (not a syntax error)."""

    entry: Optional[Entry]
    tag: str
    msg: str

    @property
    def key(self) -> str:
        return self.entry.key if self.entry is not None else "<none>"

    @property
    def line_no(self) -> int:
        return self.entry.line_no if self.entry is not None else 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "key": self.key,
            "tag": self.tag,
            "line": self.line_no,
            "message": self.msg,
        }


@dataclass
class Database:
    """Everything read from one file."""

    pubs: List[Entry] = field(default_factory=list)
    symbols: Dict[str, Value] = field(default_factory=dict)
    preamble: List[str] = field(default_factory=list)
    errors: List[BibTeXError] = field(default_factory=list)

    def add_error(self, entry: Optional[Entry], tag: str, msg: str):
        self.errors.append(BibTeXError(entry=entry, tag=tag, msg=msg))

    def live_pubs(self) -> Iterator[Entry]:
        return (e for e in self.pubs if not e.is_deleted)

    def remove_deleted(self) -> int:
        """
        Drop entries marked deleted, keeping the order of the rest.

        Returns:
            Number of entries removed
        """
        before = len(self.pubs)
        self.pubs = [e for e in self.pubs if not e.is_deleted]
        return before - len(self.pubs)

    # ------------------------------------------------------------------
    # Symbols and ordering
    # ------------------------------------------------------------------

    def symbol_value(self, value: Value, max_depth: int) -> Value:
        """
        Expand a symbol to what it stands for.

        User symbols are followed up to `max_depth` times; hitting the
        limit returns wherever resolution got to. A predefined month ends
        the chain as a string. Undefined symbols and non-symbols come back
        unchanged.
        """
        depth = 0
        while depth < max_depth and value.is_symbol:
            name = value.text.lower()
            if name in self.symbols:
                value = self.symbols[name]
                depth += 1
            elif name in PREDEFINED_SYMBOLS:
                return Value.string(PREDEFINED_SYMBOLS[name])
            else:
                return value
        return value

    def less(self, v1: Value, v2: Value) -> bool:
        """
        Sort order between two values, resolving symbols first.

        Text compares on its brace-free form, numbers numerically, and a
        number against text compares its decimal form as text.
        """
        v1 = self.symbol_value(v1, SORT_SYMBOL_DEPTH)
        v2 = self.symbol_value(v2, SORT_SYMBOL_DEPTH)

        if not v1.is_number and not v2.is_number:
            bt1, _ = parse_brace_tree(v1.text)
            bt2, _ = parse_brace_tree(v2.text)
            return bt1.flatten_for_sorting() < bt2.flatten_for_sorting()

        if v1.is_number and v2.is_number:
            return v1.number < v2.number

        return v1.sort_text() < v2.sort_text()

    def sort_by_field(self, tag: str, reverse: bool = False):
        """
        Sort the publications by one field.

        Entries without the field come first, ordered by key; the rest are
        ordered with less(). `reverse` flips the whole order.
        """
        def compare(e1: Entry, e2: Entry) -> int:
            v1 = e1.fields.get(tag)
            v2 = e2.fields.get(tag)
            if v1 is None and v2 is None:
                return (e1.key > e2.key) - (e1.key < e2.key)
            if v1 is None:
                return -1
            if v2 is None:
                return 1
            if self.less(v1, v2):
                return -1
            if self.less(v2, v1):
                return 1
            return 0

        self.pubs.sort(key=functools.cmp_to_key(compare), reverse=reverse)

    # ------------------------------------------------------------------
    # Field iteration used by the clean transforms
    # ------------------------------------------------------------------

    def transform_each_field(self, trans: FieldTransform):
        """Apply `trans` to every tag/value pair, storing the result back."""
        for entry in self.live_pubs():
            for tag, value in list(entry.fields.items()):
                entry.fields[tag] = trans(tag, value)

    def transform_field(self, tag: str, trans: FieldTransform):
        """Apply `trans` to every field named `tag`."""
        for entry in self.live_pubs():
            value = entry.fields.get(tag)
            if value is not None:
                entry.fields[tag] = trans(tag, value)

    def check_field(self, tag: str, check: Callable[[Value], str]):
        """Record an error for each `tag` field where `check` returns a message."""
        for entry in self.live_pubs():
            value = entry.fields.get(tag)
            if value is not None:
                msg = check(value)
                if msg:
                    self.add_error(entry, tag, msg)

    def check_all_fields(self, check: Callable[[str, Value], str]):
        """Record an error for each field where `check` returns a message."""
        for entry in self.live_pubs():
            for tag, value in entry.fields.items():
                msg = check(tag, value)
                if msg:
                    self.add_error(entry, tag, msg)
