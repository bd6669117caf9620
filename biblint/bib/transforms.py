"""
Clean-up transforms.

Field transforms are plain functions from (tag, value) to the value to
store; `Database.transform_each_field` / `transform_field` own the
iteration. The database-level operations at the bottom work on whole
entries (dropping fields, parsing authors).
"""

import logging
import re
from typing import Iterable, List

from .authors import normalize_name, split_author_list
from .braces import canonical_brace as _canonical_brace
from .braces import parse_brace_tree, split_words
from .database import Database
from .entry import all_known_fields
from .parser import parse_int
from .values import PREDEFINED_SYMBOLS, Value

logger = logging.getLogger(__name__)

# Words left lowercase in titles; also ignored in title fingerprints
TITLE_LOWER_WORDS = frozenset([
    "the", "a", "an", "but", "for", "and", "or", "nor", "to", "from",
    "on", "in", "of", "at", "by",
])

MONTH_ABBREVIATIONS = {
    "jan": "jan", "feb": "feb", "mar": "mar", "apr": "apr",
    "may": "may", "jun": "jun", "jul": "jul", "aug": "aug",
    "sep": "sep", "sept": "sep", "oct": "oct", "nov": "nov", "dec": "dec",
}

MONTHS_BY_NUMBER = ["jan", "feb", "mar", "apr", "may", "jun",
                    "jul", "aug", "sep", "oct", "nov", "dec"]

_SPACES_RE = re.compile(r" +")
_TITLE_PERIOD_RE = re.compile(r"([a-z])\.$")
_PAGE_DASH_RE = re.compile(r"([0-9])\s*-{1,2}\s*([0-9])")
_PAGE_RANGE_RE = re.compile(r"^([0-9]+)--([0-9]+)$")
_AUTHOR_ET_AL_RE = re.compile(r"\s*,?\s+(?:and\s+)?et\.?\s+al\.?\s*$", re.IGNORECASE)


# ----------------------------------------------------------------------
# Field transforms
# ----------------------------------------------------------------------

def normalize_whitespace(tag: str, value: Value) -> Value:
    """Replace newlines, tabs and CRs with spaces and collapse runs of spaces."""
    if value.is_string:
        text = value.text.replace("\n", " ").replace("\t", " ").replace("\r", " ")
        value.text = _SPACES_RE.sub(" ", text.strip())
    return value


def remove_whole_field_braces(tag: str, value: Value) -> Value:
    """{{foo bar baz}} -> foo bar baz (author fields are left alone)."""
    if value.is_string and tag != "author":
        tree, size = parse_brace_tree(value.text)
        if size == len(value.text):
            if tree.is_entire_string_braced():
                value.text = tree.children[0].flatten()
            else:
                value.text = tree.flatten()
    return value


def canonical_brace(tag: str, value: Value) -> Value:
    """
    Brace whole words that hold a " or an embedded group.

    The common case is foo\\"{e}bar, which becomes {foo\\"{e}bar}.
    """
    if value.is_string and tag != "author":
        value.text = _canonical_brace(value.text)
    return value


def convert_titles_to_min_braces(tag: str, value: Value) -> Value:
    """Protect strange-case words in titles with the fewest braces."""
    if value.is_string and tag in ("title", "booktitle"):
        tree, size = parse_brace_tree(value.text)
        if size == len(value.text):
            value.text = tree.flatten_to_min_braces()
    return value


def convert_int_strings_to_int(tag: str, value: Value) -> Value:
    """volume = {9} -> volume = 9"""
    if value.is_string:
        number = parse_int(value.text)
        if number is not None:
            return Value.integer(number)
    return value


def remove_period_from_titles(tag: str, value: Value) -> Value:
    """Drop a final "." that follows a lowercase letter."""
    if value.is_string:
        value.text = _TITLE_PERIOD_RE.sub(r"\1", value.text)
    return value


def fix_hyphens_in_pages(tag: str, value: Value) -> Value:
    """1 - 10, 1-10 and 1 -- 10 all become 1--10 (brace-free values only)."""
    if value.is_string:
        tree, size = parse_brace_tree(value.text)
        if size == len(value.text) and tree.contains_no_braces():
            value.text = _PAGE_DASH_RE.sub(r"\1--\2", value.text)
    return value


def fix_truncated_page_numbers(tag: str, value: Value) -> Value:
    """1234--56 -> 1234--1256"""
    if value.is_string:
        match = _PAGE_RANGE_RE.match(value.text)
        if match:
            start, end = match.group(1), match.group(2)
            if len(start) > len(end):
                value.text = f"{start}--{start[:len(start) - len(end)]}{end}"
    return value


def replace_abbr_months(tag: str, value: Value) -> Value:
    """month = {Jan} or month = 1 -> month = jan"""
    if value.is_string:
        sym = MONTH_ABBREVIATIONS.get(value.text.lower())
        if sym is not None:
            return Value.symbol(sym)
    elif value.is_number:
        if 1 <= value.number <= 12:
            return Value.symbol(MONTHS_BY_NUMBER[value.number - 1])
    return value


def to_good_title(word: str) -> str:
    """Capitalise a word unless it is one of the small title words."""
    if word in TITLE_LOWER_WORDS:
        return word
    return word[:1].upper() + word[1:]


def title_case_journal_names(tag: str, value: Value) -> Value:
    """Capitalise the big words of top-level journal name text."""
    if value.is_string:
        tree, size = parse_brace_tree(value.text)
        if size == len(value.text):
            for node in tree.children:
                if node.is_leaf():
                    node.leaf = "".join(to_good_title(w) for w in split_words(node.leaf))
            value.text = tree.flatten()
    return value


def replace_author_et_al(tag: str, value: Value) -> Value:
    """A trailing "et al." in an author list becomes "and others"."""
    if value.is_string:
        text, n = _AUTHOR_ET_AL_RE.subn("", value.text)
        if n and text.strip():
            value.text = text + " and others"
    return value


# ----------------------------------------------------------------------
# Database-level operations
# ----------------------------------------------------------------------

def replace_symbols(db: Database):
    """
    Replace strings with the symbol that stands for them.

    Only exact matches are replaced, and only when exactly one symbol
    (user-defined or predefined) has that value.
    """
    symbols = dict(PREDEFINED_SYMBOLS)
    for name, value in db.symbols.items():
        if value.is_string:
            symbols[name] = value.text

    inverted = {}
    for name, text in symbols.items():
        # defined twice: ambiguous, can't invert
        inverted[text] = "" if text in inverted else name

    def trans(tag: str, value: Value) -> Value:
        if value.is_string:
            name = inverted.get(value.text)
            if name:
                return Value.symbol(name)
        return value

    db.transform_each_field(trans)


def remove_non_blessed_fields(db: Database, additional: Iterable[str] = ()):
    """
    Drop every field that is not required, optional or blessed for some
    kind, unless it is listed in `additional`.
    """
    keep = all_known_fields()
    keep.update(f for f in additional if f)

    for entry in db.live_pubs():
        for tag in list(entry.fields):
            if tag not in keep:
                del entry.fields[tag]


def remove_empty_fields(db: Database):
    """Drop string fields whose value is the empty string."""
    for entry in db.live_pubs():
        for tag, value in list(entry.fields.items()):
            if value.is_string and value.text == "":
                del entry.fields[tag]


def normalize_authors(db: Database):
    """
    Parse every author list and rewrite it in normal form.

    Fills in each entry's `author_list`; call this before anything that
    looks at parsed authors. Names that cannot be parsed are dropped and
    reported.
    """
    for entry in db.live_pubs():
        authors = entry.fields.get("author")
        if authors is None or not authors.is_string:
            continue

        entry.author_list = []
        names: List[str] = []
        for name in split_author_list(authors.text):
            author = normalize_name(name)
            if author is None:
                if name.strip():
                    db.add_error(entry, "author", f'could not parse name "{name.strip()}"')
                continue
            entry.author_list.append(author)
            names.append(str(author))

        authors.text = " and ".join(names)
