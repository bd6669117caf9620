"""
Checks for problems that can't be fixed automatically.

Each check appends zero or more BibTeXError records to `db.errors` and
never stops on bad input.
"""

import re
from collections import defaultdict

from .database import Database
from .entry import REQUIRED_FIELDS
from .values import PREDEFINED_SYMBOLS, Value

_ET_AL_RE = re.compile(r"[eE][tT]\s+[aA][lL]")
_LONE_HYPHEN_RE = re.compile(r"\s-\s")
_PAGE_RANGE_RE = re.compile(r"^([0-9]+)--([0-9]+)$")


_ESCAPES = {
    "\a": "\\a", "\b": "\\b", "\f": "\\f", "\n": "\\n",
    "\r": "\\r", "\t": "\\t", "\v": "\\v", "\\": "\\\\", '"': '\\"',
}


def _quoted(s: str) -> str:
    """
    Double-quote a value for a diagnostic.

    Control and other unprintable characters are written as \\xNN, \\uNNNN
    or \\UNNNNNNNN escapes; printable non-ASCII text is kept as is.
    """
    out = ['"']
    for ch in s:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    out.append('"')
    return "".join(out)


def _is_all_caps(s: str) -> bool:
    return all(not ch.isalpha() or ch.isupper() for ch in s)


def _is_all_lower(s: str) -> bool:
    return all(not ch.isalpha() or ch.islower() for ch in s)


def check_years_are_int(db: Database):
    def check(v: Value) -> str:
        if v.is_string:
            return f"year is not an integer {_quoted(v.text)}"
        return ""

    db.check_field("year", check)


def check_et_al(db: Database):
    """Report "et al" written into an author list."""
    def check(v: Value) -> str:
        if v.is_string and _ET_AL_RE.search(v.text):
            return "author contains et al"
        return ""

    db.check_field("author", check)


def check_ascii(db: Database):
    def check(tag: str, v: Value) -> str:
        if v.is_string:
            for i, ch in enumerate(v.text):
                if ord(ch) > 127:
                    return f"contains non-ascii character '{ch}' at position {i}"
        return ""

    db.check_all_fields(check)


def check_lone_hyphen_in_title(db: Database):
    """Report " - " in titles, where --- is probably meant."""
    def check(v: Value) -> str:
        if v.is_string and _LONE_HYPHEN_RE.search(v.text):
            return 'title contains lone " - " when --- is probably needed'
        return ""

    db.check_field("title", check)


def check_page_ranges(db: Database):
    """Report page ranges X--Y with X > Y."""
    def check(v: Value) -> str:
        if v.is_string:
            match = _PAGE_RANGE_RE.match(v.text)
            if match:
                start, end = int(match.group(1)), int(match.group(2))
                if start > end:
                    return f"page range is empty {start}--{end}"
        return ""

    db.check_field("pages", check)


def check_undefined_symbols(db: Database):
    def check(tag: str, v: Value) -> str:
        if v.is_symbol:
            name = v.text.lower()
            if name in db.symbols or name in PREDEFINED_SYMBOLS:
                return ""
            return f"symbol {_quoted(v.text)} is undefined"
        return ""

    db.check_all_fields(check)


def check_duplicate_keys(db: Database):
    """Report keys (compared ignoring case) used by more than one entry."""
    seen = set()
    dups = {}
    for entry in db.live_pubs():
        key = entry.key.lower()
        if key in seen:
            dups[key] = entry
        seen.add(key)

    for entry in dups.values():
        db.add_error(entry, "", f"key {_quoted(entry.key)} is defined more than once")


def check_required_fields(db: Database):
    for entry in db.live_pubs():
        for req in REQUIRED_FIELDS.get(entry.kind, []):
            if not any(r in entry.fields for r in req.split("/")):
                db.add_error(entry, req,
                             f"missing required field {_quoted(req)} in {entry.kind}")


def check_unmatched_dollar_signs(db: Database):
    """Report fields with an odd number of unescaped $."""
    def check(tag: str, v: Value) -> str:
        if v.is_string:
            count = 0
            escape = False
            for ch in v.text:
                if ch == "$":
                    if not escape:
                        count += 1
                    escape = False
                elif ch == "\\":
                    escape = not escape
                else:
                    escape = False
            if count % 2 != 0:
                return "contains unbalanced $"
        return ""

    db.check_all_fields(check)


def check_redundant_symbols(db: Database):
    """Report groups of @string symbols that define the same text."""
    by_text = defaultdict(list)
    for name, value in db.symbols.items():
        if value.is_string:
            by_text[value.text].append(name)

    for text, names in by_text.items():
        if len(names) > 1:
            db.add_error(None, "",
                         f"symbols all define {_quoted(text)}: {','.join(sorted(names))}")


def check_author_last(db: Database):
    """
    Report suspicious last names: empty, no lowercase ("J H", "JH"), or
    all lowercase. A no-op unless authors were normalized first.
    """
    for entry in db.live_pubs():
        if entry.author_list is None:
            continue
        for author in entry.author_list:
            if author.others:
                continue
            if not author.last.strip():
                db.add_error(entry, "author", f"name {author} has empty last name")
            elif _is_all_caps(author.last):
                db.add_error(entry, "author", f"name {author} has no lowercase in last name")
            elif _is_all_lower(author.last):
                db.add_error(entry, "author", f"last name in {author.last} is all lowercase")
