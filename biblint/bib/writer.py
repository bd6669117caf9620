"""
Output: the cleaned .bib text and the grouped diagnostic report.
"""

from collections import OrderedDict
from typing import List, TextIO

from .database import BibTeXError, Database
from .entry import BLESSED_FIELDS, OPTIONAL_FIELDS, REQUIRED_FIELDS, Entry
from .values import Value


def format_tag_value(tag: str, value: Value) -> str:
    return f"  {tag.lower():<10s} = {value.to_bibtex()},\n"


def ordered_tags(entry: Entry) -> List[str]:
    """
    Field order for output.

    Required fields first (for an "a/b" requirement, the first
    alternative present), then the kind's optional fields, then the
    blessed fields, then everything else alphabetically.
    """
    order = []
    printed = set()

    def take(tag: str):
        if tag in entry.fields and tag not in printed:
            order.append(tag)
            printed.add(tag)

    for req in REQUIRED_FIELDS.get(entry.kind, []):
        for tag in req.split("/"):
            if tag in entry.fields:
                take(tag)
                break
    for tag in OPTIONAL_FIELDS.get(entry.kind, []):
        take(tag)
    for tag in BLESSED_FIELDS:
        take(tag)
    for tag in entry.tags():
        take(tag)
    return order


def format_entry(entry: Entry) -> str:
    """Render one entry, e.g. "@article{key,\\n  title = {...},\\n}"."""
    lines = [f"\n@{entry.entry_string.lower()}{{{entry.key},\n"]
    for tag in ordered_tags(entry):
        lines.append(format_tag_value(tag, entry.fields[tag]))
    lines.append("}\n")
    return "".join(lines)


def format_symbol(name: str, value: Value) -> str:
    return f"@string{{ {name:<10s} = {value.to_bibtex()} }}\n"


def format_preamble(text: str) -> str:
    return f"@preamble{{{text}}}\n"


def format_database(db: Database) -> str:
    """
    Render the whole database.

    Preambles come first, then symbols in name order, then the entries in
    their current order. Deleted entries are skipped.
    """
    parts = [format_preamble(p) for p in db.preamble]
    parts.append("\n")
    parts.extend(format_symbol(name, db.symbols[name]) for name in sorted(db.symbols))
    parts.extend(format_entry(e) for e in db.live_pubs())
    return "".join(parts)


def write_database(db: Database, out: TextIO):
    out.write(format_database(db))


def format_error(error: BibTeXError) -> str:
    if error.tag:
        return f"{error.line_no}:{error.tag}: {error.msg}"
    return f"{error.line_no}: {error.msg}"


def format_errors(db: Database) -> str:
    """
    Render the diagnostics grouped by entry key (keys sorted).

    Key "moo":
      12:year: year is not an integer "MMXX"
    """
    by_key = OrderedDict()
    for error in db.errors:
        by_key.setdefault(error.key, []).append(format_error(error))

    lines = []
    for key in sorted(by_key):
        lines.append(f'Key "{key}":\n')
        lines.extend(f"  {msg}\n" for msg in by_key[key])
        lines.append("\n")
    return "".join(lines)
