"""
Bibliographic entries and the field taxonomy for each entry kind.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .authors import Author
from .values import Value


class EntryKind(str, Enum):
    """Known entry types, plus the OTHER and DELETED sentinels."""

    DELETED = "**DELETED**"
    OTHER = "other"
    STRING = "string"
    PREAMBLE = "preamble"
    ARTICLE = "article"
    BOOK = "book"
    BOOKLET = "booklet"
    INBOOK = "inbook"
    INCOLLECTION = "incollection"
    INPROCEEDINGS = "inproceedings"
    MANUAL = "manual"
    MASTERSTHESIS = "mastersthesis"
    MISC = "misc"
    PHDTHESIS = "phdthesis"
    PROCEEDINGS = "proceedings"
    TECHREPORT = "techreport"
    UNPUBLISHED = "unpublished"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_ident(cls, ident: str) -> "EntryKind":
        """Map an entry type token (any case) to a kind; unknown -> OTHER."""
        kind = _IDENT_TO_KIND.get(ident.lower())
        return kind if kind is not None else cls.OTHER


_IDENT_TO_KIND = {
    k.value: k for k in EntryKind if k is not EntryKind.DELETED
}


# Required fields per kind. "a/b" means at least one of a or b.
REQUIRED_FIELDS: Dict[EntryKind, List[str]] = {
    EntryKind.OTHER: [],
    EntryKind.STRING: [],
    EntryKind.PREAMBLE: [],
    EntryKind.ARTICLE: ["author", "title", "journal", "year", "volume"],
    EntryKind.BOOK: ["author/editor", "title", "publisher", "year"],
    EntryKind.BOOKLET: ["title"],
    EntryKind.INBOOK: ["author/editor", "title", "chapter/pages", "publisher", "year"],
    EntryKind.INCOLLECTION: ["author", "title", "booktitle", "publisher", "year"],
    EntryKind.INPROCEEDINGS: ["author", "title", "booktitle", "year"],
    EntryKind.MANUAL: ["title"],
    EntryKind.MASTERSTHESIS: ["author", "title", "school", "year"],
    EntryKind.MISC: [],
    EntryKind.PHDTHESIS: ["author", "title", "school", "year"],
    EntryKind.PROCEEDINGS: ["title", "year"],
    EntryKind.TECHREPORT: ["author", "title", "institution", "year"],
    EntryKind.UNPUBLISHED: ["author", "title", "note"],
}

# Fields commonly used with a kind but not required by it
OPTIONAL_FIELDS: Dict[EntryKind, List[str]] = {
    EntryKind.OTHER: [],
    EntryKind.STRING: [],
    EntryKind.PREAMBLE: [],
    EntryKind.ARTICLE: ["number", "pages", "month"],
    EntryKind.BOOK: ["volume", "number", "series", "address", "edition", "month"],
    EntryKind.BOOKLET: ["author", "howpublished", "address", "month", "year"],
    EntryKind.INBOOK: ["volume", "number", "series", "type", "address", "edition", "month"],
    EntryKind.INCOLLECTION: ["editor", "volume", "number", "series", "type", "chapter",
                             "pages", "address", "edition", "month"],
    EntryKind.INPROCEEDINGS: ["editor", "volume", "number", "series", "pages", "address",
                              "month", "organization", "publisher"],
    EntryKind.MANUAL: ["author", "organization", "address", "edition", "month", "year"],
    EntryKind.MASTERSTHESIS: ["type", "address", "month"],
    EntryKind.MISC: ["author", "title", "howpublished", "month", "year"],
    EntryKind.PHDTHESIS: ["type", "address", "month"],
    EntryKind.PROCEEDINGS: ["editor", "volume", "number", "series", "address", "month",
                            "publisher", "organization"],
    EntryKind.TECHREPORT: ["type", "number", "address", "month"],
    EntryKind.UNPUBLISHED: ["month", "year"],
}

# Allowed on any kind. "key" and "note" live here rather than in the
# optional lists since they are optional everywhere.
BLESSED_FIELDS = ("key", "note", "url", "doi", "pmc", "pmid", "keywords", "issn", "isbn")


def all_known_fields() -> set:
    """Every tag that is required, optional or blessed for some kind."""
    known = set(BLESSED_FIELDS)
    for reqs in REQUIRED_FIELDS.values():
        for req in reqs:
            known.update(req.split("/"))
    for opts in OPTIONAL_FIELDS.values():
        known.update(opts)
    return known


@dataclass
class Entry:
    """One publication in the database."""

    kind: EntryKind = EntryKind.OTHER
    entry_string: str = ""
    key: str = ""
    fields: Dict[str, Value] = field(default_factory=dict)
    author_list: Optional[List[Author]] = None
    line_no: int = 0

    @property
    def is_deleted(self) -> bool:
        return self.kind is EntryKind.DELETED

    def mark_deleted(self):
        self.kind = EntryKind.DELETED

    def tags(self) -> List[str]:
        """Field tags in alphabetical order."""
        return sorted(self.fields)

    def is_subset(self, other: "Entry") -> bool:
        """
        True if every field here appears in `other` with an equal value.

        Both entries must also be the same kind with the same type token
        (ignoring case).
        """
        if self.kind is not other.kind:
            return False
        if self.entry_string.lower() != other.entry_string.lower():
            return False

        for tag, value in self.fields.items():
            other_value = other.fields.get(tag)
            if other_value is None or not value.equals(other_value):
                return False
        return True

    def equals(self, other: "Entry") -> bool:
        """
        Same kind, same tags, same values.

        The key and the parsed author list play no part, so the same
        authors encoded differently make two entries unequal.
        """
        return self.is_subset(other) and other.is_subset(self)
