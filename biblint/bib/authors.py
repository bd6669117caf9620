"""
Author name parsing.

Follows BibTeX's name rules: "First von Last", "von Last, First" and
"von Last, Jr, First".
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .braces import split_on_top_level, split_on_top_level_string


@dataclass
class Author:
    """One parsed name. `others` marks the literal "et al." placeholder."""

    others: bool = False
    first: str = ""
    von: str = ""
    last: str = ""
    jr: str = ""

    def __str__(self) -> str:
        """
        Render as "von Last, First" or "von Last, Jr, First".

        Parts holding a top-level double quote are wrapped in {} so the
        string parses back to the same name.
        """
        if self.others:
            return "others"

        last = self.last
        if self.von:
            last = self.von + " " + self.last

        last = _quote_name(last)
        first = _quote_name(self.first)
        jr = _quote_name(self.jr)

        if not last:
            return self.first
        if not self.first:
            return last
        if not self.jr:
            return f"{last}, {first}"
        return f"{last}, {jr}, {first}"


def _quote_name(s: str) -> str:
    depth = 0
    for ch in s:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == '"' and depth == 0:
            return "{" + s + "}"
    return s


def _starts_lower(word: str) -> bool:
    return word[:1].islower()


def _starts_upper(word: str) -> bool:
    return word[:1].isupper()


def parse_von(words: List[str]) -> Tuple[str, str]:
    """
    Split "von Last" words into (von, last).

    The final word always belongs to last. von runs up to the last
    lowercase-initial word before it.
    """
    if not words:
        return "", ""
    if len(words) == 1:
        return "", words[0]

    j = len(words) - 2
    while j >= 0 and not _starts_lower(words[j]):
        j -= 1

    von = " ".join(words[:j + 1])
    return von, " ".join(words[j + 1:])


def parse_name_parts(name: str) -> Tuple[str, str, str]:
    """Find (first, von, last) in a name that has no commas."""
    words = split_on_top_level(name)

    # first is the longest run of capitalised words that is not the whole name
    i = 0
    while i < len(words) - 1 and _starts_upper(words[i]):
        i += 1

    first = " ".join(words[:i])
    von, last = parse_von(words[i:])
    return first, von, last


def normalize_name(name: str) -> Optional[Author]:
    """
    Parse one name string.

    Args:
        name: A single name, e.g. "van der Berg, Jr., Anna"

    Returns:
        Author, or None when the name is empty or has more than three
        comma-separated parts
    """
    name = name.strip()
    if not name:
        return None
    if name.lower() == "others":
        return Author(others=True)

    parts = [p.strip() for p in split_on_top_level_string(name, ",", False)]

    if len(parts) == 1:
        first, von, last = parse_name_parts(parts[0])
        return Author(first=first, von=von, last=last)

    if len(parts) == 2:
        von, last = parse_von(split_on_top_level(parts[0]))
        return Author(first=parts[1], von=von, last=last)

    if len(parts) == 3:
        von, last = parse_von(split_on_top_level(parts[0]))
        return Author(first=parts[2], von=von, last=last, jr=parts[1])

    return None


def split_author_list(authors: str) -> List[str]:
    """Split an author field on top-level, whitespace-delimited "and"."""
    return split_on_top_level_string(authors, "and", True)
