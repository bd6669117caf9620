"""
Duplicate and contained-entry detection.

All of these compare entries pairwise inside a bucket, which is fine for
bibliography-sized files (thousands of entries). When one entry of a pair
has to go, the one that came first in the file survives.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from .braces import parse_brace_tree
from .database import Database
from .entry import Entry
from .transforms import TITLE_LOWER_WORDS

logger = logging.getLogger(__name__)


def _remove_subsets_pairwise(entries: List[Entry]) -> List[Tuple[Entry, Entry]]:
    """
    Mark as deleted every entry contained in another entry of the list.

    For two equal entries the later one is deleted.

    Returns:
        Pairs where neither entry contains the other
    """
    unresolved = []
    for i, a in enumerate(entries):
        if a.is_deleted:
            continue
        for b in entries[i + 1:]:
            if b.is_deleted:
                continue
            if b.is_subset(a):
                b.mark_deleted()
            elif a.is_subset(b):
                a.mark_deleted()
                break
            else:
                unresolved.append((a, b))
    return [(a, b) for a, b in unresolved if not a.is_deleted and not b.is_deleted]


def remove_exact_dups(db: Database) -> int:
    """
    Delete entries equal to an earlier entry with the same key (ignoring case).

    Returns:
        Number of entries removed
    """
    bins: Dict[str, List[Entry]] = defaultdict(list)
    for entry in db.live_pubs():
        bins[entry.key.lower()].append(entry)

    for entries in bins.values():
        for i, a in enumerate(entries):
            if a.is_deleted:
                continue
            for b in entries[i + 1:]:
                if not b.is_deleted and a.equals(b):
                    b.mark_deleted()

    removed = db.remove_deleted()
    if removed:
        logger.info("removed %d exact duplicate(s)", removed)
    return removed


def remove_contained_entries(db: Database) -> int:
    """
    Delete every entry whose fields are all matched by another entry.

    Only entries of the same kind can contain each other, so entries are
    bucketed by kind before the pairwise pass.

    Returns:
        Number of entries removed
    """
    bins: Dict[Tuple[str, str], List[Entry]] = defaultdict(list)
    for entry in db.live_pubs():
        bins[(entry.kind.value, entry.entry_string.lower())].append(entry)

    for entries in bins.values():
        _remove_subsets_pairwise(entries)

    removed = db.remove_deleted()
    if removed:
        logger.info("removed %d contained entr%s", removed, "y" if removed == 1 else "ies")
    return removed


def _remove_non_letters(s: str) -> str:
    return "".join(ch for ch in s if ch.isalpha() or ch.isspace())


def title_hash(entry: Entry) -> str:
    """
    Fingerprint of an entry's title for grouping likely duplicates.

    Braces, punctuation, case and small words are dropped, so
    "The Quick, Brown Fox!" and "Quick Brown fox" agree. Entries without a
    parseable string title get "".
    """
    title = entry.fields.get("title")
    if title is None or not title.is_string:
        return ""

    tree, size = parse_brace_tree(title.text)
    if size != len(title.text):
        return ""

    words = []
    for w in _remove_non_letters(tree.flatten_for_sorting()).split():
        w = w.lower()
        if w not in TITLE_LOWER_WORDS:
            words.append(w)
    return " ".join(words)


def find_dups_by_title(db: Database) -> Dict[str, List[Entry]]:
    """Group every entry by title fingerprint ("" collects the untitled)."""
    groups: Dict[str, List[Entry]] = defaultdict(list)
    for entry in db.live_pubs():
        groups[title_hash(entry)].append(entry)
    return dict(groups)


def duplicate_candidates(db: Database) -> Dict[str, List[Entry]]:
    """Fingerprint groups with more than one entry, for manual review."""
    return {
        fingerprint: entries
        for fingerprint, entries in find_dups_by_title(db).items()
        if fingerprint and len(entries) > 1
    }


def remove_dups_by_title(db: Database) -> Tuple[int, List[Tuple[Entry, Entry]]]:
    """
    Within each title group, delete entries contained in another.

    Returns:
        (number removed, pairs that share a title but differ)
    """
    unresolved = []
    for entries in duplicate_candidates(db).values():
        for a, b in _remove_subsets_pairwise(entries):
            logger.info("%s %s are different somehow", a.key, b.key)
            unresolved.append((a, b))

    return db.remove_deleted(), unresolved
