"""
Brace-structured text.

A field value such as ``{RNA} folding in {\\em vivo}`` is parsed into a tree
of `BraceNode` objects:

- only leaf nodes hold text
- internal nodes stand for a {}-delimited group
- the root stands for the whole string and is NOT itself a group

So "{foo moo man}" is a root with a single internal child, which holds a
single leaf.
"""

import re
import unicodedata
from typing import List, Optional, Tuple


class BraceNode:
    """One node of a brace tree. A node is a leaf iff it has no children."""

    def __init__(self, children: Optional[List["BraceNode"]] = None, leaf: str = ""):
        self.children = children if children is not None else []
        self.leaf = leaf

    def is_leaf(self) -> bool:
        return len(self.children) == 0

    def is_entire_string_braced(self) -> bool:
        """
        True iff the whole string is exactly one {} group.

        "{Moo Bar}" is; "{Moo}{Bar}" and "Moo {Bar}" are not.
        """
        return len(self.children) == 1 and not self.children[0].is_leaf()

    def contains_no_braces(self) -> bool:
        """True iff there is no {} group anywhere in the string."""
        return len(self.children) == 1 and self.children[0].is_leaf()

    def flatten(self) -> str:
        """Rebuild the string, treating this node as the root."""
        return self._flatten(True, True).strip()

    def flatten_for_sorting(self) -> str:
        """Like flatten(), but without any {}."""
        return self._flatten(True, False)

    def _flatten(self, is_root: bool, include_braces: bool) -> str:
        if self.is_leaf():
            return self.leaf
        text = "".join(c._flatten(False, include_braces) for c in self.children)
        if is_root or not include_braces:
            return text
        return "{" + text + "}"

    def flatten_to_min_braces(self) -> str:
        """
        Brace-protect only the words that need it.

        Strange-case words (mRNA) and words holding a double quote get
        their own {}. The string is only rewritten when it is wholly
        braced or has no braces at all; anything else looks intentional
        and is returned as is. Groups the user wrote are kept verbatim.
        """
        if not (self.is_entire_string_braced() or self.contains_no_braces()):
            return self.flatten()

        words = []
        for child in self.children:
            if child.is_leaf():
                for w in split_words(child.leaf):
                    if is_strange_case(w) or has_quote(w):
                        words.append("{" + w + "}")
                    else:
                        words.append(w)
            else:
                words.append(child._flatten(False, True))
        return "".join(words)

    def pretty(self, indent: int = 0) -> str:
        """Indented dump of the tree, for debugging."""
        pad = " " * indent
        if self.is_leaf():
            return f'{pad}LEAF "{self.leaf}"\n'
        return pad + "NODE\n" + "".join(c.pretty(indent + 2) for c in self.children)

    def __repr__(self):
        if self.is_leaf():
            return f"BraceNode(leaf={self.leaf!r})"
        return f"BraceNode(children={self.children!r})"


def parse_brace_tree(s: str) -> Tuple[BraceNode, int]:
    """
    Parse a string into a brace tree.

    An unmatched `{` is closed implicitly at the end of the string. A stray
    `}` ends parsing early, so callers compare the consumed count against
    len(s) before trusting the tree.

    Args:
        s: Text to parse

    Returns:
        (root node, number of characters consumed)
    """
    node, end = _parse_group(s, 0)
    return node, end


def _parse_group(s: str, start: int) -> Tuple[BraceNode, int]:
    """Parse from `start` until the matching `}` (consumed) or end of string."""
    me = BraceNode()
    accum = []

    def save_accum():
        if accum:
            me.children.append(BraceNode(leaf="".join(accum)))
            accum.clear()

    i = start
    while i < len(s):
        ch = s[i]
        if ch == "{":
            save_accum()
            child, i = _parse_group(s, i + 1)
            if child.is_leaf():
                # {} is still a group, not a leaf
                child.children.append(BraceNode(leaf=""))
            me.children.append(child)
            continue
        if ch == "}":
            save_accum()
            return me, i + 1
        accum.append(ch)
        i += 1

    save_accum()
    return me, i


def _is_punct(ch: str) -> bool:
    return unicodedata.category(ch).startswith("P")


def is_strange_case(word: str) -> bool:
    """
    True iff the word has an uppercase letter past its first position.

    An uppercase letter right after a hyphen does not count (Whole-Genome),
    and leading punctuation is skipped when deciding what the first
    position is, so "(Whole-Genome" is fine too. "mRNA" is strange.
    """
    seen = 0
    prev = " "
    for ch in word:
        if seen > 0 and prev != "-" and ch.isupper():
            return True
        prev = ch
        if not _is_punct(ch):
            seen += 1
    return False


def has_quote(word: str) -> bool:
    return '"' in word


_WORDS_RE = re.compile(r"\s+|\S+")


def split_words(s: str) -> List[str]:
    """
    Split into alternating runs of whitespace and non-whitespace.

    "".join(split_words(s)) == s
    """
    return _WORDS_RE.findall(s)


def needs_brace(word: str) -> bool:
    """
    True if a word needs an enclosing {}.

    That is when it holds a " outside any group, or a `{` opens at the top
    level after some other text ("foo{moo bar}buz", "{moo}{fuz}").
    "{{hi there}}" does not.
    """
    past = False
    depth = 0
    for ch in word:
        if ch == "{":
            depth += 1
            if past and depth <= 1:
                return True
        elif ch == "}":
            depth -= 1
        elif ch == '"':
            if depth <= 0:
                return True
        else:
            past = True
    return False


def canonical_brace(s: str) -> str:
    """
    Put braces into canonical form.

    "a gather{moo bar}fuz b" -> "a {gather{moo bar}fuz} b"

    Whitespace inside a group belongs to the word; whitespace between words
    is copied through unchanged.
    """
    parts = []
    word = []
    depth = 0

    def append_word():
        if word:
            w = "".join(word)
            parts.append("{" + w + "}" if needs_brace(w) else w)
            word.clear()

    for ch in s:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1

        if not ch.isspace() or depth > 0:
            word.append(ch)
        else:
            append_word()
            parts.append(ch)
    append_word()

    return "".join(parts)


def split_on_top_level_string(s: str, sep: str, whitespace: bool) -> List[str]:
    """
    Split `s` on case-insensitive occurrences of `sep` outside any {} group.

    Args:
        s: String to split
        sep: Lowercase separator
        whitespace: If True, a match only counts when whitespace (or the
            string boundary) surrounds it, e.g. " and " in author lists

    Returns:
        List of pieces; always at least one
    """
    depth = 0
    last_end = 0
    pieces = []
    prev = " "
    n = len(sep)

    for i, ch in enumerate(s):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1

        if depth == 0 and i >= last_end and s[i:i + n].lower() == sep:
            following = s[i + n] if i + n < len(s) else " "
            if not whitespace or (prev.isspace() and following.isspace()):
                pieces.append(s[last_end:i])
                last_end = i + n
        prev = ch

    pieces.append(s[last_end:])
    return pieces


def split_on_top_level(s: str) -> List[str]:
    """Split on whitespace, keeping {}-groups together as part of one word."""
    depth = 0
    words = []
    word = []
    for ch in s.strip():
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1

        if depth == 0 and ch.isspace():
            if word:
                words.append("".join(word))
                word = []
        else:
            word.append(ch)
    if word:
        words.append("".join(word))
    return words
