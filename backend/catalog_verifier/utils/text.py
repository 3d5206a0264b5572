"""Small text helpers shared by the pattern engines."""

import re
from typing import Iterable, Optional

_TOKEN = re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset({"with", "from", "this", "that", "and", "for", "the"})


def normalize(*parts: Optional[str]) -> str:
    """Lower-case and join the non-empty parts with single spaces."""
    return " ".join(p.strip().lower() for p in parts if p and p.strip())


def tokenize(text: Optional[str]) -> list[str]:
    """Split lower-cased text into alphanumeric tokens."""
    if not text:
        return []
    return _TOKEN.findall(text.lower())


def contains_term(text: str, term: str, whole_word: bool = False) -> bool:
    """True when ``term`` starts a word in ``text``.

    "shirt" matches "t-shirts" but "tea" does not match "steam". Words of a
    multi-word term may be separated by spaces, hyphens or underscores.
    With ``whole_word`` the term must end the word too, plural "s" allowed:
    "table" then matches "tables" but not "tablet".

    Examples:
        >>> contains_term("engine oils 5w30", "oil")
        True
        >>> contains_term("heat resistant", "eat")
        False
        >>> contains_term("cotton t-shirt", "t shirt")
        True
    """
    body = r"[\s\-_]+".join(re.escape(w) for w in term.split())
    tail = r"s?\b" if whole_word else ""
    return re.search(rf"\b{body}{tail}", text) is not None


def matched_terms(text: str, terms: Iterable[str]) -> list[str]:
    return [t for t in terms if contains_term(text, t)]


def string_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1] between two short concept strings.

    Containment scores 0.9; otherwise 70% word overlap (words of ``a`` found
    in ``b``) plus 30% character overlap.

    Examples:
        >>> string_similarity("oil", "motor oil")
        0.9
    """
    if a in b or b in a:
        return 0.9

    words_a, words_b = a.split(), b.split()
    matching = sum(
        1 for w in words_a if any(w == o or w in o or o in w for o in words_b)
    )
    word_sim = matching / len(words_a) if words_a else 0.0

    common_chars = sum(1 for ch in a if ch in b)
    char_sim = common_chars / len(a) if a else 0.0

    return word_sim * 0.7 + char_sim * 0.3
