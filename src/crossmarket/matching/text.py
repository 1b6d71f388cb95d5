"""
Question text preprocessing.

Questions are reduced to keyword sets: lowercased, punctuation replaced by
spaces, short tokens and stop words removed.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Set

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

# Tokens of this length or shorter are never keywords
MIN_KEYWORD_LENGTH = 3

STOP_WORDS: FrozenSet[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "dare", "ought",
    "used", "that", "this", "these", "those", "what", "which", "who", "whom",
    "whose", "when", "where", "why", "how", "all", "each", "every", "both",
    "few", "more", "most", "other", "some", "such", "any", "only", "own",
    "same", "than", "too", "very", "just", "also", "now", "here", "there",
})


def normalize_text(text: str) -> str:
    """Lowercase, turn punctuation into spaces and collapse whitespace."""
    text = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def extract_keywords(text: str) -> Set[str]:
    """Keyword set of a question, used for Jaccard similarity."""
    return {
        token
        for token in normalize_text(text).split()
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    }


def jaccard(a: Set[str], b: Set[str]) -> float:
    """|a & b| / |a | b|; two empty sets are identical, one empty set matches nothing."""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)
