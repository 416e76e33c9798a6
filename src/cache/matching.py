# src/cache/matching.py — v1
"""Exact-match test between the primary key and the key a restore hit."""

from __future__ import annotations

import unicodedata


def _base_letters(text: str) -> str:
    """Strip accents and case: NFKD, drop combining marks, casefold."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def is_exact_match(key: str, candidate_hit_key: str | None) -> bool:
    """True when ``candidate_hit_key`` equals ``key`` ignoring case and accents.

    A restore may hit a fallback restore key; only a hit on the primary key
    itself counts as exact.
    """
    if not candidate_hit_key:
        return False
    return _base_letters(candidate_hit_key) == _base_letters(key)
