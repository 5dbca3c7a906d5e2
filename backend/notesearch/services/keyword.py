"""Lexical keyword scoring over a note corpus."""

from __future__ import annotations

from typing import Sequence

from notesearch.models import Note
from notesearch.utils.text import tokenize_query


def keyword_score(
    note: Note,
    tokens: Sequence[str],
    *,
    title_weight: int = 2,
    body_match_cap: int = 5,
) -> int:
    """Raw keyword score of *note* for already-tokenised query *tokens*.

    Each token adds ``title_weight`` when present in the title and its body occurrence
    count capped at ``body_match_cap``.
    """

    title = note.title.lower()
    body = note.body.lower()
    score = 0
    for token in tokens:
        if token in title:
            score += title_weight
        score += min(body.count(token), body_match_cap)
    return score


def rank_by_keyword(
    query: str,
    notes: Sequence[Note],
    *,
    min_token_length: int = 3,
    title_weight: int = 2,
    body_match_cap: int = 5,
    score_scale: float = 10.0,
) -> list[tuple[Note, float]]:
    """Return ``(note, normalised_score)`` pairs with a non-zero score, best first.

    Equal scores keep corpus order.
    """

    tokens = tokenize_query(query, min_token_length)
    if not tokens:
        return []

    scored: list[tuple[Note, float]] = []
    for note in notes:
        raw = keyword_score(note, tokens, title_weight=title_weight, body_match_cap=body_match_cap)
        if raw > 0:
            scored.append((note, raw / score_scale))

    scored.sort(key=lambda item: item[1], reverse=True)
    return scored
