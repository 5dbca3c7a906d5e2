"""Excerpt extraction for search results."""

from __future__ import annotations

from notesearch.utils.text import tokenize_query

NO_CONTENT_EXCERPT = "(no content)"
ELLIPSIS = "..."
_SENTENCE_BOUNDARIES = frozenset(".!?\n")


def extract_excerpt(body: str, query: str, max_length: int = 200, *, min_token_length: int = 3) -> str:
    """Return the sentence-aligned slice of *body* that best evidences *query*.

    A ``max_length`` window slides over the body; the offset whose window holds the most
    distinct query tokens wins, earliest offset first on ties. The window is then widened
    to the surrounding sentence boundaries and ellipsis markers are added at truncated ends.
    """

    if not body or not body.strip():
        return NO_CONTENT_EXCERPT

    tokens = list(dict.fromkeys(tokenize_query(query, min_token_length)))
    lowered = body.lower()
    length = len(body)
    window = max(1, max_length)

    best_start = 0
    best_score = 0
    if tokens:
        # Windows past the last full-width offset are subsets of it.
        for offset in range(max(1, length - window + 1)):
            segment = lowered[offset : offset + window]
            score = sum(1 for token in tokens if token in segment)
            if score > best_score:
                best_score = score
                best_start = offset
                if score == len(tokens):
                    break

    start = best_start
    while start > 0 and body[start - 1] not in _SENTENCE_BOUNDARIES:
        start -= 1

    end = min(best_start + window, length)
    while end < length and body[end] not in _SENTENCE_BOUNDARIES:
        end += 1

    excerpt = body[start : end + 1].strip()
    if start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < length - 1:
        excerpt = excerpt + ELLIPSIS
    return excerpt or NO_CONTENT_EXCERPT
