"""Query tokenisation and content fingerprint helpers."""

from __future__ import annotations

_HASH_MASK = 0xFFFFFFFF


def note_text(title: str, body: str) -> str:
    """Return the text a note is embedded and fingerprinted from."""

    return f"{title}\n\n{body}"


def tokenize_query(query: str, min_length: int = 3) -> list[str]:
    """Lower-case and split *query* on whitespace, keeping tokens of at least *min_length* chars."""

    if not query:
        return []
    return [token for token in query.lower().split() if len(token) >= min_length]


def content_fingerprint(text: str) -> str:
    """Compute a cheap 32-bit rolling hash of *text* as 8 hex digits.

    Used only to detect content changes; collisions are tolerated.
    """

    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & _HASH_MASK
    return f"{value:08x}"
