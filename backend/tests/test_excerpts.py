from notesearch.services.excerpts import NO_CONTENT_EXCERPT, extract_excerpt

BODY = "First sentence. Second sentence with KEYWORD here. Third sentence."


def test_excerpt_returns_whole_short_body_without_ellipsis():
    excerpt = extract_excerpt(BODY, "KEYWORD")
    assert excerpt == BODY
    assert "KEYWORD" in excerpt
    assert not excerpt.startswith("...")
    assert not excerpt.endswith("...")


def test_excerpt_aligns_to_sentence_boundaries_with_small_window():
    excerpt = extract_excerpt(BODY, "KEYWORD", max_length=20)
    assert excerpt == "...Second sentence with KEYWORD here...."


def test_excerpt_prefers_window_with_most_distinct_tokens():
    body = (
        "Apples are red. " * 10
        + "Bananas and cherries share a bowl. "
        + "Cherries alone sit here. " * 10
    )
    excerpt = extract_excerpt(body, "bananas cherries", max_length=40)
    assert "Bananas and cherries" in excerpt
    assert excerpt.startswith("...")
    assert excerpt.endswith("...")


def test_excerpt_without_matching_tokens_starts_at_beginning():
    body = "Alpha line.\nBeta line.\nGamma line."
    excerpt = extract_excerpt(body, "zzz", max_length=5)
    assert excerpt == "Alpha line...."


def test_excerpt_ignores_short_query_tokens():
    excerpt = extract_excerpt(BODY, "is a", max_length=20)
    assert excerpt.startswith("First sentence.")


def test_excerpt_of_empty_body_is_sentinel():
    assert extract_excerpt("", "anything") == NO_CONTENT_EXCERPT
    assert extract_excerpt("   \n ", "anything") == NO_CONTENT_EXCERPT


def test_excerpt_is_never_empty_for_content():
    assert extract_excerpt("x", "query") == "x"


def test_excerpt_keeps_match_after_long_leading_sentence():
    excerpt = extract_excerpt("x" * 300 + ". keyword here.", "keyword")
    assert "keyword" in excerpt


def test_excerpt_window_starting_mid_sentence_keeps_match():
    body = "Intro sentence here. " + "a" * 50 + " needle tail words. Closing."
    excerpt = extract_excerpt(body, "needle", max_length=10)
    assert excerpt.startswith("...aaa")
    assert excerpt.endswith("needle tail words....")
    assert "Intro" not in excerpt
