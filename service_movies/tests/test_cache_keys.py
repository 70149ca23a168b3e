"""
Tests for cache key derivation.
"""

from service_movies.app.cache.keys import NO_SEARCH_SENTINEL, movie_key, movie_list_key


def test_list_key_is_deterministic():
    assert movie_list_key(3, 25, "dune") == movie_list_key(3, 25, "dune")


def test_list_key_format():
    assert movie_list_key(1, 10, "dune") == "movie:list:page=1:size=10:search=dune"
    assert movie_list_key(1, 10, "") == "movie:list:page=1:size=10:search=*"


def test_list_key_differs_per_component():
    base = movie_list_key(1, 10, "dune")

    assert movie_list_key(2, 10, "dune") != base
    assert movie_list_key(1, 20, "dune") != base
    assert movie_list_key(1, 10, "heat") != base


def test_list_key_search_is_case_sensitive():
    assert movie_list_key(1, 10, "Dune") != movie_list_key(1, 10, "dune")


def test_no_search_term_collides_with_sentinel():
    """Neither the sentinel itself nor LIKE wildcards share the no-filter key."""
    no_filter = movie_list_key(1, 10, "")

    for term in (NO_SEARCH_SENTINEL, "_", "%", " "):
        assert movie_list_key(1, 10, term) != no_filter


def test_search_cannot_inject_key_segments():
    forged = movie_list_key(1, 10, "x:page=2")

    assert forged.count(":") == movie_list_key(1, 10, "x").count(":")


def test_movie_key():
    assert movie_key("abc-123") == "movie:abc-123"
