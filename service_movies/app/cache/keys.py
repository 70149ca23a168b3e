"""
Cache key derivation for movie entries and listings.
"""

from urllib.parse import quote

MOVIE_PREFIX = "movie:"
MOVIE_LIST_PREFIX = "movie:list:"

# Percent-encoding never emits "*", so no search term can map onto the sentinel.
NO_SEARCH_SENTINEL = "*"


def movie_key(movie_id: str) -> str:
    """Key of a single-movie snapshot."""
    return f"{MOVIE_PREFIX}{movie_id}"


def movie_list_key(page: int, page_size: int, search: str = "") -> str:
    """Key of a listing snapshot for (page, page size, search).

    The search term is kept case-sensitive as given and percent-encoded, so
    it can neither collide with the no-filter sentinel nor inject separators.
    """
    normalized = quote(search, safe="") if search else NO_SEARCH_SENTINEL
    return f"{MOVIE_LIST_PREFIX}page={page}:size={page_size}:search={normalized}"
