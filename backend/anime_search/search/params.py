"""Centralized search parameter management.

Tunables that depend on deployment (page sizes, highlight length, input
caps) come from :class:`~anime_search.config.Settings`; the fixed ranking
constants live here next to them so every search module reads one place.

Usage in search modules::

    from anime_search.search.params import get_search_params
    params = get_search_params()
    per_page = min(params["max_per_page"], requested)
"""

from __future__ import annotations

from typing import Any

from anime_search.config import get_settings

# Shortest token or variant that may be used as a match predicate
MIN_TERM_LENGTH = 2
# Shortest cleaned keyword that produces prefix/suffix variants
MIN_VARIANT_SOURCE_LENGTH = 3
# Rank given to rows whose title matched nothing in the query
FALLBACK_RANK = 10

HIGHLIGHT_OPEN = "<mark>"
HIGHLIGHT_CLOSE = "</mark>"
ELLIPSIS = "..."


def get_search_params() -> dict[str, Any]:
    """Return current search parameters derived from application settings."""
    settings = get_settings()
    return {
        "default_per_page": settings.SEARCH_DEFAULT_PER_PAGE,
        "max_per_page": settings.SEARCH_MAX_PER_PAGE,
        "highlight_description_length": settings.SEARCH_HIGHLIGHT_DESCRIPTION_LENGTH,
        "max_keyword_length": settings.SEARCH_MAX_KEYWORD_LENGTH,
        "max_candidates": settings.SEARCH_MAX_CANDIDATES,
    }
