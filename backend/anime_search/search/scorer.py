"""In-process relevance ranking for fuzzy search candidates.

Ranks are coarse integer buckets, lower is better:

| Rank      | Condition                                  |
|-----------|--------------------------------------------|
| 1         | title equals the cleaned keyword           |
| 2         | title contains the cleaned keyword         |
| 3 + i     | title contains ``words[i]`` (first wins)   |
| 10        | fallback, matched outside the title        |
"""

from __future__ import annotations

from collections.abc import Iterable

from anime_search.models import AnimeInfo
from anime_search.search.params import FALLBACK_RANK
from anime_search.search.query_preprocessor import SearchQuery


def relevance_rank(title: str | None, query: SearchQuery) -> int:
    """Return the relevance bucket of a title for the given query."""
    if not title:
        return FALLBACK_RANK
    if title == query.cleaned:
        return 1
    if query.cleaned in title:
        return 2
    for index, word in enumerate(query.words):
        if word in title:
            return 3 + index
    return FALLBACK_RANK


def _sort_key(item: tuple[int, AnimeInfo]) -> tuple[int, int, int]:
    rank, record = item
    return rank, -(record.like_count or 0), -(record.id or 0)


def rank_records(records: Iterable[AnimeInfo], query: SearchQuery) -> list[tuple[int, AnimeInfo]]:
    """Score and order candidate records.

    Sorted by rank ascending, then like count descending, then id
    descending as the final tie-break.

    Returns:
        ``(rank, record)`` pairs in display order.
    """
    scored = [(relevance_rank(record.title, query), record) for record in records]
    return sorted(scored, key=_sort_key)
