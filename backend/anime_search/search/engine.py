# @TEST tests/test_engine.py

"""Fuzzy keyword search engine over the anime_info table.

The store decides *what* matches (tiered LIKE predicates plus filters);
ranking, pagination and highlighting happen in-process on the candidate
set. The candidate read and the total count run concurrently, each on its
own session.
"""

from __future__ import annotations

import asyncio
import logging
import math

from pydantic import BaseModel
from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from anime_search.models import AnimeInfo
from anime_search.search.conditions import SearchFilters, build_where_clauses
from anime_search.search.highlighter import MatchInfo, analyze_match, highlight_matches
from anime_search.search.params import get_search_params
from anime_search.search.query_preprocessor import SearchQuery
from anime_search.search.scorer import rank_records

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """Raised when a backing-store read fails during search."""


class AnnotatedRecord(BaseModel):
    """An anime_info row enriched with match metadata and highlighted text."""

    id: int
    title: str
    description: str | None = None
    tag: str | None = None
    country: str | None = None
    status: int | None = None
    like_count: int = 0
    relevance_score: int
    match_info: MatchInfo
    highlighted_title: str
    highlighted_description: str


class SearchResultPage(BaseModel):
    """One page of ranked, annotated search results."""

    items: list[AnnotatedRecord]
    page: int
    per_page: int
    total_items: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next else None

    @property
    def prev_page(self) -> int | None:
        return self.page - 1 if self.has_prev else None


def clamp_pagination(page: int | None, per_page: int | None) -> tuple[int, int]:
    """Clamp page to >= 1 and per_page to [1, max_per_page], applying defaults."""
    params = get_search_params()
    page = max(1, page or 1)
    per_page = min(params["max_per_page"], max(1, per_page or params["default_per_page"]))
    return page, per_page


class FuzzySearchEngine:
    """Tiered substring search with in-process relevance ranking.

    Args:
        session_factory: Factory producing independent async sessions, so
            the candidate and count reads can run at the same time.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def search(
        self,
        query: SearchQuery,
        filters: SearchFilters | None = None,
        page: int | None = 1,
        per_page: int | None = None,
    ) -> SearchResultPage:
        """Execute a fuzzy search and return the requested page.

        Raises:
            DataSourceError: If either the candidate or the count read fails.
        """
        page, per_page = clamp_pagination(page, per_page)
        where = build_where_clauses(query, filters)

        candidates, total = await asyncio.gather(
            self._fetch_candidates(where),
            self._count(where),
            return_exceptions=True,
        )
        for outcome in (candidates, total):
            if isinstance(outcome, BaseException):
                raise outcome
        logger.debug(
            "Fuzzy search %r (%s): %d candidates, %d total",
            query.cleaned,
            query.fuzzy_level,
            len(candidates),
            total,
        )

        ranked = rank_records(candidates, query)
        offset = (page - 1) * per_page
        items = [self._annotate(record, rank, query) for rank, record in ranked[offset : offset + per_page]]

        total_pages = math.ceil(total / per_page)
        return SearchResultPage(
            items=items,
            page=page,
            per_page=per_page,
            total_items=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    async def _fetch_candidates(self, where: list[ColumnElement[bool]]) -> list[AnimeInfo]:
        """Read every matching row, most-liked first."""
        stmt = select(AnimeInfo).where(*where).order_by(AnimeInfo.like_count.desc(), AnimeInfo.id.desc())
        max_candidates = get_search_params()["max_candidates"]
        if max_candidates:
            stmt = stmt.limit(max_candidates)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Fuzzy search candidate query failed: %s", exc)
            raise DataSourceError(str(exc)) from exc

    async def _count(self, where: list[ColumnElement[bool]]) -> int:
        """Count matching rows under the same predicate, unpaginated."""
        stmt = select(func.count()).select_from(AnimeInfo).where(*where)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Fuzzy search count query failed: %s", exc)
            raise DataSourceError(str(exc)) from exc

    @staticmethod
    def _annotate(record: AnimeInfo, rank: int, query: SearchQuery) -> AnnotatedRecord:
        terms = query.all_terms
        columns = record.to_dict()
        columns["title"] = columns["title"] or ""
        columns["like_count"] = columns["like_count"] or 0
        return AnnotatedRecord(
            **columns,
            relevance_score=rank,
            match_info=analyze_match(record.title, record.description, terms),
            highlighted_title=highlight_matches(record.title, terms),
            highlighted_description=highlight_matches(
                record.description,
                terms,
                max_length=get_search_params()["highlight_description_length"],
            ),
        )
