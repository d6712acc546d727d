# @TEST tests/test_api_search.py

"""Search API endpoints for the anime site.

Provides:
- ``GET /search/fuzzy`` -- Keyword search with synonym/variant expansion,
  relevance ranking, filters, pagination and highlighting.
- ``GET /search/suggestions`` -- Title suggestions (autocomplete).
- ``GET /search/hot-keywords`` -- Titles of the most-liked records.

Query parameters keep the camelCase names used by the frontend
(``minLikes``, ``maxLikes``, ``fuzzyLevel``). Numeric parameters are
parsed permissively: unparseable values fall back to their default or,
for filters, are ignored.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from anime_search.config import get_settings
from anime_search.database import async_session_factory, get_db
from anime_search.models import AnimeInfo
from anime_search.search.conditions import SearchFilters
from anime_search.search.engine import AnnotatedRecord, DataSourceError, FuzzySearchEngine
from anime_search.search.params import get_search_params
from anime_search.search.query_preprocessor import FuzzyLevel, InvalidQueryError, analyze_query
from anime_search.utils.i18n import get_language
from anime_search.utils.messages import msg

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])

DEFAULT_HOT_KEYWORDS: tuple[str, ...] = ("海贼王", "火影忍者", "鬼灭之刃", "进击的巨人", "咒术回战")

# PostgreSQL INTEGER bounds; values outside them cannot be bound as filters
_INT4_MIN = -(2**31)
_INT4_MAX = 2**31 - 1


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProcessedKeywords(BaseModel):
    """Echo of the keyword expansion used for the search."""

    original: str
    cleaned: str
    words: list[str]
    synonyms: list[str]
    variants: list[str]
    all: list[str]


class SearchInfo(BaseModel):
    original_keyword: str
    processed_keywords: ProcessedKeywords
    fuzzy_level: str
    total_found: int
    search_time: str


class PaginationInfo(BaseModel):
    current_page: int
    per_page: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None = None
    prev_page: int | None = None


class FilterEcho(BaseModel):
    """Filters exactly as received in the query string."""

    country: str | None = None
    status: str | None = None
    min_likes: str | None = None
    max_likes: str | None = None


class FuzzySearchResponse(BaseModel):
    success: bool = True
    data: list[AnnotatedRecord]
    search_info: SearchInfo
    pagination: PaginationInfo
    filters: FilterEcho
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str


class TitleListResponse(BaseModel):
    """Suggestion / hot keyword list response."""

    success: bool = True
    data: list[str]
    keyword: str | None = None
    message: str


# ---------------------------------------------------------------------------
# Helpers (engine factory extracted for easy mocking in tests)
# ---------------------------------------------------------------------------


def _build_fuzzy_engine() -> FuzzySearchEngine:
    """Create a FuzzySearchEngine bound to the application session factory."""
    return FuzzySearchEngine(session_factory=async_session_factory)


def _parse_int(value: str | None) -> int | None:
    """Parse an integer query value, or None if absent, malformed or out of int4 range."""
    if value is None or not value.strip():
        return None
    try:
        number = int(value.strip())
    except ValueError:
        return None
    if not _INT4_MIN <= number <= _INT4_MAX:
        return None
    return number


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


def _invalid_query_response(exc: InvalidQueryError, lang: str) -> JSONResponse:
    max_length = get_search_params()["max_keyword_length"]
    return _error_response(
        400,
        msg(f"search.keyword_{exc.reason}", lang),
        msg(f"search.keyword_{exc.reason}_hint", lang, max_length=max_length),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/fuzzy",
    response_model=FuzzySearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def fuzzy_search(
    request: Request,
    keyword: str | None = Query(None, description="Search keyword (required)"),  # noqa: B008
    country: str | None = Query(None, description="Exact country filter"),  # noqa: B008
    status: str | None = Query(None, description="Status filter (integer)"),  # noqa: B008
    min_likes: str | None = Query(None, alias="minLikes", description="Minimum like count"),  # noqa: B008
    max_likes: str | None = Query(None, alias="maxLikes", description="Maximum like count"),  # noqa: B008
    page: str | None = Query(None, description="Page number (default 1)"),  # noqa: B008
    limit: str | None = Query(None, description="Results per page (default 10, max 50)"),  # noqa: B008
    fuzzy_level: str | None = Query(None, alias="fuzzyLevel", description="low | medium | high"),  # noqa: B008
) -> FuzzySearchResponse | JSONResponse:
    """Fuzzy keyword search over anime titles, descriptions and tags.

    Returns:
        FuzzySearchResponse on success, a 400 ErrorResponse for a missing or
        unusable keyword, or a 500 ErrorResponse if the database read fails.
    """
    lang = get_language(request)
    level = FuzzyLevel.parse(fuzzy_level)

    try:
        query = analyze_query(keyword, level)
    except InvalidQueryError as exc:
        logger.info("Rejected fuzzy search keyword %r: %s", keyword, exc.reason)
        return _invalid_query_response(exc, lang)

    filters = SearchFilters(
        country=country or None,
        status=_parse_int(status),
        min_likes=_parse_int(min_likes),
        max_likes=_parse_int(max_likes),
    )
    logger.info(
        "Fuzzy search request: keyword=%r, fuzzy_level=%s, page=%s, limit=%s, filters=%s",
        query.original,
        level.value,
        page,
        limit,
        filters,
    )

    engine = _build_fuzzy_engine()
    try:
        result = await engine.search(query, filters, page=_parse_int(page), per_page=_parse_int(limit))
    except DataSourceError as exc:
        logger.exception("Fuzzy search failed for keyword %r", query.original)
        detail = str(exc) if get_settings().EXPOSE_ERROR_DETAILS else msg("search.internal_error", lang)
        return _error_response(500, msg("search.failed", lang), detail)

    return FuzzySearchResponse(
        data=result.items,
        search_info=SearchInfo(
            original_keyword=query.original,
            processed_keywords=ProcessedKeywords(**query.as_dict()),
            fuzzy_level=level.value,
            total_found=result.total_items,
            search_time=datetime.now(UTC).isoformat(),
        ),
        pagination=PaginationInfo(
            current_page=result.page,
            per_page=result.per_page,
            total_items=result.total_items,
            total_pages=result.total_pages,
            has_next_page=result.has_next,
            has_prev_page=result.has_prev,
            next_page=result.next_page,
            prev_page=result.prev_page,
        ),
        filters=FilterEcho(country=country, status=status, min_likes=min_likes, max_likes=max_likes),
        message=msg("search.found", lang, keyword=query.original, total=result.total_items),
    )


@router.get("/suggestions", response_model=TitleListResponse)
async def search_suggestions(
    request: Request,
    keyword: str = Query(..., min_length=1, max_length=100, description="Partial keyword"),  # noqa: B008
    limit: int = Query(8, ge=1, le=20, description="Maximum suggestions"),  # noqa: B008
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> TitleListResponse:
    """Suggest titles containing the keyword, most-liked first.

    Matching is case-insensitive; duplicate titles are collapsed.
    """
    stripped = keyword.strip()
    titles: list[str] = []
    if stripped:
        stmt = (
            select(AnimeInfo.title)
            .where(AnimeInfo.title.icontains(stripped, autoescape=True))
            .order_by(AnimeInfo.like_count.desc(), AnimeInfo.id.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        for row in result.fetchall():
            if row[0] and row[0] not in titles:
                titles.append(row[0])

    return TitleListResponse(data=titles, keyword=stripped, message=msg("search.suggestions", get_language(request)))


@router.get("/hot-keywords", response_model=TitleListResponse)
async def hot_keywords(
    request: Request,
    limit: int = Query(10, ge=1, le=20, description="Maximum keywords"),  # noqa: B008
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> TitleListResponse:
    """Titles of the most-liked records, or a built-in list when none exist."""
    stmt = select(AnimeInfo.title).order_by(AnimeInfo.like_count.desc(), AnimeInfo.id.desc()).limit(limit)
    result = await db.execute(stmt)
    titles = [row[0] for row in result.fetchall() if row[0]]
    if not titles:
        titles = list(DEFAULT_HOT_KEYWORDS[:limit])

    return TitleListResponse(data=titles, message=msg("search.hot_keywords", get_language(request)))
