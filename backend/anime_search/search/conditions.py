"""Match-predicate construction for fuzzy search.

Predicates are grouped into tiers by confidence and emitted in tier order;
the store ORs them together and ANDs the result with the caller's filters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy import ColumnElement, false, or_

from anime_search.models import AnimeInfo
from anime_search.search.params import MIN_TERM_LENGTH
from anime_search.search.query_preprocessor import FuzzyLevel, SearchQuery

_ALL_FIELDS = ("title", "description", "tag")
_TEXT_FIELDS = ("title", "description")
_TITLE_ONLY = ("title",)


@dataclass(frozen=True)
class SearchFilters:
    """Optional exact/range filters applied on top of the keyword match."""

    country: str | None = None
    status: int | None = None
    min_likes: int | None = None
    max_likes: int | None = None


class MatchTier(StrEnum):
    """Predicate tiers, in emission order."""

    KEYWORD = "keyword"
    WORD = "word"
    SYNONYM = "synonym"
    VARIANT = "variant"


@dataclass(frozen=True)
class MatchPredicate:
    """A substring test of one term against one or more fields.

    Rendered as ``LIKE '%value%'`` with ``%``, ``_`` and the escape
    character escaped, so the store matches the literal term only.
    """

    tier: MatchTier
    value: str
    fields: tuple[str, ...]

    def to_clause(self) -> ColumnElement[bool]:
        return or_(*(getattr(AnimeInfo, field).contains(self.value, autoescape=True) for field in self.fields))


def build_match_predicates(query: SearchQuery) -> list[MatchPredicate]:
    """Emit match predicates in tier order for the query's fuzziness.

    1. The whole cleaned keyword against title, description and tag.
    2. Every word of at least two characters against the same fields.
    3. Synonyms against title and description (medium and high).
    4. Variants against title only (high).
    """
    predicates: list[MatchPredicate] = []

    if query.cleaned:
        predicates.append(MatchPredicate(MatchTier.KEYWORD, query.cleaned, _ALL_FIELDS))

    predicates.extend(
        MatchPredicate(MatchTier.WORD, word, _ALL_FIELDS) for word in query.words if len(word) >= MIN_TERM_LENGTH
    )

    if query.fuzzy_level in (FuzzyLevel.MEDIUM, FuzzyLevel.HIGH):
        predicates.extend(MatchPredicate(MatchTier.SYNONYM, synonym, _TEXT_FIELDS) for synonym in query.synonyms)

    if query.fuzzy_level == FuzzyLevel.HIGH:
        predicates.extend(MatchPredicate(MatchTier.VARIANT, variant, _TITLE_ONLY) for variant in query.variants)

    return predicates


def match_clause(predicates: list[MatchPredicate]) -> ColumnElement[bool]:
    """OR all predicates together; an empty list matches nothing."""
    if not predicates:
        return false()
    return or_(*(predicate.to_clause() for predicate in predicates))


def filter_clauses(filters: SearchFilters | None) -> list[ColumnElement[bool]]:
    """Build the AND-ed filter predicates for the fields that are set."""
    if filters is None:
        return []

    clauses: list[ColumnElement[bool]] = []
    if filters.country:
        clauses.append(AnimeInfo.country == filters.country)
    if filters.status is not None:
        clauses.append(AnimeInfo.status == filters.status)
    if filters.min_likes is not None:
        clauses.append(AnimeInfo.like_count >= filters.min_likes)
    if filters.max_likes is not None:
        clauses.append(AnimeInfo.like_count <= filters.max_likes)
    return clauses


def build_where_clauses(query: SearchQuery, filters: SearchFilters | None = None) -> list[ColumnElement[bool]]:
    """Keyword OR-group followed by each active filter, to be AND-ed."""
    return [match_clause(build_match_predicates(query)), *filter_clauses(filters)]
