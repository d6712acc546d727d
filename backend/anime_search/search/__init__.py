"""Fuzzy keyword search over anime records."""

from anime_search.search.conditions import MatchPredicate, MatchTier, SearchFilters, build_match_predicates
from anime_search.search.engine import (
    AnnotatedRecord,
    DataSourceError,
    FuzzySearchEngine,
    SearchResultPage,
)
from anime_search.search.highlighter import MatchInfo, analyze_match, highlight_matches
from anime_search.search.query_preprocessor import (
    FuzzyLevel,
    InvalidQueryError,
    SearchQuery,
    analyze_query,
)
from anime_search.search.scorer import rank_records, relevance_rank

__all__ = [
    "AnnotatedRecord",
    "DataSourceError",
    "FuzzyLevel",
    "FuzzySearchEngine",
    "InvalidQueryError",
    "MatchInfo",
    "MatchPredicate",
    "MatchTier",
    "SearchFilters",
    "SearchQuery",
    "SearchResultPage",
    "analyze_match",
    "analyze_query",
    "build_match_predicates",
    "highlight_matches",
    "rank_records",
    "relevance_rank",
]
