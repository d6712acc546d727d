"""Keyword preprocessor for fuzzy anime search.

Cleans a raw keyword, splits it into words, and expands it with
synonyms and (at the highest fuzziness) prefix/suffix variants.
"""

from __future__ import annotations

import re
from enum import StrEnum
from types import MappingProxyType
from typing import Any, NamedTuple

from anime_search.search.params import MIN_VARIANT_SOURCE_LENGTH, get_search_params


class FuzzyLevel(StrEnum):
    """How far a keyword is expanded beyond literal substring matching."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: str | None) -> FuzzyLevel:
        """Map a raw query-string value to a level.

        An absent value means MEDIUM. Any value that names no level expands
        nothing beyond words, which is LOW.
        """
        if value is None:
            return cls.MEDIUM
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.LOW


class InvalidQueryError(ValueError):
    """Raised when a keyword cannot be searched.

    Attributes:
        reason: One of ``"empty"``, ``"too_long"`` or ``"unsearchable"``.
    """

    def __init__(self, reason: str, keyword: str = "") -> None:
        super().__init__(f"Invalid search keyword ({reason}): {keyword!r}")
        self.reason = reason
        self.keyword = keyword


class SearchQuery(NamedTuple):
    """Result of preprocessing a search keyword.

    Attributes:
        original: The trimmed keyword as typed by the user.
        cleaned: Keyword with punctuation removed.
        words: Whitespace-split tokens of ``cleaned``.
        synonyms: Synonyms whose key appears in ``cleaned``.
        variants: Prefix/suffix substrings (high fuzziness only).
        all_terms: words + synonyms + variants, deduplicated in order.
        fuzzy_level: Level the query was built for.
    """

    original: str
    cleaned: str
    words: list[str]
    synonyms: list[str]
    variants: list[str]
    all_terms: list[str]
    fuzzy_level: FuzzyLevel

    def as_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "cleaned": self.cleaned,
            "words": list(self.words),
            "synonyms": list(self.synonyms),
            "variants": list(self.variants),
            "all": list(self.all_terms),
        }


SYNONYM_MAP: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "动漫": ("动画", "番剧", "动画片"),
        "动画": ("动漫", "番剧"),
        "番剧": ("动漫", "动画"),
        "电影": ("剧场版", "电影版"),
        "剧场版": ("电影", "电影版"),
        "进击": ("攻击", "进攻"),
        "巨人": ("泰坦", "TITAN"),
        "鬼灭": ("鬼杀",),
        "火影": ("忍者",),
        "海贼": ("海盗",),
        "龙珠": ("七龙珠",),
        "死神": ("漂白剂", "BLEACH"),
    }
)

# Everything except ASCII word characters, whitespace and CJK unified ideographs
_STRIP_RE = re.compile(r"[^A-Za-z0-9_\s\u4e00-\u9fff]")
_WHITESPACE_RE = re.compile(r"\s+")


def _dedupe(items: list[str]) -> list[str]:
    """Drop duplicates, keeping first-seen order."""
    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def clean_keyword(keyword: str) -> str:
    """Strip punctuation and symbols, keeping Latin/CJK word characters."""
    return _STRIP_RE.sub("", keyword).strip()


def split_words(cleaned: str) -> list[str]:
    return [word for word in _WHITESPACE_RE.split(cleaned) if word]


def expand_synonyms(cleaned: str) -> list[str]:
    """Collect synonyms of every mapped term contained in the keyword."""
    synonyms: list[str] = []
    for key, values in SYNONYM_MAP.items():
        if key in cleaned:
            synonyms.extend(values)
    return _dedupe(synonyms)


def generate_variants(cleaned: str, fuzzy_level: FuzzyLevel) -> list[str]:
    """Generate suffix and prefix substrings for high-fuzziness matching.

    Produces ``cleaned[i:]`` for every ``i`` up to ``len - 2`` followed by
    ``cleaned[:i]`` for every ``i`` from 2 to ``len``. Nothing is generated
    below high fuzziness or for keywords shorter than three characters.
    """
    if fuzzy_level != FuzzyLevel.HIGH or len(cleaned) < MIN_VARIANT_SOURCE_LENGTH:
        return []

    variants = [cleaned[i:] for i in range(len(cleaned) - 1)]
    variants.extend(cleaned[:i] for i in range(2, len(cleaned) + 1))
    return _dedupe(variants)


def analyze_query(keyword: str | None, fuzzy_level: FuzzyLevel = FuzzyLevel.MEDIUM) -> SearchQuery:
    """Build the weighted query representation for a raw keyword.

    Args:
        keyword: Raw keyword from the request.
        fuzzy_level: Expansion tier.

    Returns:
        A populated SearchQuery.

    Raises:
        InvalidQueryError: If the keyword is blank, longer than the
            configured cap, or has no searchable characters left after
            cleaning.
    """
    original = (keyword or "").strip()
    if not original:
        raise InvalidQueryError("empty", original)

    max_length = get_search_params()["max_keyword_length"]
    if max_length and len(original) > max_length:
        raise InvalidQueryError("too_long", original)

    cleaned = clean_keyword(original)
    if not cleaned:
        raise InvalidQueryError("unsearchable", original)

    words = _dedupe(split_words(cleaned))
    synonyms = expand_synonyms(cleaned)
    variants = generate_variants(cleaned, fuzzy_level)

    return SearchQuery(
        original=original,
        cleaned=cleaned,
        words=words,
        synonyms=synonyms,
        variants=variants,
        all_terms=_dedupe(words + synonyms + variants),
        fuzzy_level=fuzzy_level,
    )
