"""Tests for the keyword preprocessor.

Verifies keyword cleaning, word splitting, synonym expansion, variant
generation, term ordering and invalid-keyword rejection.
"""

from __future__ import annotations

import re
from unittest.mock import patch

import pytest

from anime_search.search.query_preprocessor import (
    SYNONYM_MAP,
    FuzzyLevel,
    InvalidQueryError,
    SearchQuery,
    analyze_query,
    clean_keyword,
    expand_synonyms,
    generate_variants,
    split_words,
)

_ALLOWED = re.compile(r"^[A-Za-z0-9_\s一-鿿]*$")


# ---------------------------------------------------------------------------
# 1. Cleaning and splitting
# ---------------------------------------------------------------------------


class TestCleanKeyword:
    """Tests for clean_keyword."""

    def test_strips_punctuation(self):
        assert clean_keyword("进击的巨人!") == "进击的巨人"

    def test_strips_full_width_punctuation(self):
        assert clean_keyword("《海贼王》，") == "海贼王"

    def test_keeps_latin_digits_and_underscore(self):
        assert clean_keyword("one_piece 2024") == "one_piece 2024"

    def test_trims_surrounding_whitespace(self):
        assert clean_keyword("  火影 - 忍者  ") == "火影  忍者"

    @pytest.mark.parametrize("raw", ["Re:Zero", "鬼灭之刃@#$", "Fate/stay night", "ネコ 猫", "café 咖啡"])
    def test_cleaned_keyword_only_has_allowed_characters(self, raw):
        assert _ALLOWED.match(clean_keyword(raw))


class TestSplitWords:
    """Tests for split_words."""

    def test_splits_on_whitespace_runs(self):
        assert split_words("火影  忍者\t疾风传") == ["火影", "忍者", "疾风传"]

    def test_single_word(self):
        assert split_words("海贼王") == ["海贼王"]


# ---------------------------------------------------------------------------
# 2. Synonyms
# ---------------------------------------------------------------------------


class TestExpandSynonyms:
    """Tests for the static synonym table."""

    def test_anime_synonyms(self):
        synonyms = expand_synonyms("热门动漫")
        assert {"动画", "番剧", "动画片"} <= set(synonyms)

    def test_attack_synonyms(self):
        assert expand_synonyms("进击") == ["攻击", "进攻"]

    def test_no_mapped_key_gives_empty(self):
        assert expand_synonyms("海绵宝宝") == []

    def test_multiple_keys_are_merged_without_duplicates(self):
        # "动漫" and "动画" expand into each other and both into "番剧"
        synonyms = expand_synonyms("动漫动画")
        assert len(synonyms) == len(set(synonyms))
        assert "番剧" in synonyms

    def test_synonym_map_is_read_only(self):
        with pytest.raises(TypeError):
            SYNONYM_MAP["新词"] = ("x",)  # type: ignore[index]


# ---------------------------------------------------------------------------
# 3. Variants
# ---------------------------------------------------------------------------


class TestGenerateVariants:
    """Tests for prefix/suffix variant generation."""

    def test_abcd_at_high(self):
        variants = generate_variants("abcd", FuzzyLevel.HIGH)
        assert set(variants) == {"abcd", "bcd", "cd", "ab", "abc"}
        assert len(variants) == len(set(variants))

    def test_suffixes_come_before_prefixes(self):
        assert generate_variants("abcd", FuzzyLevel.HIGH) == ["abcd", "bcd", "cd", "ab", "abc"]

    def test_two_characters_at_high_gives_none(self):
        assert generate_variants("ab", FuzzyLevel.HIGH) == []

    @pytest.mark.parametrize("level", [FuzzyLevel.LOW, FuzzyLevel.MEDIUM])
    def test_below_high_gives_none(self, level):
        assert generate_variants("进击的巨人", level) == []

    def test_three_characters_at_high(self):
        assert generate_variants("海贼王", FuzzyLevel.HIGH) == ["海贼王", "贼王", "海贼"]


# ---------------------------------------------------------------------------
# 4. analyze_query
# ---------------------------------------------------------------------------


class TestAnalyzeQuery:
    """Tests for the full preprocessing pipeline."""

    def test_returns_search_query(self):
        result = analyze_query("进击", FuzzyLevel.MEDIUM)
        assert isinstance(result, SearchQuery)
        assert result.original == "进击"
        assert result.cleaned == "进击"
        assert result.words == ["进击"]
        assert result.synonyms == ["攻击", "进攻"]
        assert result.variants == []
        assert result.all_terms == ["进击", "攻击", "进攻"]
        assert result.fuzzy_level == FuzzyLevel.MEDIUM

    def test_default_level_is_medium(self):
        assert analyze_query("海贼").fuzzy_level == FuzzyLevel.MEDIUM

    def test_original_is_trimmed(self):
        assert analyze_query("  海贼王  ").original == "海贼王"

    def test_words_are_deduplicated(self):
        assert analyze_query("火影 火影 忍者").words == ["火影", "忍者"]

    def test_all_terms_keep_first_seen_order(self):
        # "abcd" appears as a word and as a variant; it keeps the word position
        result = analyze_query("abcd", FuzzyLevel.HIGH)
        assert result.all_terms == ["abcd", "bcd", "cd", "ab", "abc"]
        assert len(result.all_terms) == len(set(result.all_terms))

    def test_all_terms_concatenation_order(self):
        result = analyze_query("火影 巨人", FuzzyLevel.HIGH)
        words_end = len(result.words)
        assert result.all_terms[:words_end] == ["火影", "巨人"]
        assert result.all_terms[words_end : words_end + 3] == ["泰坦", "TITAN", "忍者"]

    def test_high_level_short_keyword_has_no_variants(self):
        assert analyze_query("ab", FuzzyLevel.HIGH).variants == []

    def test_as_dict_uses_all_key(self):
        data = analyze_query("进击").as_dict()
        assert data["all"] == ["进击", "攻击", "进攻"]
        assert set(data) == {"original", "cleaned", "words", "synonyms", "variants", "all"}


# ---------------------------------------------------------------------------
# 5. Invalid keywords
# ---------------------------------------------------------------------------


class TestInvalidKeywords:
    """Keywords that cannot be searched raise InvalidQueryError."""

    @pytest.mark.parametrize("keyword", [None, "", "   ", "\t\n"])
    def test_empty_keyword(self, keyword):
        with pytest.raises(InvalidQueryError) as exc_info:
            analyze_query(keyword)
        assert exc_info.value.reason == "empty"

    def test_punctuation_only_keyword(self):
        with pytest.raises(InvalidQueryError) as exc_info:
            analyze_query("!!!???")
        assert exc_info.value.reason == "unsearchable"
        assert exc_info.value.keyword == "!!!???"

    def test_too_long_keyword(self):
        with patch(
            "anime_search.search.query_preprocessor.get_search_params",
            return_value={"max_keyword_length": 5},
        ):
            with pytest.raises(InvalidQueryError) as exc_info:
                analyze_query("abcdef", FuzzyLevel.HIGH)
        assert exc_info.value.reason == "too_long"

    def test_keyword_at_length_cap_is_accepted(self):
        with patch(
            "anime_search.search.query_preprocessor.get_search_params",
            return_value={"max_keyword_length": 5},
        ):
            assert analyze_query("abcde").cleaned == "abcde"

    def test_invalid_query_error_is_value_error(self):
        assert issubclass(InvalidQueryError, ValueError)


# ---------------------------------------------------------------------------
# 6. FuzzyLevel parsing
# ---------------------------------------------------------------------------


class TestFuzzyLevelParse:
    """Tests for FuzzyLevel.parse."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("low", FuzzyLevel.LOW),
            ("medium", FuzzyLevel.MEDIUM),
            ("high", FuzzyLevel.HIGH),
            ("HIGH", FuzzyLevel.HIGH),
            (" low ", FuzzyLevel.LOW),
        ],
    )
    def test_known_values(self, raw, expected):
        assert FuzzyLevel.parse(raw) == expected

    def test_absent_value_defaults_to_medium(self):
        assert FuzzyLevel.parse(None) == FuzzyLevel.MEDIUM

    @pytest.mark.parametrize("raw", ["", "  ", "extreme", "2"])
    def test_unknown_values_resolve_to_low(self, raw):
        assert FuzzyLevel.parse(raw) == FuzzyLevel.LOW
