"""Bilingual message translations for API responses.

Usage:
    from anime_search.utils.messages import msg
    msg("search.failed", lang)                       # → "模糊搜索失败" or "Fuzzy search failed"
    msg("search.found", lang, keyword="海贼", total=3)  # → '模糊搜索"海贼"找到3条结果'
"""

from __future__ import annotations

_MESSAGES: dict[str, dict[str, str]] = {
    # Fuzzy search
    "search.keyword_empty": {
        "zh": "搜索关键词不能为空",
        "en": "Search keyword must not be empty",
    },
    "search.keyword_empty_hint": {
        "zh": "请提供keyword参数",
        "en": "Please provide the keyword parameter",
    },
    "search.keyword_too_long": {
        "zh": "搜索关键词过长",
        "en": "Search keyword is too long",
    },
    "search.keyword_too_long_hint": {
        "zh": "关键词长度不能超过{max_length}个字符",
        "en": "Keyword must be at most {max_length} characters",
    },
    "search.keyword_unsearchable": {
        "zh": "搜索关键词无有效字符",
        "en": "Search keyword has no searchable characters",
    },
    "search.keyword_unsearchable_hint": {
        "zh": "请使用中文、字母或数字进行搜索",
        "en": "Use Chinese characters, letters or digits",
    },
    "search.failed": {
        "zh": "模糊搜索失败",
        "en": "Fuzzy search failed",
    },
    "search.internal_error": {
        "zh": "数据库查询失败",
        "en": "Database query failed",
    },
    "search.found": {
        "zh": '模糊搜索"{keyword}"找到{total}条结果',
        "en": 'Fuzzy search for "{keyword}" found {total} results',
    },
    # Suggestions / hot keywords
    "search.suggestions": {
        "zh": "获取搜索建议成功",
        "en": "Search suggestions retrieved",
    },
    "search.hot_keywords": {
        "zh": "获取热门搜索成功",
        "en": "Hot keywords retrieved",
    },
}


def msg(key: str, lang: str = "zh", **kwargs: object) -> str:
    """Return a translated message for the given key and language.

    Args:
        key: Dot-separated message key (e.g. "search.failed").
        lang: Language code ("zh" or "en").
        **kwargs: Interpolation variables for the message template.

    Returns:
        Translated and formatted message string.
        Falls back to Chinese if key not found for the requested language.
    """
    entry = _MESSAGES.get(key)
    if entry is None:
        return key

    template = entry.get(lang, entry.get("zh", key))
    if kwargs:
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError):
            return template
    return template
