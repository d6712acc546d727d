"""Match annotation and highlighting for fuzzy search results."""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import BaseModel

from anime_search.search.params import ELLIPSIS, HIGHLIGHT_CLOSE, HIGHLIGHT_OPEN


class MatchInfo(BaseModel):
    """Which query terms occur in a record's title and description."""

    title_matches: list[str] = []
    description_matches: list[str] = []
    match_count: int = 0


def analyze_match(title: str | None, description: str | None, terms: Iterable[str]) -> MatchInfo:
    """Test every term against title and description independently.

    Containment is case-sensitive; a term found in both fields counts twice.
    """
    title_matches: list[str] = []
    description_matches: list[str] = []
    for term in terms:
        if title and term in title:
            title_matches.append(term)
        if description and term in description:
            description_matches.append(term)
    return MatchInfo(
        title_matches=title_matches,
        description_matches=description_matches,
        match_count=len(title_matches) + len(description_matches),
    )


def highlight_matches(text: str | None, terms: Iterable[str], max_length: int | None = None) -> str:
    """Wrap every case-insensitive occurrence of each term in highlight tags.

    Terms are applied one after another to the already-highlighted text, so
    a term that is a substring of an earlier one is wrapped again inside the
    earlier markers (``<mark>ab<mark>c</mark></mark>``). Truncation happens
    after highlighting and may cut through a marker.

    Args:
        text: Text to highlight. ``None`` and ``""`` give ``""``.
        terms: Terms in priority order.
        max_length: Optional cap on the highlighted length; an ellipsis is
            appended when the text is cut.

    Returns:
        The highlighted (and possibly truncated) text.
    """
    if not text:
        return ""

    highlighted = text
    for term in terms:
        if not term:
            continue
        highlighted = re.sub(
            re.escape(term),
            lambda match: f"{HIGHLIGHT_OPEN}{match.group(0)}{HIGHLIGHT_CLOSE}",
            highlighted,
            flags=re.IGNORECASE,
        )

    if max_length is not None and len(highlighted) > max_length:
        highlighted = highlighted[:max_length] + ELLIPSIS
    return highlighted
