from __future__ import annotations

import bisect
import re
from typing import Dict, List, Optional, Pattern

from .errors import InvalidPattern
from .markdown import parse_heading
from .models import SearchMatch, SearchResultGroup

DOCUMENT_START = "Document Start"
DEFAULT_CONTEXT_CHARS = 50


class _HeadingIndex:
    """
    Offsets of heading lines in a body, for attributing a position to the
    nearest heading at or before it.
    """

    def __init__(self, body: str):
        self.offsets: List[int] = []
        self.titles: List[str] = []
        offset = 0
        for line in body.split("\n"):
            heading = parse_heading(line)
            if heading is not None:
                self.offsets.append(offset)
                self.titles.append(heading[1])
            offset += len(line) + 1

    def section_at(self, position: int) -> str:
        idx = bisect.bisect_right(self.offsets, position) - 1
        return self.titles[idx] if idx >= 0 else DOCUMENT_START


def compile_query(query: str, case_sensitive: bool = False, regex: bool = False) -> Pattern[str]:
    if not query:
        raise ValueError("Search query must not be empty")
    flags = 0 if case_sensitive else re.IGNORECASE
    if not regex:
        return re.compile(re.escape(query), flags)
    try:
        return re.compile(query, flags)
    except re.error as exc:
        raise InvalidPattern(query, str(exc)) from exc


def search_body(
    body: str,
    query: str,
    case_sensitive: bool = False,
    regex: bool = False,
    max_results: Optional[int] = None,
    context_chars: int = DEFAULT_CONTEXT_CHARS,
) -> List[SearchResultGroup]:
    """
    Scan `body` for `query` and group the hits by the heading they fall under.

    Groups appear in the order their section is first hit. Each match keeps
    the text as written in the document plus `context_chars` characters on
    either side. Scanning stops once `max_results` matches were collected.
    """
    if max_results is not None and max_results < 1:
        raise ValueError(f"max_results must be positive, got {max_results}")
    if context_chars < 0:
        raise ValueError(f"context_chars must not be negative, got {context_chars}")

    pattern = compile_query(query, case_sensitive=case_sensitive, regex=regex)
    headings = _HeadingIndex(body)
    groups: Dict[str, SearchResultGroup] = {}
    found = 0
    position = 0

    while position <= len(body):
        if max_results is not None and found >= max_results:
            break
        match = pattern.search(body, position)
        if match is None:
            break
        start, end = match.span()
        context = body[max(0, start - context_chars) : min(len(body), end + context_chars)]
        section = headings.section_at(start)
        group = groups.get(section)
        if group is None:
            group = groups[section] = SearchResultGroup(section=section)
        group.matches.append(SearchMatch(text=match.group(0), context=context.strip()))
        found += 1
        # Zero-width matches would otherwise be found again at the same spot.
        position = end if end > start else start + 1

    return list(groups.values())
