from __future__ import annotations

from typing import List

from .errors import InvalidRange
from .markdown import BLOCK_SEPARATOR, parse_heading


def _is_heading_only(paragraph: str) -> bool:
    return "\n" not in paragraph and parse_heading(paragraph) is not None


def _joined_length(paragraphs: List[str]) -> int:
    if not paragraphs:
        return 0
    return sum(len(p) for p in paragraphs) + len(BLOCK_SEPARATOR) * (len(paragraphs) - 1)


def paginate(text: str, char_budget: int) -> List[str]:
    """
    Split `text` into pages of at most `char_budget` characters, breaking
    only between blank-line separated paragraphs.

    A heading is never left alone at the bottom of a page when it fits on
    the next page together with the paragraph that follows it. Paragraphs
    longer than the budget get a page of their own rather than being cut,
    and joining the pages with a blank line gives back `text` unchanged.
    """
    if char_budget < 1:
        raise ValueError(f"char_budget must be positive, got {char_budget}")
    if len(text) <= char_budget:
        return [text]

    sep = len(BLOCK_SEPARATOR)
    pages: List[List[str]] = []
    current: List[str] = []
    for paragraph in text.split(BLOCK_SEPARATOR):
        if not current:
            current = [paragraph]
            continue
        if _joined_length(current) + sep + len(paragraph) <= char_budget:
            current.append(paragraph)
            continue

        carried: List[str] = []
        if (
            len(current) > 1
            and _is_heading_only(current[-1])
            and len(current[-1]) + sep + len(paragraph) <= char_budget
        ):
            carried = [current.pop()]
        pages.append(current)
        current = carried + [paragraph]

    if current:
        pages.append(current)
    return [BLOCK_SEPARATOR.join(page) for page in pages]


def select_page(pages: List[str], page: int) -> str:
    if page < 1 or page > len(pages):
        raise InvalidRange(page, len(pages))
    return pages[page - 1]
