from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from .models import OutlineNode
from .outline import flatten_outline

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"
HEADING_PATTERN = re.compile(r"^(#+)\s+(.*\S)\s*$")


def heading_line(title: str, level: int) -> str:
    return f"{'#' * (level + 1)} {title}"


def parse_heading(line: str) -> Optional[Tuple[int, str]]:
    """Return (depth, title) when `line` is a markdown heading."""
    match = HEADING_PATTERN.match(line)
    if not match:
        return None
    return len(match.group(1)), match.group(2)


def _page_blocks(page_texts: Sequence[str], start_page: int, end_page: int) -> List[str]:
    blocks: List[str] = []
    for page_number in range(start_page, end_page + 1):
        text = page_texts[page_number - 1].strip()
        if text:
            blocks.append(text)
    return blocks


def synthesize_markdown(page_texts: Sequence[str], outline: Optional[Sequence[OutlineNode]] = None) -> str:
    """
    Merge page-ordered text and the outline into one markdown body.

    Every outline entry with a resolvable page becomes a heading placed in
    front of the pages it covers. Pages before the first heading form a
    prologue and pages are never repeated or dropped, whatever order the
    outline declares its entries in.
    """
    page_count = len(page_texts)
    sections = flatten_outline(outline or [], page_count)
    if not sections:
        return BLOCK_SEPARATOR.join(text.strip() for text in page_texts if text.strip())

    logger.debug("Synthesizing %s pages into %s sections", page_count, len(sections))
    blocks = _page_blocks(page_texts, 1, sections[0].start_page - 1)
    for section in sections:
        blocks.append(heading_line(section.title, section.level))
        blocks.extend(_page_blocks(page_texts, section.start_page, section.end_page))
    blocks.extend(_page_blocks(page_texts, sections[-1].end_page + 1, page_count))
    return BLOCK_SEPARATOR.join(blocks).strip()
