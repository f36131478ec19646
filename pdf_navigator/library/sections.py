from __future__ import annotations

from typing import List, Optional, Tuple

from .errors import SectionNotFound
from .markdown import parse_heading
from .models import LocatedSection

MAX_SUGGESTIONS = 5


def _title_matches(title: str, query: str) -> bool:
    title_l = title.lower()
    query_l = query.lower()
    return query_l in title_l or title_l in query_l


def locate_section(body: str, query: str) -> LocatedSection:
    """
    Find the first heading whose title contains the query, or is contained
    in it, ignoring case. The section runs until the next heading of the
    same or shallower depth, so nested subsections are included.
    """
    if not query or not query.strip():
        raise ValueError("Section title must not be empty")
    query = query.strip()

    lines = body.split("\n")
    titles: List[str] = []
    match: Optional[Tuple[int, int, str]] = None  # (line index, depth, title)
    end = len(lines)

    for idx, line in enumerate(lines):
        heading = parse_heading(line)
        if heading is None:
            continue
        depth, title = heading
        if match is None:
            titles.append(title)
            if _title_matches(title, query):
                match = (idx, depth, title)
        elif depth <= match[1]:
            end = idx
            break

    if match is None:
        raise SectionNotFound(query, titles[:MAX_SUGGESTIONS])

    start, depth, title = match
    content = "\n".join(lines[start:end]).strip()
    return LocatedSection(title=title, depth=depth, content=content)
