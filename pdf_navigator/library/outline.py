from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .models import ExtractionIssue, FlattenedSection, OutlineNode

UNTITLED = "Untitled"


def clean_title(title: str) -> str:
    return " ".join(str(title).split())


def _coerce_entry(entry: Any) -> Tuple[int, str, Any]:
    if isinstance(entry, (str, bytes)) or not isinstance(entry, Sequence) or len(entry) < 3:
        raise ValueError(f"expected [level, title, page], got {entry!r}")
    level = int(entry[0])
    if level < 1:
        raise ValueError(f"outline level must be >= 1, got {level}")
    return level, clean_title(entry[1]), entry[2]


def build_outline(
    entries: Iterable[Any],
    page_count: Optional[int] = None,
) -> Tuple[List[OutlineNode], List[ExtractionIssue]]:
    """
    Convert a flat `[level, title, page]` table of contents (the shape
    PyMuPDF's `get_toc` returns) into an `OutlineNode` tree.

    Levels are re-based on tree depth, so a jump from level 1 to level 3
    yields a child at level 2. Malformed entries are skipped and reported.
    An entry without a title, or with a destination that cannot be resolved
    to a page, keeps its node but leaves it pageless; untitled nodes are
    named "Untitled" so their children keep their place in the tree.
    """
    roots: List[OutlineNode] = []
    issues: List[ExtractionIssue] = []
    stack: List[Tuple[int, OutlineNode]] = []

    for position, entry in enumerate(entries, start=1):
        try:
            declared_level, title, raw_page = _coerce_entry(entry)
        except (TypeError, ValueError) as exc:
            issues.append(ExtractionIssue("outline", f"entry {position}", str(exc)))
            continue

        if not title:
            issues.append(ExtractionIssue("outline", f"entry {position}", "empty title"))
            title = UNTITLED
            raw_page = None

        page: Optional[int]
        try:
            page = int(raw_page) if raw_page is not None else None
        except (TypeError, ValueError):
            issues.append(ExtractionIssue("outline", title, f"unresolvable destination {raw_page!r}"))
            page = None
        if page is not None and page < 1:
            # PyMuPDF reports -1 for entries without a page destination.
            page = None
        if page is not None and page_count is not None and page > page_count:
            issues.append(ExtractionIssue("outline", title, f"destination page {page} beyond last page {page_count}"))
            page = None

        while stack and stack[-1][0] >= declared_level:
            stack.pop()
        node = OutlineNode(title=title, level=len(stack) + 1, page=page)
        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)
        stack.append((declared_level, node))

    return roots, issues


def flatten_outline(nodes: Sequence[OutlineNode], page_count: int) -> List[FlattenedSection]:
    """
    Depth-first flatten of the outline into page-ordered sections.

    Nodes without a page inside 1..page_count are dropped, their children
    are still visited. Sections are ordered by start page, ties keep
    discovery order, and each section ends one page before the next one
    starts (the last runs to the final page).
    """
    discovered: List[OutlineNode] = []
    stack: List[OutlineNode] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        if node.page is not None and 1 <= node.page <= page_count:
            discovered.append(node)
        stack.extend(reversed(node.children))

    ordered = [node for _, node in sorted(enumerate(discovered), key=lambda item: (item[1].page, item[0]))]

    sections: List[FlattenedSection] = []
    for idx, node in enumerate(ordered):
        end_page = ordered[idx + 1].page - 1 if idx + 1 < len(ordered) else page_count
        sections.append(
            FlattenedSection(
                title=clean_title(node.title),
                level=node.level,
                start_page=node.page,
                end_page=end_page,
            )
        )
    return sections


def format_outline(nodes: Sequence[OutlineNode], indent: str = "  ") -> str:
    lines: List[str] = []
    stack: List[Tuple[OutlineNode, int]] = [(node, 0) for node in reversed(nodes)]
    while stack:
        node, depth = stack.pop()
        lines.append(f"{indent * depth}{clean_title(node.title)}")
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return "\n".join(lines)
