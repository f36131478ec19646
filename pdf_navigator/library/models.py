from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class OutlineNode:
    title: str
    level: int
    page: Optional[int] = None
    children: List["OutlineNode"] = field(default_factory=list)


@dataclass(frozen=True)
class FlattenedSection:
    title: str
    level: int
    start_page: int
    end_page: int

    @property
    def is_heading_only(self) -> bool:
        return self.end_page < self.start_page


@dataclass(frozen=True)
class ExtractionIssue:
    scope: str  # "page", "outline" or "metadata"
    reference: str
    message: str


@dataclass
class DecodedDocument:
    page_texts: List[str]
    outline: List[OutlineNode] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    issues: List[ExtractionIssue] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)


@dataclass(frozen=True)
class Document:
    id: str
    locator: str
    page_count: int
    body: str
    metadata: Dict[str, str] = field(default_factory=dict)
    outline: Tuple[OutlineNode, ...] = ()
    issues: Tuple[ExtractionIssue, ...] = ()


@dataclass(frozen=True)
class LocatedSection:
    title: str
    depth: int
    content: str


@dataclass(frozen=True)
class SectionPage:
    page: int
    total_pages: int
    content: str
    section: str


@dataclass(frozen=True)
class SearchMatch:
    text: str
    context: str


@dataclass
class SearchResultGroup:
    section: str
    matches: List[SearchMatch] = field(default_factory=list)


@dataclass(frozen=True)
class RegistryEntry:
    id: str
    path: str


@dataclass(frozen=True)
class LoadResult:
    id: str
    page_count: int
    outline: str


@dataclass(frozen=True)
class DocumentSummary:
    id: str
    path: str
    page_count: int


@dataclass(frozen=True)
class DocumentInfo:
    id: str
    path: str
    page_count: int
    metadata: Dict[str, str]
    issues: Tuple[ExtractionIssue, ...] = ()


@dataclass
class RestoreReport:
    restored: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
