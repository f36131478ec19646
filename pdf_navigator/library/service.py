from __future__ import annotations

import logging
import threading
from typing import List, Optional

from .engine import DecodingEngine
from .fetch import DEFAULT_TIMEOUT, Deadline, SourceFetcher
from .markdown import synthesize_markdown
from .models import (
    Document,
    DocumentInfo,
    DocumentSummary,
    LoadResult,
    RestoreReport,
    SearchResultGroup,
    SectionPage,
)
from .outline import format_outline
from .pagination import paginate, select_page
from .registry import DocumentRegistry, NullDocumentRegistry
from .search import DEFAULT_CONTEXT_CHARS, search_body
from .sections import locate_section
from .store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_CHAR_BUDGET = 4000


class DocumentLibrary:
    """
    Loads documents into a store and answers outline, section, search and
    bookkeeping calls against them.

    Fetching and decoding happen outside the store's writer lock; only id
    assignment and the insert itself are serialized. The registry receives
    the `{id, path}` list after every load and unload. Saves are serialized
    and each one writes the store contents as of that save.
    """

    def __init__(
        self,
        engine: DecodingEngine,
        store: Optional[DocumentStore] = None,
        fetcher: Optional[SourceFetcher] = None,
        registry: Optional[DocumentRegistry] = None,
        fetch_timeout: float = DEFAULT_TIMEOUT,
        char_budget: int = DEFAULT_CHAR_BUDGET,
        context_chars: int = DEFAULT_CONTEXT_CHARS,
    ):
        self.engine = engine
        self.store = store if store is not None else DocumentStore()
        self.fetcher = fetcher or SourceFetcher()
        self.registry = registry or NullDocumentRegistry()
        self.fetch_timeout = fetch_timeout
        self.char_budget = char_budget
        self.context_chars = context_chars
        self._persist_lock = threading.Lock()

    def load(self, locator: str, timeout: Optional[float] = None) -> LoadResult:
        locator = locator.strip()
        if not locator:
            raise ValueError("Document path must not be empty")
        deadline = Deadline.after(timeout if timeout is not None else self.fetch_timeout)

        data = self.fetcher.fetch(locator, deadline)
        decoded = self.engine.decode(data, deadline=deadline, locator=locator)
        body = synthesize_markdown(decoded.page_texts, decoded.outline)
        if decoded.issues:
            logger.warning("Loaded %s with %s extraction issue(s)", locator, len(decoded.issues))

        def build(doc_id: str) -> Document:
            return Document(
                id=doc_id,
                locator=locator,
                page_count=decoded.page_count,
                body=body,
                metadata=dict(decoded.metadata),
                outline=tuple(decoded.outline),
                issues=tuple(decoded.issues),
            )

        document = self.store.register(locator, build)
        self._persist()
        return LoadResult(id=document.id, page_count=document.page_count, outline=format_outline(document.outline))

    def section(
        self,
        doc_id: str,
        title: str,
        page: int = 1,
        char_budget: Optional[int] = None,
    ) -> SectionPage:
        document = self.store.get(doc_id)
        located = locate_section(document.body, title)
        pages = paginate(located.content, self.char_budget if char_budget is None else char_budget)
        return SectionPage(
            page=page,
            total_pages=len(pages),
            content=select_page(pages, page),
            section=located.title,
        )

    def search(
        self,
        doc_id: str,
        query: str,
        case_sensitive: bool = False,
        regex: bool = False,
        max_results: Optional[int] = None,
        context_chars: Optional[int] = None,
    ) -> List[SearchResultGroup]:
        document = self.store.get(doc_id)
        return search_body(
            document.body,
            query,
            case_sensitive=case_sensitive,
            regex=regex,
            max_results=max_results,
            context_chars=self.context_chars if context_chars is None else context_chars,
        )

    def outline(self, doc_id: str) -> str:
        return format_outline(self.store.get(doc_id).outline)

    def info(self, doc_id: str) -> DocumentInfo:
        document = self.store.get(doc_id)
        return DocumentInfo(
            id=document.id,
            path=document.locator,
            page_count=document.page_count,
            metadata=dict(document.metadata),
            issues=document.issues,
        )

    def list_documents(self) -> List[DocumentSummary]:
        return [DocumentSummary(id=d.id, path=d.locator, page_count=d.page_count) for d in self.store.list_documents()]

    def unload(self, doc_id: str) -> bool:
        removed = self.store.remove(doc_id)
        if removed:
            self._persist()
        return removed

    def restore(self) -> RestoreReport:
        """
        Replay every persisted entry through `load`. A failing entry is
        logged and reported; the remaining entries are still restored.
        """
        report = RestoreReport()
        try:
            entries = self.registry.read_entries()
        except Exception:  # noqa: BLE001
            logger.exception("Failed to read document registry")
            return report
        for entry in entries:
            try:
                result = self.load(entry.path)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to restore document %s from %s: %s", entry.id, entry.path, exc)
                report.failed[entry.id] = str(exc)
                continue
            logger.info("Restored document %s from registry", result.id)
            report.restored.append(result.id)
        return report

    def _persist(self) -> None:
        with self._persist_lock:
            try:
                self.registry.write_entries(self.store.entries())
            except Exception:  # noqa: BLE001
                logger.exception("Failed to save document registry")
