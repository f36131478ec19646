from __future__ import annotations

import logging
from typing import Dict, List, Optional

import fitz  # PyMuPDF

from .errors import DocumentLoadError
from .fetch import Deadline
from .models import DecodedDocument, ExtractionIssue
from .outline import build_outline

logger = logging.getLogger(__name__)


class DecodingEngine:
    """
    Abstract decoding engine. Implementations turn raw document bytes into
    per-page text, an outline and metadata, and should be stateless.
    """

    def decode(self, data: bytes, deadline: Optional[Deadline] = None, locator: str = "") -> DecodedDocument:
        raise NotImplementedError


class PyMuPDFDecodingEngine(DecodingEngine):
    """
    PyMuPDF-based decoder. Extracts plain text per page and the bookmark
    outline via `get_toc`. A page whose text cannot be extracted becomes an
    empty page and is reported as an issue instead of failing the load.
    """

    def decode(self, data: bytes, deadline: Optional[Deadline] = None, locator: str = "") -> DecodedDocument:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:  # noqa: BLE001
            raise DocumentLoadError(f"Failed to open PDF {locator or '<bytes>'}: {exc}") from exc

        try:
            issues: List[ExtractionIssue] = []
            metadata = self._extract_metadata(doc, issues)

            page_texts: List[str] = []
            for idx in range(doc.page_count):
                if deadline is not None:
                    deadline.check(locator)
                try:
                    page_texts.append(doc.load_page(idx).get_text("text"))
                except Exception as exc:  # noqa: BLE001
                    logger.warning("Could not extract text from page %s of %s: %s", idx + 1, locator, exc)
                    issues.append(ExtractionIssue("page", str(idx + 1), str(exc)))
                    page_texts.append("")

            try:
                toc = doc.get_toc(simple=True)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Could not extract outline of %s: %s", locator, exc)
                issues.append(ExtractionIssue("outline", "toc", str(exc)))
                toc = []
            outline, outline_issues = build_outline(toc, page_count=len(page_texts))
            issues.extend(outline_issues)
        finally:
            doc.close()

        return DecodedDocument(page_texts=page_texts, outline=outline, metadata=metadata, issues=issues)

    def _extract_metadata(self, doc, issues: List[ExtractionIssue]) -> Dict[str, str]:
        try:
            raw = doc.metadata or {}
        except Exception as exc:  # noqa: BLE001
            issues.append(ExtractionIssue("metadata", "info", str(exc)))
            return {}
        return {str(k): str(v) for k, v in raw.items() if v not in (None, "")}
