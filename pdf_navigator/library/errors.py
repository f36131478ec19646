from __future__ import annotations

from typing import List, Optional, Sequence


class DocumentError(Exception):
    """
    Base class for failures surfaced to callers of the document library.
    """


class DocumentNotFound(DocumentError):
    def __init__(self, doc_id: str):
        super().__init__(f"Document not found: {doc_id}. Please load it first.")
        self.doc_id = doc_id


class InvalidRange(DocumentError):
    def __init__(self, requested: int, total: int, what: str = "page"):
        super().__init__(f"Invalid {what} {requested}. Valid range is 1-{total}.")
        self.requested = requested
        self.total = total


class SectionNotFound(DocumentError):
    def __init__(self, query: str, suggestions: Optional[Sequence[str]] = None):
        self.query = query
        self.suggestions: List[str] = list(suggestions or [])
        message = f"Section not found: {query!r}."
        if self.suggestions:
            message += " Available sections include: " + ", ".join(self.suggestions)
        super().__init__(message)


class InvalidPattern(DocumentError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regular expression {pattern!r}: {reason}")
        self.pattern = pattern


class DocumentLoadError(DocumentError):
    """
    The source could not be read or decoded.
    """


class FetchFailed(DocumentLoadError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url


class FetchTimeout(DocumentLoadError):
    def __init__(self, locator: str, timeout: float):
        super().__init__(f"Timed out after {timeout:g}s loading {locator}")
        self.locator = locator
        self.timeout = timeout
