"""
Document library exports.
"""

from .config import LibraryConfig, build_library, setup_logging
from .engine import DecodingEngine, PyMuPDFDecodingEngine
from .errors import (
    DocumentError,
    DocumentLoadError,
    DocumentNotFound,
    FetchFailed,
    FetchTimeout,
    InvalidPattern,
    InvalidRange,
    SectionNotFound,
)
from .fetch import Deadline, SourceFetcher
from .identifiers import assign_document_id, normalize_locator
from .markdown import synthesize_markdown
from .models import (
    DecodedDocument,
    Document,
    DocumentInfo,
    DocumentSummary,
    ExtractionIssue,
    FlattenedSection,
    LoadResult,
    OutlineNode,
    RegistryEntry,
    RestoreReport,
    SearchMatch,
    SearchResultGroup,
    SectionPage,
)
from .outline import build_outline, flatten_outline, format_outline
from .pagination import paginate
from .registry import DocumentRegistry, JsonDocumentRegistry, NullDocumentRegistry, SqlAlchemyDocumentRegistry
from .search import DOCUMENT_START, search_body
from .sections import locate_section
from .service import DocumentLibrary
from .store import DocumentStore

__all__ = [
    "DOCUMENT_START",
    "DecodedDocument",
    "DecodingEngine",
    "Deadline",
    "Document",
    "DocumentError",
    "DocumentInfo",
    "DocumentLibrary",
    "DocumentLoadError",
    "DocumentNotFound",
    "DocumentRegistry",
    "DocumentStore",
    "DocumentSummary",
    "ExtractionIssue",
    "FetchFailed",
    "FetchTimeout",
    "FlattenedSection",
    "InvalidPattern",
    "InvalidRange",
    "JsonDocumentRegistry",
    "LibraryConfig",
    "LoadResult",
    "NullDocumentRegistry",
    "OutlineNode",
    "PyMuPDFDecodingEngine",
    "RegistryEntry",
    "RestoreReport",
    "SearchMatch",
    "SearchResultGroup",
    "SectionNotFound",
    "SectionPage",
    "SourceFetcher",
    "SqlAlchemyDocumentRegistry",
    "assign_document_id",
    "build_library",
    "build_outline",
    "flatten_outline",
    "format_outline",
    "locate_section",
    "normalize_locator",
    "paginate",
    "search_body",
    "setup_logging",
    "synthesize_markdown",
]
