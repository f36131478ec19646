from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .engine import PyMuPDFDecodingEngine
from .fetch import DEFAULT_TIMEOUT, SourceFetcher
from .registry import DocumentRegistry, JsonDocumentRegistry, SqlAlchemyDocumentRegistry
from .search import DEFAULT_CONTEXT_CHARS
from .service import DEFAULT_CHAR_BUDGET, DocumentLibrary

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class LibraryConfig:
    registry_path: str = "~/.pdf-navigator/registry.json"
    database_url: Optional[str] = None
    fetch_timeout: float = DEFAULT_TIMEOUT
    char_budget: int = DEFAULT_CHAR_BUDGET
    context_chars: int = DEFAULT_CONTEXT_CHARS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LibraryConfig":
        return cls(
            registry_path=os.getenv("PDF_NAVIGATOR_REGISTRY_PATH", cls.registry_path),
            database_url=os.getenv("PDF_NAVIGATOR_DATABASE_URL") or None,
            fetch_timeout=float(os.getenv("PDF_NAVIGATOR_FETCH_TIMEOUT", str(DEFAULT_TIMEOUT))),
            char_budget=int(os.getenv("PDF_NAVIGATOR_CHAR_BUDGET", str(DEFAULT_CHAR_BUDGET))),
            context_chars=int(os.getenv("PDF_NAVIGATOR_CONTEXT_CHARS", str(DEFAULT_CONTEXT_CHARS))),
            log_level=os.getenv("PDF_NAVIGATOR_LOG_LEVEL", cls.log_level),
        )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
        force=True,
    )


def make_registry(config: LibraryConfig) -> DocumentRegistry:
    if config.database_url:
        return SqlAlchemyDocumentRegistry(config.database_url)
    return JsonDocumentRegistry(Path(config.registry_path))


def build_library(config: LibraryConfig) -> DocumentLibrary:
    return DocumentLibrary(
        engine=PyMuPDFDecodingEngine(),
        fetcher=SourceFetcher(),
        registry=make_registry(config),
        fetch_timeout=config.fetch_timeout,
        char_budget=config.char_budget,
        context_chars=config.context_chars,
    )
