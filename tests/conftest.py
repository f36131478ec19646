from __future__ import annotations

from typing import Dict, Optional

import pytest

from pdf_navigator.library import (
    DecodedDocument,
    DecodingEngine,
    DocumentLibrary,
    DocumentLoadError,
    OutlineNode,
    SourceFetcher,
)


def sample_decoded() -> DecodedDocument:
    return DecodedDocument(
        page_texts=["Intro", "Ch1 body", "Ch2 body"],
        outline=[OutlineNode("Chapter 1", 1, 2), OutlineNode("Chapter 2", 1, 3)],
        metadata={"title": "Sample"},
    )


class FakeEngine(DecodingEngine):
    """Returns canned decodes keyed by locator; locators in `broken` fail to decode."""

    def __init__(self, documents: Optional[Dict[str, DecodedDocument]] = None, broken=()):
        self.documents = documents or {}
        self.broken = set(broken)
        self.calls = []

    def decode(self, data, deadline=None, locator=""):
        self.calls.append(locator)
        if locator in self.broken:
            raise DocumentLoadError(f"Failed to open PDF {locator}")
        return self.documents.get(locator) or sample_decoded()


class StaticFetcher(SourceFetcher):
    def fetch(self, locator, deadline=None):
        return locator.encode("utf-8")


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def library(fake_engine):
    return DocumentLibrary(engine=fake_engine, fetcher=StaticFetcher())
