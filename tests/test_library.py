import json
import os
import threading
import time

import pytest

from conftest import FakeEngine, StaticFetcher
from pdf_navigator.library import (
    DecodedDocument,
    DocumentLibrary,
    DocumentNotFound,
    ExtractionIssue,
    InvalidRange,
    JsonDocumentRegistry,
    NullDocumentRegistry,
    OutlineNode,
    RegistryEntry,
    SqlAlchemyDocumentRegistry,
)


def test_load_returns_id_page_count_and_outline(library):
    result = library.load("/a/report.pdf")

    assert result.id == "report.pdf"
    assert result.page_count == 3
    assert result.outline == "Chapter 1\nChapter 2"


def test_reload_keeps_id_and_replaces_document(library, fake_engine):
    first = library.load("/a/report.pdf")
    fake_engine.documents["/a/report.pdf"] = DecodedDocument(page_texts=["rewritten"])
    second = library.load("/a/report.pdf")

    assert first.id == second.id
    assert len(library.store) == 1
    assert library.info("report.pdf").page_count == 1


def test_same_file_name_in_other_directory_gets_longer_id(library):
    assert library.load("/a/report.pdf").id == "report.pdf"
    assert library.load("/b/report.pdf").id == os.path.join("b", "report.pdf")
    assert {d.id for d in library.list_documents()} == {"report.pdf", os.path.join("b", "report.pdf")}


def test_empty_locator_is_rejected(library):
    with pytest.raises(ValueError):
        library.load("   ")


def test_section_pages(library):
    library.load("/a/report.pdf")

    whole = library.section("report.pdf", "chapter 1")
    assert (whole.page, whole.total_pages, whole.section) == (1, 1, "Chapter 1")
    assert whole.content == "## Chapter 1\n\nCh1 body"

    second = library.section("report.pdf", "chapter 1", page=2, char_budget=10)
    assert second.total_pages == 2
    assert second.content == "Ch1 body"

    with pytest.raises(InvalidRange):
        library.section("report.pdf", "chapter 1", page=5)


def test_search_and_outline(library):
    library.load("/a/report.pdf")

    groups = library.search("report.pdf", "body")
    assert [g.section for g in groups] == ["Chapter 1", "Chapter 2"]
    assert library.outline("report.pdf") == "Chapter 1\nChapter 2"


def test_info_reports_metadata_and_issues(library, fake_engine):
    fake_engine.documents["/a/odd.pdf"] = DecodedDocument(
        page_texts=["one", ""],
        outline=[OutlineNode("Only", 1, 1)],
        metadata={"author": "Someone"},
        issues=[ExtractionIssue("page", "2", "boom")],
    )
    library.load("/a/odd.pdf")
    info = library.info("odd.pdf")

    assert info.path == "/a/odd.pdf"
    assert info.page_count == 2
    assert info.metadata == {"author": "Someone"}
    assert info.issues == (ExtractionIssue("page", "2", "boom"),)


def test_unknown_and_unloaded_documents(library):
    library.load("/a/report.pdf")

    assert library.unload("report.pdf") is True
    assert library.unload("report.pdf") is False
    with pytest.raises(DocumentNotFound):
        library.section("report.pdf", "chapter 1")
    with pytest.raises(DocumentNotFound):
        library.search("nope.pdf", "x")


def test_json_registry_persists_loads_and_unloads(tmp_path):
    registry_path = tmp_path / "nested" / "registry.json"
    library = DocumentLibrary(
        engine=FakeEngine(), fetcher=StaticFetcher(), registry=JsonDocumentRegistry(registry_path)
    )
    library.load("/a/report.pdf")
    library.load("/b/report.pdf")

    saved = json.loads(registry_path.read_text(encoding="utf-8"))
    assert saved == [
        {"id": "report.pdf", "path": "/a/report.pdf"},
        {"id": os.path.join("b", "report.pdf"), "path": "/b/report.pdf"},
    ]

    library.unload("report.pdf")
    saved = json.loads(registry_path.read_text(encoding="utf-8"))
    assert [item["path"] for item in saved] == ["/b/report.pdf"]


def test_restore_replays_registry_and_skips_failures(tmp_path):
    registry_path = tmp_path / "registry.json"
    registry_path.write_text(
        json.dumps(
            [
                {"id": "report.pdf", "path": "/a/report.pdf"},
                {"id": "gone.pdf", "path": "/missing/gone.pdf"},
                {"id": "", "path": "/broken/entry.pdf"},
            ]
        ),
        encoding="utf-8",
    )
    engine = FakeEngine(broken={"/missing/gone.pdf"})
    library = DocumentLibrary(engine=engine, fetcher=StaticFetcher(), registry=JsonDocumentRegistry(registry_path))

    report = library.restore()

    assert report.restored == ["report.pdf"]
    assert list(report.failed) == ["gone.pdf"]
    assert library.section("report.pdf", "chapter 2").content == "## Chapter 2\n\nCh2 body"
    saved = json.loads(registry_path.read_text(encoding="utf-8"))
    assert saved == [{"id": "report.pdf", "path": "/a/report.pdf"}]


def test_restore_without_registry_file(tmp_path):
    library = DocumentLibrary(
        engine=FakeEngine(), fetcher=StaticFetcher(), registry=JsonDocumentRegistry(tmp_path / "absent.json")
    )
    report = library.restore()
    assert report.restored == []
    assert report.failed == {}


def test_sqlalchemy_registry_round_trip(tmp_path):
    url = f"sqlite:///{tmp_path / 'registry.db'}"
    first = DocumentLibrary(engine=FakeEngine(), fetcher=StaticFetcher(), registry=SqlAlchemyDocumentRegistry(url))
    first.load("/a/report.pdf")
    first.load("/b/report.pdf")

    registry = SqlAlchemyDocumentRegistry(url)
    assert registry.read_entries() == [
        RegistryEntry(id="report.pdf", path="/a/report.pdf"),
        RegistryEntry(id=os.path.join("b", "report.pdf"), path="/b/report.pdf"),
    ]

    second = DocumentLibrary(engine=FakeEngine(), fetcher=StaticFetcher(), registry=registry)
    report = second.restore()
    assert report.restored == ["report.pdf", os.path.join("b", "report.pdf")]


class FailingRegistry(NullDocumentRegistry):
    def write_entries(self, entries):
        raise OSError("disk full")


def test_registry_write_failure_does_not_fail_load():
    library = DocumentLibrary(engine=FakeEngine(), fetcher=StaticFetcher(), registry=FailingRegistry())
    result = library.load("/a/report.pdf")

    assert result.id == "report.pdf"
    assert "report.pdf" in library.store


def test_relative_load_does_not_evict_document_with_same_suffix(library, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    library.load("/x/report.pdf")
    library.load("/y/a/report.pdf")
    library.load(os.path.join("a", "report.pdf"))

    paths = sorted(d.path for d in library.list_documents())
    assert paths == sorted(["/x/report.pdf", "/y/a/report.pdf", os.path.join("a", "report.pdf")])
    assert len({d.id for d in library.list_documents()}) == 3


class SlowFirstWriteRegistry(NullDocumentRegistry):
    """Holds the first save long enough for a second load to finish."""

    def __init__(self):
        self.saved = []
        self.first_write_started = threading.Event()

    def write_entries(self, entries):
        entries = list(entries)
        if not self.first_write_started.is_set():
            self.first_write_started.set()
            time.sleep(0.2)
        self.saved = [e.id for e in entries]


def test_concurrent_loads_save_every_document():
    registry = SlowFirstWriteRegistry()
    library = DocumentLibrary(engine=FakeEngine(), fetcher=StaticFetcher(), registry=registry)

    first = threading.Thread(target=library.load, args=("/docs/one.pdf",))
    first.start()
    assert registry.first_write_started.wait(5)
    second = threading.Thread(target=library.load, args=("/docs/two.pdf",))
    second.start()
    first.join(5)
    second.join(5)

    assert sorted(d.id for d in library.list_documents()) == ["one.pdf", "two.pdf"]
    assert sorted(registry.saved) == ["one.pdf", "two.pdf"]


def test_concurrent_unload_and_load_keep_registry_in_step():
    registry = SlowFirstWriteRegistry()
    library = DocumentLibrary(engine=FakeEngine(), fetcher=StaticFetcher(), registry=registry)
    registry.first_write_started.set()
    library.load("/docs/one.pdf")
    registry.first_write_started.clear()

    unloader = threading.Thread(target=library.unload, args=("one.pdf",))
    unloader.start()
    assert registry.first_write_started.wait(5)
    loader = threading.Thread(target=library.load, args=("/docs/two.pdf",))
    loader.start()
    unloader.join(5)
    loader.join(5)

    assert [d.id for d in library.list_documents()] == ["two.pdf"]
    assert registry.saved == ["two.pdf"]
