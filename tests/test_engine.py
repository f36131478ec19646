import time

import fitz  # PyMuPDF
import pytest

from pdf_navigator.library import (
    Deadline,
    DocumentLibrary,
    DocumentLoadError,
    FetchTimeout,
    PyMuPDFDecodingEngine,
    SourceFetcher,
)


def make_pdf(path, pages, toc=None, title=None):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    if toc:
        doc.set_toc(toc)
    if title:
        doc.set_metadata({"title": title})
    doc.save(str(path))
    doc.close()
    return path


def test_decode_extracts_pages_outline_and_metadata(tmp_path):
    pdf = make_pdf(
        tmp_path / "sample.pdf",
        ["Intro", "Ch1 body", "Ch2 body"],
        toc=[[1, "Chapter 1", 2], [1, "Chapter 2", 3]],
        title="Sample",
    )
    decoded = PyMuPDFDecodingEngine().decode(pdf.read_bytes(), locator=str(pdf))

    assert decoded.page_count == 3
    assert [text.strip() for text in decoded.page_texts] == ["Intro", "Ch1 body", "Ch2 body"]
    assert [(n.title, n.page) for n in decoded.outline] == [("Chapter 1", 2), ("Chapter 2", 3)]
    assert decoded.metadata["title"] == "Sample"
    assert decoded.issues == []


def test_library_loads_real_pdf(tmp_path):
    pdf = make_pdf(
        tmp_path / "sample.pdf",
        ["Intro", "Ch1 body", "Ch2 body"],
        toc=[[1, "Chapter 1", 2], [1, "Chapter 2", 3]],
    )
    library = DocumentLibrary(engine=PyMuPDFDecodingEngine(), fetcher=SourceFetcher())

    result = library.load(str(pdf))

    assert result.id == "sample.pdf"
    assert result.page_count == 3
    assert library.store.get("sample.pdf").body == "Intro\n\n## Chapter 1\n\nCh1 body\n\n## Chapter 2\n\nCh2 body"
    assert library.section("sample.pdf", "chapter 1").content == "## Chapter 1\n\nCh1 body"


def test_pdf_without_outline(tmp_path):
    pdf = make_pdf(tmp_path / "plain.pdf", ["First", "Second"])
    library = DocumentLibrary(engine=PyMuPDFDecodingEngine(), fetcher=SourceFetcher())

    result = library.load(str(pdf))

    assert result.outline == ""
    assert library.outline("plain.pdf") == ""
    assert library.store.get("plain.pdf").body == "First\n\nSecond"


def test_invalid_bytes_fail_to_decode():
    with pytest.raises(DocumentLoadError):
        PyMuPDFDecodingEngine().decode(b"this is not a pdf", locator="junk.pdf")


def test_missing_file_fails_to_load(tmp_path):
    library = DocumentLibrary(engine=PyMuPDFDecodingEngine(), fetcher=SourceFetcher())
    with pytest.raises(DocumentLoadError):
        library.load(str(tmp_path / "missing.pdf"))
    assert len(library.store) == 0


def test_expired_deadline_stops_decoding(tmp_path):
    pdf = make_pdf(tmp_path / "slow.pdf", ["one", "two"])
    expired = Deadline(timeout=1.0, expires_at=time.monotonic() - 1)

    with pytest.raises(FetchTimeout):
        PyMuPDFDecodingEngine().decode(pdf.read_bytes(), deadline=expired, locator=str(pdf))
