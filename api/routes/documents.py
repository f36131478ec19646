from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from pdf_navigator.library import DocumentLibrary

router = APIRouter(prefix="/documents", tags=["documents"])


class LoadRequest(BaseModel):
    path: str = Field(..., description="Path to the PDF file or an http(s) URL")
    timeout: Optional[float] = Field(None, gt=0, description="Seconds allowed for fetching and decoding")


def _get_library(request: Request) -> DocumentLibrary:
    return request.app.state.library


@router.post("")
def load_document(payload: LoadRequest, request: Request):
    if not payload.path.strip():
        raise HTTPException(status_code=400, detail="Path must not be empty")
    result = _get_library(request).load(payload.path, timeout=payload.timeout)
    return {"id": result.id, "page_count": result.page_count, "outline": result.outline}


@router.get("")
def list_documents(request: Request):
    return [
        {"id": d.id, "path": d.path, "page_count": d.page_count}
        for d in _get_library(request).list_documents()
    ]


# Ids may contain "/", so every route takes the id through the path converter
# and the suffixed routes are declared before the bare one.
@router.get("/{doc_id:path}/outline")
def get_outline(doc_id: str, request: Request):
    outline = _get_library(request).outline(doc_id)
    return {"id": doc_id, "has_outline": bool(outline), "outline": outline}


@router.get("/{doc_id:path}/section")
def get_section(
    doc_id: str,
    request: Request,
    title: str = Query(..., min_length=1),
    page: int = Query(1),
    char_budget: Optional[int] = Query(None, ge=1),
):
    section = _get_library(request).section(doc_id, title, page=page, char_budget=char_budget)
    return {
        "page": section.page,
        "total_pages": section.total_pages,
        "content": section.content,
        "section": section.section,
    }


@router.get("/{doc_id:path}/search")
def search_document(
    doc_id: str,
    request: Request,
    query: str = Query(..., min_length=1),
    case_sensitive: bool = False,
    regex: bool = False,
    max_results: Optional[int] = Query(None, ge=1),
    context_chars: Optional[int] = Query(None, ge=0),
):
    groups = _get_library(request).search(
        doc_id,
        query,
        case_sensitive=case_sensitive,
        regex=regex,
        max_results=max_results,
        context_chars=context_chars,
    )
    return [
        {"section": g.section, "matches": [{"text": m.text, "context": m.context} for m in g.matches]}
        for g in groups
    ]


@router.get("/{doc_id:path}")
def get_document(doc_id: str, request: Request):
    info = _get_library(request).info(doc_id)
    return {
        "id": info.id,
        "path": info.path,
        "page_count": info.page_count,
        "metadata": info.metadata,
        "issues": [asdict(issue) for issue in info.issues],
    }


@router.delete("/{doc_id:path}")
def unload_document(doc_id: str, request: Request):
    if not _get_library(request).unload(doc_id):
        raise HTTPException(status_code=404, detail=f"Document not found: {doc_id}")
    return {"id": doc_id, "unloaded": True}
