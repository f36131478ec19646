from __future__ import annotations

import os
from typing import List, Mapping, Tuple
from urllib.parse import urlparse

URL_SCHEMES = ("http://", "https://")
FALLBACK_ID = "unknown.pdf"


def is_url(locator: str) -> bool:
    return locator.startswith(URL_SCHEMES)


def normalize_locator(locator: str) -> str:
    if is_url(locator):
        return locator
    return os.path.abspath(os.path.expanduser(locator))


def _split_locator(locator: str) -> Tuple[List[str], str]:
    if is_url(locator):
        try:
            url_path = urlparse(locator).path
        except ValueError:
            url_path = locator
        return [p for p in url_path.split("/") if p], "/"
    normalized = normalize_locator(locator)
    return [p for p in normalized.split(os.sep) if p], os.sep


def assign_document_id(locator: str, existing: Mapping[str, str]) -> str:
    """
    Derive a short id for `locator` given the registry's id -> normalized
    locator mapping.

    The bare file name is preferred. When it is taken by a different source,
    trailing path segments are added one at a time until the id is free or
    already belongs to this locator, so reloading a source keeps its id.
    If every suffix is owned by another source the full locator is used.
    """
    normalized = normalize_locator(locator)
    parts, separator = _split_locator(locator)
    if not parts:
        return FALLBACK_ID

    if existing.get(parts[-1]) == normalized:
        return parts[-1]

    for i in range(1, len(parts) + 1):
        candidate = separator.join(parts[-i:])
        owner = existing.get(candidate)
        if owner is None or owner == normalized:
            return candidate

    return normalized
