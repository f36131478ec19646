from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

from .errors import DocumentNotFound
from .identifiers import assign_document_id, normalize_locator
from .models import Document, RegistryEntry

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    In-memory registry of loaded documents keyed by id.

    Writers serialize on a lock and publish a fresh mapping; readers use
    whichever mapping is current without locking, so they never observe a
    half-applied load or unload. Documents are frozen, so no copies are
    handed out.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._documents: Dict[str, Document] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._documents

    def get(self, doc_id: str) -> Document:
        document = self._documents.get(doc_id)
        if document is None:
            raise DocumentNotFound(doc_id)
        return document

    def list_documents(self) -> List[Document]:
        return list(self._documents.values())

    def entries(self) -> List[RegistryEntry]:
        return [RegistryEntry(id=d.id, path=d.locator) for d in self._documents.values()]

    def register(self, locator: str, build: Callable[[str], Document]) -> Document:
        """
        Assign an id to `locator` and insert the document `build(id)` returns.
        Both happen under the writer lock so two concurrent loads cannot
        claim the same id.
        """
        with self._lock:
            known = {doc_id: normalize_locator(d.locator) for doc_id, d in self._documents.items()}
            doc_id = assign_document_id(locator, known)
            document = build(doc_id)
            updated = dict(self._documents)
            replaced = doc_id in updated
            updated[doc_id] = document
            self._documents = updated
        logger.info("%s document %s (%s pages)", "Reloaded" if replaced else "Registered", doc_id, document.page_count)
        return document

    def remove(self, doc_id: str) -> bool:
        with self._lock:
            if doc_id not in self._documents:
                return False
            updated = dict(self._documents)
            del updated[doc_id]
            self._documents = updated
        logger.info("Removed document %s", doc_id)
        return True
