from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List

from sqlalchemy import Column, Integer, String, create_engine, delete, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .models import RegistryEntry

logger = logging.getLogger(__name__)

Base = declarative_base()


class RegistryEntryModel(Base):
    __tablename__ = "registry_entries"
    position = Column(Integer, primary_key=True)
    id = Column(String, nullable=False)
    path = Column(String, nullable=False)


class DocumentRegistry:
    """
    Persistence boundary for the list of loaded sources. Only `{id, path}`
    pairs are stored; document bodies are rebuilt by replaying `load`.
    """

    def read_entries(self) -> List[RegistryEntry]:
        raise NotImplementedError

    def write_entries(self, entries: Iterable[RegistryEntry]) -> None:
        raise NotImplementedError


class NullDocumentRegistry(DocumentRegistry):
    """
    Keeps nothing. Used for ephemeral libraries and tests.
    """

    def read_entries(self) -> List[RegistryEntry]:
        return []

    def write_entries(self, entries: Iterable[RegistryEntry]) -> None:
        return None


class JsonDocumentRegistry(DocumentRegistry):
    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def read_entries(self) -> List[RegistryEntry]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        entries: List[RegistryEntry] = []
        for item in raw if isinstance(raw, list) else []:
            if isinstance(item, dict) and item.get("id") and item.get("path"):
                entries.append(RegistryEntry(id=str(item["id"]), path=str(item["path"])))
            else:
                logger.warning("Skipping malformed registry entry in %s: %r", self.path, item)
        return entries

    def write_entries(self, entries: Iterable[RegistryEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [{"id": e.id, "path": e.path} for e in entries]
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)


class SqlAlchemyDocumentRegistry(DocumentRegistry):
    """
    SQL-backed registry using SQLAlchemy. Works with SQLite/Postgres URLs.
    """

    def __init__(self, database_url: str):
        self.engine = create_engine(database_url, future=True)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False, future=True)

    def _session(self) -> Session:
        return self.SessionLocal()

    def read_entries(self) -> List[RegistryEntry]:
        with self._session() as session:
            stmt = select(RegistryEntryModel).order_by(RegistryEntryModel.position)
            models = session.execute(stmt).scalars().all()
            return [RegistryEntry(id=m.id, path=m.path) for m in models]

    def write_entries(self, entries: Iterable[RegistryEntry]) -> None:
        with self._session() as session:
            session.execute(delete(RegistryEntryModel))
            for position, entry in enumerate(entries):
                session.add(RegistryEntryModel(position=position, id=entry.id, path=entry.path))
            session.commit()
