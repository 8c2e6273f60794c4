"""Repository record cache.

Records are keyed by full name (case-insensitive) and additionally indexed
by GitHub id so derived endpoints can address them. There is no expiry: a
cached record is served until the store itself is discarded.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from sqlalchemy.orm import Session

from repo_analyzer.models.record import RepositoryRecord
from repo_analyzer.models.record_row import RepositoryRecordRow

logger = logging.getLogger(__name__)


def record_key(full_name: str) -> str:
    return full_name.strip().lower()


class RecordStore(Protocol):
    def get(self, full_name: str) -> Optional[RepositoryRecord]: ...

    def get_by_id(self, record_id: str) -> Optional[RepositoryRecord]: ...

    def put(self, record: RepositoryRecord) -> None: ...


class InMemoryRecordStore:
    """Process-local store backed by two dicts."""

    def __init__(self) -> None:
        self._by_name: dict[str, RepositoryRecord] = {}
        self._by_id: dict[str, RepositoryRecord] = {}

    def get(self, full_name: str) -> Optional[RepositoryRecord]:
        return self._by_name.get(record_key(full_name))

    def get_by_id(self, record_id: str) -> Optional[RepositoryRecord]:
        return self._by_id.get(record_id)

    def put(self, record: RepositoryRecord) -> None:
        self._by_name[record_key(record.full_name)] = record
        self._by_id[record.id] = record

    def clear(self) -> None:
        self._by_name.clear()
        self._by_id.clear()

    def __len__(self) -> int:
        return len(self._by_name)


class SQLAlchemyRecordStore:
    """Durable store: one `repository_records` row per full name."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, full_name: str) -> Optional[RepositoryRecord]:
        db = self._session_factory()
        try:
            row = db.query(RepositoryRecordRow).filter_by(full_name_key=record_key(full_name)).first()
            return self._to_record(row)
        finally:
            db.close()

    def get_by_id(self, record_id: str) -> Optional[RepositoryRecord]:
        db = self._session_factory()
        try:
            row = db.query(RepositoryRecordRow).filter_by(id=record_id).first()
            return self._to_record(row)
        finally:
            db.close()

    def put(self, record: RepositoryRecord) -> None:
        db = self._session_factory()
        try:
            key = record_key(record.full_name)
            row = db.query(RepositoryRecordRow).filter_by(full_name_key=key).first()
            if row is not None and row.id != record.id:
                # Same name now points at a different repository (renamed or recreated)
                db.delete(row)
                db.flush()
                row = None
            if row is None:
                row = db.query(RepositoryRecordRow).filter_by(id=record.id).first()
            if row is None:
                row = RepositoryRecordRow(id=record.id)
                db.add(row)
            row.full_name_key = key
            row.full_name = record.full_name
            row.payload = record.model_dump(mode="json")
            db.commit()
        except Exception:
            db.rollback()
            logger.error(f"Failed to persist repository record {record.full_name}", exc_info=True)
            raise
        finally:
            db.close()

    @staticmethod
    def _to_record(row: Optional[RepositoryRecordRow]) -> Optional[RepositoryRecord]:
        if row is None:
            return None
        return RepositoryRecord.model_validate(row.payload)


def build_record_store(url: Optional[str]) -> RecordStore:
    if not url:
        return InMemoryRecordStore()

    from repo_analyzer.config.database import build_session_factory

    logger.info("Using SQL record store")
    return SQLAlchemyRecordStore(build_session_factory(url))
