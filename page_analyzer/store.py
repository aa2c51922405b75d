"""Record store for completed analyses."""
from __future__ import annotations

import logging
import threading
from dataclasses import asdict
from typing import Generator, Mapping

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import get_session
from .models import AnalysisRecord
from .schemas import HEADING_LEVELS, AnalysisResult

logger = logging.getLogger(__name__)

# The default in-memory database shares one connection between threads.
_STORE_LOCK = threading.RLock()

UPDATABLE_FIELDS = frozenset(
    {
        "page_title",
        "html_version",
        "heading_counts",
        "external_link_count",
        "internal_link_count",
        "inaccessible_link_count",
        "is_login",
    }
)


class RecordNotFound(LookupError):
    def __init__(self, record_id: int) -> None:
        self.record_id = record_id
        super().__init__(f"No analysis record with id {record_id}")


class RecordInvalid(ValueError):
    """Raised when an update would break the record's link-count invariant."""


class ResultStore:
    """Owns analysis records and their identifiers.

    IDs come from the database's autoincrement counter, so they increase
    monotonically and are never reused. Every operation commits before
    returning.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_records(self) -> list[AnalysisRecord]:
        with _STORE_LOCK:
            stmt = select(AnalysisRecord).order_by(AnalysisRecord.id)
            return list(self._session.execute(stmt).scalars().all())

    def get(self, record_id: int) -> AnalysisRecord:
        with _STORE_LOCK:
            record = self._session.get(AnalysisRecord, record_id)
            if record is None:
                raise RecordNotFound(record_id)
            return record

    def add(self, result: AnalysisResult) -> AnalysisRecord:
        with _STORE_LOCK:
            record = AnalysisRecord(**asdict(result))
            self._session.add(record)
            self._session.commit()
            logger.info("Stored analysis of %s as record %s", record.url, record.id)
            return record

    def update(self, record_id: int, changes: Mapping[str, object]) -> AnalysisRecord:
        with _STORE_LOCK:
            unknown = sorted(set(changes) - UPDATABLE_FIELDS)
            if unknown:
                raise RecordInvalid(f"Fields cannot be updated: {', '.join(unknown)}")

            record = self.get(record_id)
            for name, value in changes.items():
                if value is None:
                    continue
                if name == "heading_counts":
                    # Partial mappings only touch the levels they name.
                    value = {**dict.fromkeys(HEADING_LEVELS, 0), **(record.heading_counts or {}), **value}
                setattr(record, name, value)

            if record.inaccessible_link_count > record.external_link_count:
                self._session.rollback()
                raise RecordInvalid("inaccessible cannot exceed externallink")

            self._session.commit()
            logger.info("Updated record %s (%s)", record_id, ", ".join(sorted(changes)))
            return record

    def delete(self, record_id: int) -> None:
        with _STORE_LOCK:
            record = self.get(record_id)
            self._session.delete(record)
            self._session.commit()
            logger.info("Deleted record %s", record_id)


def get_store(session: Session = Depends(get_session)) -> Generator[ResultStore, None, None]:
    """FastAPI dependency that yields a store bound to a request session."""
    yield ResultStore(session)
