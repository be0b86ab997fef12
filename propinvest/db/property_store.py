"""
In-memory canonical property collection
"""

import threading
from datetime import datetime, timezone
from typing import List, Optional

import structlog

from propinvest.api.standardization.data_transformer import BatchResult
from propinvest.models.property import CanonicalProperty

logger = structlog.get_logger(__name__)


class PropertyStore:
    """
    Holds the records of the most recent successful ingestion.

    A new batch replaces the previous collection wholesale; readers always
    see either the old or the new collection, never a mix. A batch that
    failed as a whole leaves the published collection untouched.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._properties: List[CanonicalProperty] = []
        self._last_batch: Optional[BatchResult] = None
        self._last_error: Optional[str] = None
        self._updated_at: Optional[datetime] = None

    def replace(self, batch: BatchResult) -> bool:
        """Publish a completed batch; returns False when the batch failed as a whole"""
        with self._lock:
            if not batch.succeeded:
                self._last_error = batch.batch_error
                logger.warning("Batch not published", batch_error=batch.batch_error)
                return False
            self._properties = list(batch.records)
            self._last_batch = batch
            self._last_error = None
            self._updated_at = datetime.now(timezone.utc)
        logger.info("Property collection replaced", total=len(batch.records))
        return True

    def all(self) -> List[CanonicalProperty]:
        with self._lock:
            return list(self._properties)

    def get(self, property_id: str) -> Optional[CanonicalProperty]:
        with self._lock:
            for prop in self._properties:
                if prop.id == property_id:
                    return prop
        return None

    @property
    def last_batch(self) -> Optional[BatchResult]:
        return self._last_batch

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def updated_at(self) -> Optional[datetime]:
        return self._updated_at

    def clear(self) -> None:
        with self._lock:
            self._properties = []
            self._last_batch = None
            self._last_error = None
            self._updated_at = None


property_store = PropertyStore()


def get_property_store() -> PropertyStore:
    """FastAPI dependency for the shared store"""
    return property_store
