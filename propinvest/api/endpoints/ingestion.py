"""
Ingestion Endpoints - upload a source table and inspect the last batch report
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from propinvest.core.config import settings
from propinvest.core.exceptions import (
    bad_request_exception,
    not_found_exception,
    payload_too_large_exception,
)
from propinvest.core.logging import get_logger
from propinvest.api.standardization.data_transformer import BatchResult
from propinvest.api.standardization.pipeline import IngestionPipeline
from propinvest.db.property_store import PropertyStore, get_property_store
from propinvest.models.property import CanonicalProperty, TransformationError

logger = get_logger(__name__)
router = APIRouter()

DELIMITER_ALIASES = {"tab": "\t", "\\t": "\t", "comma": ",", "pipe": "|", "semicolon": ";"}


class BatchReport(BaseModel):
    """Counts, per-row errors, column mapping and summary of one ingestion"""
    rows_in: int
    rows_out: int
    error_count: int
    errors: List[TransformationError]
    column_mapping: Dict[str, Optional[str]]
    column_suggestions: Dict[str, str]
    warnings: List[str]
    summary: str
    properties: List[CanonicalProperty]

    @classmethod
    def from_batch(cls, batch: BatchResult) -> "BatchReport":
        return cls(
            rows_in=batch.total_rows,
            rows_out=len(batch.records),
            error_count=len(batch.errors),
            errors=batch.errors,
            column_mapping=batch.column_mapping,
            column_suggestions=batch.column_suggestions,
            warnings=batch.warnings,
            summary=batch.summary,
            properties=batch.records,
        )


def _resolve_delimiter(delimiter: Optional[str]) -> Optional[str]:
    if not delimiter:
        return settings.DEFAULT_DELIMITER
    return DELIMITER_ALIASES.get(delimiter.lower(), delimiter)


@router.post("/csv", response_model=BatchReport)
async def ingest_csv(
    request: Request,
    delimiter: Optional[str] = Query(None, description="Column delimiter; sniffed when omitted"),
    has_header: bool = Query(True, description="First row holds the field names"),
    store: PropertyStore = Depends(get_property_store)
):
    """Transform a raw CSV body and publish the resulting records."""
    body = await request.body()
    if len(body) > settings.MAX_UPLOAD_BYTES:
        raise payload_too_large_exception(
            f"Upload exceeds {settings.MAX_UPLOAD_BYTES} bytes"
        )

    logger.info("CSV ingestion requested", bytes=len(body), delimiter=delimiter, has_header=has_header)

    # Parsing and transformation are synchronous, keep them off the event loop
    batch = await run_in_threadpool(
        IngestionPipeline().ingest,
        body,
        delimiter=_resolve_delimiter(delimiter),
        has_header=has_header
    )
    store.replace(batch)

    if not batch.succeeded:
        raise bad_request_exception(batch.batch_error)

    return BatchReport.from_batch(batch)


@router.get("/last", response_model=BatchReport)
async def last_ingestion(store: PropertyStore = Depends(get_property_store)):
    """Report of the most recent successful ingestion."""
    batch = store.last_batch
    if batch is None:
        raise not_found_exception("No successful ingestion yet")
    return BatchReport.from_batch(batch)
