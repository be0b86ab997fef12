"""
Ingestion pipeline - raw delimited bytes in, BatchResult out
"""

from typing import Optional, Union

import structlog

from propinvest.core.exceptions import IngestionException
from .data_processor import CSVProcessor
from .data_transformer import BatchResult, DataTransformer

logger = structlog.get_logger(__name__)


class IngestionPipeline:
    """Parses a source table and transforms it as one synchronous batch"""

    def __init__(self, transformer: Optional[DataTransformer] = None):
        self.transformer = transformer or DataTransformer()

    def ingest(
        self,
        content: Union[bytes, str],
        delimiter: Optional[str] = None,
        has_header: bool = True
    ) -> BatchResult:
        """
        Run a full ingestion pass

        Batch-level failures (empty input, unreadable structure) come back as
        a BatchResult with batch_error set and no records.
        """
        try:
            table = CSVProcessor(delimiter=delimiter, has_header=has_header).process(content)
        except IngestionException as e:
            logger.error("Batch rejected", error=e.message, error_code=e.error_code)
            return BatchResult(
                batch_error=e.message,
                summary=f"TRANSFORMATION FAILED\n\n{e.message}",
            )

        return self.transformer.transform(table.headers, table.rows, warnings=table.warnings)
