"""
Data Processor - delimited-text parsing into headers and row mappings
"""

import csv
from io import StringIO
from typing import Any, Dict, List, Optional, Union

import structlog
from pydantic import BaseModel

from propinvest.core.exceptions import IngestionException
from .field_mapper import normalize_header

logger = structlog.get_logger(__name__)

SUPPORTED_DELIMITERS = [",", "\t", "|", ";"]
SNIFF_SAMPLE_SIZE = 8192


def _is_blank_line(row: List[str]) -> bool:
    # Delimiter-only rows such as ",,," are kept so they surface as row errors
    return not row or (len(row) == 1 and not row[0].strip())


class ParsedTable(BaseModel):
    """Headers in source order and one header->cell mapping per data row"""
    headers: List[str]
    rows: List[Dict[str, str]]
    delimiter: str
    warnings: List[str] = []


class CSVProcessor:
    """CSV data processor with delimiter detection"""

    def __init__(
        self,
        delimiter: Optional[str] = None,
        has_header: bool = True
    ):
        if delimiter is not None and len(delimiter) != 1:
            raise IngestionException(
                f"Delimiter must be a single character, got {delimiter!r}",
                error_code="INVALID_DELIMITER"
            )
        self.delimiter = delimiter
        self.has_header = has_header

    def process(self, data: Union[bytes, str]) -> ParsedTable:
        """
        Parse raw delimited text

        Args:
            data: Raw bytes (UTF-8, optional BOM) or text

        Returns:
            ParsedTable with de-duplicated headers and padded rows

        Raises:
            IngestionException: empty input or no usable header row
        """
        text = self._decode(data)
        if not text.strip():
            raise IngestionException("No data found in the CSV file", error_code="EMPTY_INPUT")

        delimiter = self.delimiter or self.detect_delimiter(text)
        reader = csv.reader(StringIO(text), delimiter=delimiter)
        try:
            rows = [row for row in reader if not _is_blank_line(row)]
        except csv.Error as e:
            raise IngestionException(
                f"CSV parsing error: {str(e)}",
                error_code="MALFORMED_CSV"
            )

        if not rows:
            raise IngestionException("No data found in the CSV file", error_code="EMPTY_INPUT")

        if self.has_header:
            if not any(cell.strip() for cell in rows[0]):
                raise IngestionException("CSV header row is empty", error_code="MISSING_HEADER")
            header = self._clean_headers(rows[0])
            data_rows = rows[1:]
        else:
            width = max(len(row) for row in rows)
            header = [f"column_{i + 1}" for i in range(width)]
            data_rows = rows

        warnings = []
        records = []
        ragged = 0
        for row in data_rows:
            if len(row) != len(header):
                ragged += 1
            cells = (row + [""] * len(header))[:len(header)]
            records.append(dict(zip(header, cells)))

        if ragged:
            warnings.append(f"{ragged} rows did not match the header width and were padded or truncated")

        logger.info("CSV parsed",
                   delimiter=delimiter,
                   columns=len(header),
                   rows=len(records),
                   ragged_rows=ragged)

        return ParsedTable(headers=header, rows=records, delimiter=delimiter, warnings=warnings)

    def _decode(self, data: Union[bytes, str]) -> str:
        if isinstance(data, bytes):
            try:
                return data.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise IngestionException(
                    "CSV content is not valid UTF-8",
                    error_code="UNDECODABLE_INPUT",
                    details={"position": e.start}
                )
        return data.lstrip("\ufeff")

    def detect_delimiter(self, text: str) -> str:
        """Pick the delimiter the sample suggests, comma when unsure"""
        sample = text[:SNIFF_SAMPLE_SIZE]
        lines = sample.splitlines()
        first_line = lines[0] if lines else ""
        try:
            dialect = csv.Sniffer().sniff(sample, delimiters="".join(SUPPORTED_DELIMITERS))
            if dialect.delimiter in first_line:
                return dialect.delimiter
        except csv.Error:
            pass

        # Fall back to the delimiter most frequent in the header line
        counts = {d: first_line.count(d) for d in SUPPORTED_DELIMITERS}
        best = max(SUPPORTED_DELIMITERS, key=lambda d: counts[d])
        return best if counts[best] > 0 else ","

    def _clean_headers(self, raw_headers: List[str]) -> List[str]:
        """Trim headers and suffix duplicates so the first occurrence keeps its name"""
        names = [raw.strip().strip("\"'").strip() for raw in raw_headers]
        taken = {normalize_header(name) for name in names}
        headers: List[str] = []
        seen: Dict[str, int] = {}
        for name in names:
            key = normalize_header(name)
            if key in seen:
                # Skip suffixes that another source header already uses
                suffix = seen[key] + 1
                while normalize_header(f"{name}.{suffix}") in taken:
                    suffix += 1
                seen[key] = suffix
                name = f"{name}.{suffix}"
                taken.add(normalize_header(name))
            else:
                seen[key] = 0
            headers.append(name)
        return headers

    def validate(self, data: Any) -> bool:
        """Check that the data parses into a header and at least one row"""
        try:
            table = self.process(data)
        except IngestionException:
            return False
        return bool(table.rows)
