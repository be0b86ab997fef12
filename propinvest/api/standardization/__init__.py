"""
Field Standardization Package

This package contains the components that turn loosely-structured source
tables into canonical property records: header resolution, field estimation,
row transformation, CSV parsing and export.
"""

from .field_mapper import FieldMapper, ColumnMapping, find_best_match
from .field_estimator import FieldEstimator
from .data_processor import CSVProcessor
from .data_transformer import DataTransformer, BatchResult
from .pipeline import IngestionPipeline
from .exporter import EXPORT_COLUMNS, export_csv

__all__ = [
    "FieldMapper",
    "ColumnMapping",
    "find_best_match",
    "FieldEstimator",
    "CSVProcessor",
    "DataTransformer",
    "BatchResult",
    "IngestionPipeline",
    "EXPORT_COLUMNS",
    "export_csv",
]
