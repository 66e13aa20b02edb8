"""Ingestion layer.

This package turns the raw CSV export of the tourism sheet into validated
town records: a tokenizer (``csv_text``) followed by a fixed-position
row normalizer (``normalize``).
"""

from townsync.ingestion.csv_text import parse_csv_text
from townsync.ingestion.normalize import NormalizeResult, SkippedRow, ingest_csv, normalize

__all__ = [
    "NormalizeResult",
    "SkippedRow",
    "ingest_csv",
    "normalize",
    "parse_csv_text",
]
