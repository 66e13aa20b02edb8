"""Row normalization.

Turns tokenized sheet rows into :class:`TownRecord` values. Column
positions are fixed by :class:`ColumnMap`; defaulting for optional
fields lives here and nowhere else.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from townsync.config import ColumnMap, RecordDefaults
from townsync.exceptions import RowParseError
from townsync.ingestion.csv_text import parse_csv_text
from townsync.models.town import TownRecord

_logger = logging.getLogger(__name__)


class SkippedRow(BaseModel):
    """A data row that did not make it into the batch."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., description="1-based index of the data row (header excluded)")
    reason: str


class NormalizeResult(BaseModel):
    """Outcome of normalizing one batch of rows."""

    model_config = ConfigDict(frozen=True)

    records: tuple[TownRecord, ...] = ()
    skipped_rows: tuple[SkippedRow, ...] = ()

    @property
    def accepted(self) -> int:
        return len(self.records)

    @property
    def skipped(self) -> int:
        return len(self.skipped_rows)


def cell(row: Sequence[str], index: int) -> str:
    """Return the stripped cell at *index*, or ``""`` when the row is too short."""
    if 0 <= index < len(row):
        return row[index].strip()
    return ""


def parse_coordinate(value: str) -> float | None:
    """Parse a decimal-comma or decimal-point coordinate.

    Returns ``None`` for empty, non-numeric or non-finite input.
    """
    text = value.strip().replace(",", ".", 1)
    if not text:
        return None
    try:
        result = float(text)
    except ValueError:
        return None
    if not math.isfinite(result):
        return None
    return result


def _log_header(header: Sequence[str], columns: ColumnMap) -> None:
    if not _logger.isEnabledFor(logging.DEBUG):
        return
    mapping: dict[str, Any] = {}
    for field_name, index in columns.as_dict().items():
        label = header[index].strip().lower() if index < len(header) else "N/A"
        mapping[field_name] = f"{index} ({label})"
    _logger.debug("Sheet column mapping: %s", mapping)


def normalize_row(
    row: Sequence[str],
    *,
    columns: ColumnMap,
    defaults: RecordDefaults,
    line: int = 0,
) -> TownRecord:
    """Build a record from one data row.

    Raises
    ------
    RowParseError
        If the name or a coordinate is missing or not a finite number.
    """
    name = cell(row, columns.name)
    latitude_text = cell(row, columns.latitude)
    longitude_text = cell(row, columns.longitude)

    if not name:
        raise RowParseError("missing name", line=line)
    if not latitude_text or not longitude_text:
        raise RowParseError(f"missing coordinates for {name!r}", line=line)

    latitude = parse_coordinate(latitude_text)
    longitude = parse_coordinate(longitude_text)
    if latitude is None or longitude is None:
        raise RowParseError(
            f"invalid coordinates for {name!r}: lat={latitude_text!r} lon={longitude_text!r}",
            line=line,
        )

    return TownRecord(
        name=name,
        latitude=latitude,
        longitude=longitude,
        security_advisory_local=cell(row, columns.security_advisory_local) or defaults.security_advisory_local,
        security_advisory_foreign=cell(row, columns.security_advisory_foreign) or defaults.security_advisory_foreign,
        distance_label=cell(row, columns.distance_label) or defaults.distance_label,
        route_url=cell(row, columns.route_url) or defaults.route_url,
        tourism_url=cell(row, columns.tourism_url) or defaults.tourism_url,
    )


def normalize(
    rows: Sequence[Sequence[str]],
    columns: ColumnMap | None = None,
    defaults: RecordDefaults | None = None,
) -> NormalizeResult:
    """Normalize tokenized rows (header first) into a batch of records.

    A bad row is skipped and recorded on the result; it never aborts the
    rest of the batch.
    """
    columns = columns or ColumnMap()
    defaults = defaults or RecordDefaults()

    if not rows:
        return NormalizeResult()

    _log_header(rows[0], columns)

    records: list[TownRecord] = []
    skipped: list[SkippedRow] = []
    for line, row in enumerate(rows[1:], start=1):
        try:
            record = normalize_row(row, columns=columns, defaults=defaults, line=line)
        except RowParseError as exc:
            _logger.debug("Skipping sheet row %d: %s", exc.line, exc.reason)
            skipped.append(SkippedRow(line=exc.line, reason=exc.reason))
            continue
        records.append(record)

    _logger.debug("Normalized %d town(s), skipped %d row(s)", len(records), len(skipped))
    return NormalizeResult(records=tuple(records), skipped_rows=tuple(skipped))


def ingest_csv(
    text: str,
    columns: ColumnMap | None = None,
    defaults: RecordDefaults | None = None,
) -> NormalizeResult:
    """Tokenize and normalize a CSV export in one step."""
    return normalize(parse_csv_text(text), columns=columns, defaults=defaults)
