from __future__ import annotations

import logging

import pytest

from townsync.config import ColumnMap, RecordDefaults
from townsync.exceptions import RowParseError
from townsync.ingestion.normalize import cell, ingest_csv, normalize, normalize_row, parse_coordinate

SIMPLE_COLUMNS = ColumnMap(
    name=0,
    latitude=1,
    longitude=2,
    security_advisory_local=3,
    distance_label=4,
    route_url=5,
    tourism_url=6,
    security_advisory_foreign=7,
)

SHEET_HEADER = "#,Pueblo,Latitud,Longitud,Seguridad,Distancia,Ruta,Link Turismo,Security Tips"


def test_ajijic_example_uses_defaults() -> None:
    result = ingest_csv("Name,Lat,Lon\nAjijic,20.3,-103.25\n", columns=SIMPLE_COLUMNS)

    assert result.accepted == 1
    assert result.skipped == 0
    record = result.records[0]
    assert record.name == "Ajijic"
    assert record.latitude == pytest.approx(20.3)
    assert record.longitude == pytest.approx(-103.25)
    assert record.distance_label == "N/A"
    assert record.route_url == "#"
    assert record.tourism_url == "#"
    assert record.security_advisory_local == "Información no disponible"
    assert record.security_advisory_foreign == "Information not available"


def test_row_missing_latitude_is_dropped() -> None:
    text = "Name,Lat,Lon\nAjijic,20.3,-103.25\nTequila,,-103.8\n"
    result = ingest_csv(text, columns=SIMPLE_COLUMNS)

    assert [r.name for r in result.records] == ["Ajijic"]
    assert result.skipped == 1
    assert result.skipped_rows[0].line == 2
    assert "Tequila" in result.skipped_rows[0].reason


def test_default_columns_follow_published_sheet_layout() -> None:
    text = (
        f"{SHEET_HEADER}\n"
        '1,Tapalpa,"19,9446","-103,7589","Evite caminar de noche",130 km,'
        "https://maps.example/tapalpa,https://turismo.example/tapalpa,Avoid walking at night\n"
    )
    record = ingest_csv(text).records[0]

    assert record.name == "Tapalpa"
    assert record.latitude == pytest.approx(19.9446)
    assert record.longitude == pytest.approx(-103.7589)
    assert record.security_advisory_local == "Evite caminar de noche"
    assert record.security_advisory_foreign == "Avoid walking at night"
    assert record.distance_label == "130 km"
    assert record.route_url == "https://maps.example/tapalpa"
    assert record.tourism_url == "https://turismo.example/tapalpa"
    assert record.has_route_url is True


def test_values_are_trimmed() -> None:
    rows = [["h"], ["  Mascota ", " 20.52 ", " -104.79 ", "   ", " 180 km "]]
    record = normalize(rows, columns=SIMPLE_COLUMNS).records[0]

    assert record.name == "Mascota"
    assert record.distance_label == "180 km"
    assert record.security_advisory_local == "Información no disponible"


def test_short_row_uses_empty_strings_for_missing_columns() -> None:
    result = normalize([["h"], ["1", "Sayula", "19.88", "-103.6"]])
    assert result.accepted == 1
    assert result.records[0].tourism_url == "#"
    assert result.records[0].security_advisory_foreign == "Information not available"


@pytest.mark.parametrize(
    "row",
    [
        ["", "20.1", "-103.1"],
        ["Cocula", "", "-103.1"],
        ["Cocula", "20.1", ""],
        ["Cocula", "north", "-103.1"],
        ["Cocula", "20.1", "inf"],
        ["Cocula", "nan", "-103.1"],
    ],
)
def test_invalid_rows_are_skipped_without_aborting_batch(row: list[str]) -> None:
    rows = [["Name", "Lat", "Lon"], row, ["Tequila", "20.88", "-103.84"]]
    result = normalize(rows, columns=SIMPLE_COLUMNS)

    assert [r.name for r in result.records] == ["Tequila"]
    assert result.skipped == 1


def test_normalize_row_raises_row_parse_error() -> None:
    with pytest.raises(RowParseError) as excinfo:
        normalize_row(["Cocula", "x", "y"], columns=SIMPLE_COLUMNS, defaults=RecordDefaults(), line=7)
    assert excinfo.value.line == 7


def test_normalization_is_idempotent() -> None:
    row = ["Mazamitla", "19,915", "-103.02", "Precaución en carretera", "125 km", "", "", ""]
    first = normalize_row(row, columns=SIMPLE_COLUMNS, defaults=RecordDefaults())
    second = normalize_row(row, columns=SIMPLE_COLUMNS, defaults=RecordDefaults())

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_custom_defaults_are_applied() -> None:
    defaults = RecordDefaults(distance_label="?", route_url="", tourism_url="#")
    record = normalize([["h"], ["Cocula", "20.36", "-103.82"]], columns=SIMPLE_COLUMNS, defaults=defaults).records[0]

    assert record.distance_label == "?"
    # An empty default URL still collapses to the sentinel.
    assert record.route_url == "#"


def test_header_only_and_empty_input() -> None:
    assert normalize([]).accepted == 0
    assert normalize([["Name", "Lat", "Lon"]]).accepted == 0
    assert ingest_csv("Name,Lat,Lon\n\n\n").accepted == 0


def test_header_mapping_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="townsync.ingestion.normalize")
    ingest_csv(f"{SHEET_HEADER}\n")

    assert "1 (pueblo)" in caplog.text


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("20.3", 20.3),
        ("20,3", 20.3),
        (" -103,25 ", -103.25),
        ("", None),
        ("abc", None),
        ("1e400", None),
    ],
)
def test_parse_coordinate(text: str, expected: float | None) -> None:
    result = parse_coordinate(text)
    if expected is None:
        assert result is None
    else:
        assert result == pytest.approx(expected)


def test_cell_out_of_range() -> None:
    assert cell(["a"], 3) == ""
    assert cell([" a "], 0) == "a"
