from __future__ import annotations

import pytest

from townsync.ingestion.csv_text import parse_csv_text


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def test_simple_rows() -> None:
    rows = parse_csv_text("Name,Lat,Lon\nAjijic,20.3,-103.25\n")
    assert rows == [["Name", "Lat", "Lon"], ["Ajijic", "20.3", "-103.25"]]


@pytest.mark.parametrize(
    "value",
    [
        "plain",
        "with, comma",
        "multi\nline\ncell",
        'say ""hi""',
        'mixed, "quoted"\r\nand more',
        "",
    ],
)
def test_quoted_field_recovers_original_value(value: str) -> None:
    text = f"a,{_quote(value)},z\n"
    assert parse_csv_text(text) == [["a", value, "z"]]


def test_doubled_quote_inside_quotes_is_literal() -> None:
    assert parse_csv_text('"He said ""no"""') == [['He said "no"']]


def test_header_followed_by_blank_lines_yields_no_data_rows() -> None:
    rows = parse_csv_text("Name,Lat,Lon\n\n\r\n   \n,,\n")
    assert rows == [["Name", "Lat", "Lon"]]


def test_crlf_is_a_single_line_break() -> None:
    rows = parse_csv_text("a,b\r\nc,d\r\n")
    assert rows == [["a", "b"], ["c", "d"]]


def test_lone_carriage_return_ends_row() -> None:
    assert parse_csv_text("a,b\rc,d") == [["a", "b"], ["c", "d"]]


def test_last_row_without_trailing_newline_is_flushed() -> None:
    assert parse_csv_text("h1,h2\nx,y") == [["h1", "h2"], ["x", "y"]]


def test_trailing_empty_field_kept() -> None:
    assert parse_csv_text("a,\n") == [["a", ""]]


def test_unterminated_quote_flushes_best_effort() -> None:
    rows = parse_csv_text('name,notes\nTapalpa,"never closed\nstill inside')
    assert rows == [["name", "notes"], ["Tapalpa", "never closed\nstill inside"]]


def test_fields_are_not_trimmed() -> None:
    assert parse_csv_text(" a , b \n") == [[" a ", " b "]]


def test_empty_input() -> None:
    assert parse_csv_text("") == []
