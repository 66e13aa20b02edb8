"""Forgiving CSV tokenizer for spreadsheet exports.

Handles quoted fields, embedded commas and line breaks (multiline cells),
doubled-quote escaping and mixed ``\\n``/``\\r\\n``/``\\r`` line endings.
Malformed quoting never raises: whatever state is pending at the end of
the input is flushed as a best-effort row.
"""

from __future__ import annotations

_QUOTE = '"'
_DELIMITER = ","
_LINE_BREAKS = frozenset({"\n", "\r"})


def _is_blank_row(row: list[str]) -> bool:
    return all(not field.strip() for field in row)


def parse_csv_text(text: str) -> list[list[str]]:
    """Split *text* into rows of raw (untrimmed) field strings.

    Rows whose fields are all empty or whitespace-only are dropped, which
    also takes care of trailing blank lines.
    """
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False

    def end_row() -> None:
        row.append("".join(field))
        field.clear()
        if not _is_blank_row(row):
            rows.append(list(row))
        row.clear()

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        next_char = text[i + 1] if i + 1 < length else ""

        if char == _QUOTE:
            if in_quotes and next_char == _QUOTE:
                field.append(_QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == _DELIMITER and not in_quotes:
            row.append("".join(field))
            field.clear()
        elif char in _LINE_BREAKS and not in_quotes:
            end_row()
            if char == "\r" and next_char == "\n":
                i += 1
        else:
            field.append(char)
        i += 1

    if field or row:
        end_row()

    return rows
