"""
CSV -> complaint records.

Flow:
1) Parse the export with the `csv` module (first row is the header)
2) Zip every data row with the header into a dict of text values
3) Validate each dict into a `ComplaintRecord`

A row whose cell count differs from the header fails the whole conversion;
rows are never padded or truncated.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable

import pydantic

from core.errors import ConversionError, MalformedRowError

from .schemas import ComplaintRecord


def csv_to_rows(text: str) -> list[dict[str, str]]:
    if not text or not text.strip():
        return []

    reader = csv.reader(io.StringIO(text), strict=True)
    try:
        header: list[str] | None = None
        rows: list[dict[str, str]] = []
        for cells in reader:
            if not cells:
                # Blank line.
                continue
            if header is None:
                header = [h.strip() for h in cells]
                if len(set(header)) != len(header):
                    raise MalformedRowError(
                        "Failed to convert CSV to JSON",
                        details=f"line {reader.line_num}: header repeats a column name",
                    )
                continue
            if len(cells) != len(header):
                raise MalformedRowError(
                    "Failed to convert CSV to JSON",
                    details=(
                        f"line {reader.line_num}: expected {len(header)} fields, got {len(cells)}"
                    ),
                )
            rows.append(dict(zip(header, cells)))
    except csv.Error as exc:
        raise MalformedRowError(
            "Failed to convert CSV to JSON",
            details=f"line {reader.line_num}: {exc}",
        ) from exc

    return rows


def rows_to_complaints(rows: Iterable[dict[str, str]]) -> list[ComplaintRecord]:
    records: list[ComplaintRecord] = []
    for index, row in enumerate(rows):
        try:
            records.append(ComplaintRecord.model_validate(row))
        except pydantic.ValidationError as exc:
            raise ConversionError(
                "Failed to decode complaint records",
                details=f"row {index + 1}: {exc.errors()[0].get('msg', str(exc))}",
            ) from exc
    return records


def convert_csv(text: str) -> list[ComplaintRecord]:
    return rows_to_complaints(csv_to_rows(text))
