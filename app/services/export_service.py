# app/services/export_service.py

import csv
import io
from typing import Dict, List, Optional

from openpyxl import Workbook

from app.core.exceptions import ValidationError

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def filter_rows(rows: List[Dict], query: Optional[str]) -> List[Dict]:
    """Free-text search: a row matches when the query occurs in any of its values."""
    needle = (query or "").strip().lower()
    if not needle:
        return rows
    return [
        row for row in rows
        if needle in " ".join("" if v is None else str(v) for v in row.values()).lower()
    ]


def _ensure_rows(rows: List[Dict]):
    if not rows:
        raise ValidationError("No data to export.")


def rows_to_csv(rows: List[Dict], columns: List[str]) -> bytes:
    _ensure_rows(rows)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({c: "" if row.get(c) is None else row.get(c) for c in columns})
    return buffer.getvalue().encode("utf-8")


def rows_to_xlsx(rows: List[Dict], columns: List[str], sheet_name: str = "Data") -> bytes:
    _ensure_rows(rows)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name
    sheet.append(columns)
    for row in rows:
        sheet.append(["" if row.get(c) is None else str(row.get(c)) for c in columns])

    # Saved into memory, never to disk
    in_memory_file = io.BytesIO()
    workbook.save(in_memory_file)
    return in_memory_file.getvalue()


def export_rows(rows: List[Dict], columns: List[str], fmt: str, filename: str):
    """Returns (content, media_type, filename) for the requested format."""
    fmt = (fmt or "csv").lower()
    if fmt == "csv":
        return rows_to_csv(rows, columns), CSV_MEDIA_TYPE, f"{filename}.csv"
    if fmt in ("xlsx", "excel"):
        return rows_to_xlsx(rows, columns), XLSX_MEDIA_TYPE, f"{filename}.xlsx"
    raise ValidationError(f"Unsupported export format '{fmt}'", {"format": "Use csv or xlsx."})
