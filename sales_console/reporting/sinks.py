"""Sinks that put exported sales on disk as CSV or Excel files."""
from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable

from sales_console.reporting.templates import TABLE_HEADERS


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def export_filename(today: date | None = None) -> str:
    """Name used for backend CSV exports, e.g. ``sales-export-2024-05-01.csv``."""

    return f"sales-export-{(today or date.today()).isoformat()}.csv"


def write_export(payload: bytes, output_dir: Path, today: date | None = None) -> Path:
    """Save the export endpoint's binary payload and return the written path."""

    target = output_dir / export_filename(today)
    ensure_output_dir(target)
    target.write_bytes(payload)
    return target


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write table rows to a CSV file with the table's column order."""

    rows = list(rows)
    ensure_output_dir(output_path)
    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=TABLE_HEADERS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write table rows to a workbook with a bold, frozen header and fitted columns."""

    rows = list(rows)
    if not rows:
        return

    from openpyxl import Workbook
    from openpyxl.styles import Font
    from openpyxl.utils import get_column_letter

    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "sales"
    sheet.append(TABLE_HEADERS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        sheet.append([row.get(header, "") for header in TABLE_HEADERS])

    for index, header in enumerate(TABLE_HEADERS, start=1):
        widest = max(len(str(row.get(header, ""))) for row in rows)
        sheet.column_dimensions[get_column_letter(index)].width = max(widest, len(header)) + 2
    sheet.freeze_panes = "A2"
    workbook.save(output_path)
