"""Export helpers for the current lead result set."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd

from .errors import EmptyExportError
from .models import BusinessRecord

LOGGER = logging.getLogger(__name__)

CSV_HEADERS = (
    "Name",
    "Address",
    "Type",
    "Phone",
    "Rating",
    "Reviews",
    "Website",
    "Scraped Emails",
    "Scraped Phones",
    "Scraped Socials",
)

FORMULA_PREFIXES = ("=", "+", "-", "@")
# Cells holding any of these are wrapped in double quotes.
_QUOTED_CHARACTERS = (",", "\n", "\r")

_CSV_SUFFIXES = {".csv"}
_EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def neutralise_formula(text: str) -> str:
    """Prefix a single quote when a spreadsheet would treat ``text`` as a formula."""

    if text.startswith(FORMULA_PREFIXES):
        return "'" + text
    return text


def escape_csv_cell(value: Any) -> str:
    text = neutralise_formula(_format_value(value))
    if any(char in text for char in _QUOTED_CHARACTERS):
        return '"' + text.replace('"', '""') + '"'
    return text


def _join_list(values: Iterable[str]) -> str:
    return "; ".join(values)


def record_to_row(record: BusinessRecord) -> List[Any]:
    """Return the export cells for ``record`` in :data:`CSV_HEADERS` order."""

    contact_info = record.contact_info
    return [
        record.name,
        record.address,
        record.category,
        record.phone,
        record.rating,
        record.review_count,
        record.website_url,
        _join_list(contact_info.emails) if contact_info else "",
        _join_list(contact_info.phones) if contact_info else "",
        _join_list(contact_info.socials) if contact_info else "",
    ]


def encode_csv(records: Sequence[BusinessRecord]) -> bytes:
    """Serialise ``records`` as UTF-8 CSV with formula-injection safe cells."""

    if not records:
        raise EmptyExportError()
    lines = [",".join(CSV_HEADERS)]
    for record in records:
        lines.append(",".join(escape_csv_cell(cell) for cell in record_to_row(record)))
    return "\n".join(lines).encode("utf-8")


def records_to_dataframe(records: Sequence[BusinessRecord]) -> pd.DataFrame:
    """Convert records into a :class:`pandas.DataFrame` using the export columns."""

    rows = []
    for record in records:
        cells = record_to_row(record)
        rows.append([neutralise_formula(cell) if isinstance(cell, str) else cell for cell in cells])
    return pd.DataFrame(rows, columns=list(CSV_HEADERS))


def write_export(path: str | Path, records: Sequence[BusinessRecord]) -> Optional[Path]:
    """Write ``records`` to a CSV or Excel file chosen by the path suffix.

    Returns the written path, or ``None`` when there was nothing to export.
    """

    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in _CSV_SUFFIXES | _EXCEL_SUFFIXES:
        raise ValueError(f"Unsupported export format '{file_path.suffix}'. Use CSV or Excel spreadsheet")

    if not records:
        LOGGER.warning("%s", EmptyExportError())
        return None

    file_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix in _CSV_SUFFIXES:
        file_path.write_bytes(encode_csv(records))
    else:
        records_to_dataframe(records).to_excel(file_path, index=False, sheet_name="Leads", engine="openpyxl")
    LOGGER.info("Exported %s leads to %s", len(records), file_path)
    return file_path


__all__ = [
    "CSV_HEADERS",
    "encode_csv",
    "escape_csv_cell",
    "record_to_row",
    "records_to_dataframe",
    "write_export",
]
