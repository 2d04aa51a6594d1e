"""
Export encoder - renders row sets as a structured envelope or delimited text.

The encoder knows nothing about what the rows mean; it only needs maps that
share one key set, in the key order of the first row.
"""
import csv
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd

from ingres.exceptions import ExportEncodingError, InvalidFormat

CSV_MEDIA_TYPE = "text/csv"


def check_homogeneous(rows: List[Dict[str, Any]]) -> List[str]:
    """
    Header of a row set: the keys of the first row.

    Raises:
        ExportEncodingError: a later row has a different key set
    """
    if not rows:
        return []

    header = list(rows[0].keys())
    expected = set(header)
    for index, row in enumerate(rows[1:], start=1):
        if set(row.keys()) != expected:
            raise ExportEncodingError(
                f"Export row {index} does not match the header columns: {', '.join(header)}"
            )
    return header


def to_delimited_text(rows: List[Dict[str, Any]], delimiter: str = ",") -> str:
    """
    Encode rows as delimited text.

    Zero rows give an empty body (no header line). Nulls become empty
    fields; values containing the delimiter, a quote or a newline are
    quoted with embedded quotes doubled.
    """
    header = check_homogeneous(rows)
    if not header:
        return ""

    df = pd.DataFrame(rows, columns=header, dtype=object)
    text = df.to_csv(
        index=False,
        sep=delimiter,
        na_rep="",
        quoting=csv.QUOTE_MINIMAL,
        quotechar='"',
        doublequote=True,
        lineterminator="\n",
    )
    # to_csv terminates the last line; the body ends at the last row
    return text[:-1] if text.endswith("\n") else text


def to_structured(
    rows: List[Dict[str, Any]],
    export_type: str,
    timestamp: Optional[str] = None
) -> Dict[str, Any]:
    """Structured export envelope."""
    check_homogeneous(rows)
    return {
        "exportType": export_type,
        "timestamp": timestamp or utc_timestamp(),
        "recordCount": len(rows),
        "data": rows,
    }


def encode(rows: List[Dict[str, Any]], format: str, export_type: str = "export"):
    """
    Encode rows in ``format``: ``csv`` gives text, ``json`` an envelope dict.

    Raises:
        InvalidFormat: unknown format
    """
    if format == "csv":
        return to_delimited_text(rows)
    if format == "json":
        return to_structured(rows, export_type)
    raise InvalidFormat("Invalid format. Must be one of: csv, json")


def export_filename(export_type: str, today: Optional[date] = None) -> str:
    """Dated attachment name, e.g. ``assessments_2024-05-01.csv``."""
    today = today or datetime.now(timezone.utc).date()
    return f"{export_type}_{today.isoformat()}.csv"


def attachment_headers(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
