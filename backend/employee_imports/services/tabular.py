import io
import zipfile
from typing import Any, Iterable, Mapping

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from employee_imports.core.errors import DecodeError

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# SyntaxError covers both xml.etree and lxml parse errors on a corrupt sheet
_READ_ERRORS = (ValueError, KeyError, TypeError, OSError, SyntaxError, zipfile.BadZipFile, InvalidFileException)


def _cell(v: Any) -> Any:
    if v is None or (isinstance(v, float) and v != v):
        return ""
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


def _header(v: Any) -> str:
    v = _cell(v)
    return str(v).strip() if v != "" else ""


def decode_rows(blob: bytes) -> list[dict[str, Any]]:
    """Read the first sheet; one dict per data row keyed by header text.

    Missing cells come back as "" so every row has every header key. When a
    header text repeats, the leftmost column keeps the key.
    """
    try:
        df = pd.read_excel(
            io.BytesIO(blob),
            sheet_name=0,
            header=None,
            dtype=object,
            keep_default_na=False,
            engine="openpyxl",
        )
    except _READ_ERRORS as e:
        raise DecodeError(str(e)) from e

    if df.empty:
        return []

    header = [_header(v) for v in df.iloc[0].tolist()]
    rows = []
    for values in df.iloc[1:].itertuples(index=False, name=None):
        row: dict[str, Any] = {}
        for key, v in zip(header, values):
            row.setdefault(key, _cell(v))
        rows.append(row)
    return rows


def encode_rows(rows: Iterable[Mapping[str, Any]], sheet_title: str) -> bytes:
    """Write rows to a single-sheet xlsx; header is the union of keys in first-seen order."""
    columns: list[str] = []
    records = [dict(r) for r in rows]
    for r in records:
        for k in r:
            if k not in columns:
                columns.append(k)

    df = pd.DataFrame([[r.get(c, "") for c in columns] for r in records], columns=columns, dtype=object)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="xlsxwriter") as w:
        df.to_excel(w, index=False, sheet_name=sheet_title[:31])
    return out.getvalue()
