import csv
import datetime as dt
import hashlib
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from openpyxl.utils.datetime import from_excel

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
UTF8_BOM = "\ufeff"

def bytes_sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()

def decode_text(data: bytes) -> str:
    # utf-8-sig drops a leading BOM; the strip covers text decoded elsewhere
    return data.decode("utf-8-sig").lstrip(UTF8_BOM)

def norm_str(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, str):
        s = v.strip()
        return s if s else None
    return str(v).strip()

def to_decimal(v: Any) -> Decimal | None:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, Decimal):
        return v if v.is_finite() else None
    if isinstance(v, int):
        return Decimal(v)
    if isinstance(v, float):
        return Decimal(str(v)) if v == v and v not in (float("inf"), float("-inf")) else None
    s = str(v).strip()
    if not s:
        return None
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    return d if d.is_finite() else None

def to_iso_date(v: Any) -> dt.date | None:
    """Strict YYYY-MM-DD parsing; impossible calendar dates (2023-02-30) give None."""
    if v is None:
        return None
    if isinstance(v, dt.datetime):
        return v.date()
    if isinstance(v, dt.date):
        return v
    s = str(v).strip()
    if not ISO_DATE_RE.match(s):
        return None
    try:
        return dt.date.fromisoformat(s)
    except ValueError:
        return None

def cell_to_text(v: Any, as_date: bool = False) -> str:
    """Render a workbook cell the way it would appear in the CSV import format."""
    if v is None:
        return ""
    if isinstance(v, dt.datetime):
        return v.date().isoformat()
    if isinstance(v, dt.date):
        return v.isoformat()
    if as_date and isinstance(v, (int, float)) and v > 30000:  # excel serial
        d = from_excel(v)
        return (d.date() if isinstance(d, dt.datetime) else d).isoformat()
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v).strip()

def inclusive_days(start: dt.date, end: dt.date) -> int:
    return abs((end - start).days) + 1

def iter_csv_records(text: str) -> list[tuple[int, list[str]]]:
    """Split text on any line ending, drop blank lines, split each line into trimmed fields.

    Records are numbered 1-based over the non-blank lines, so the header is
    line 1 and the first data row is line 2. Quoted fields may contain commas
    but not line breaks.
    """
    lines = [line for line in text.lstrip(UTF8_BOM).splitlines() if line.strip()]
    records: list[tuple[int, list[str]]] = []
    for line_no, line in enumerate(lines, start=1):
        values = next(csv.reader([line], skipinitialspace=True), [])
        records.append((line_no, [v.strip() for v in values]))
    return records
