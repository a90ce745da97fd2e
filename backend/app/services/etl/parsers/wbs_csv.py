"""WBS import parsing: raw CSV text (or workbook rows) to validated row objects.

Best effort: a bad row is reported with its line
number and skipped, the rest still import. Only a header without the required
columns stops the parse before any row is looked at.
"""
import datetime as dt
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, NamedTuple

from app.db.models.wbs import WbsType
from app.services.etl.utils import iter_csv_records, to_decimal, to_iso_date
from app.services.etl.validators import RowError, is_zero_or_blank

REQUIRED_COLUMNS = ("wbsCode", "wbsName", "wbsType")
OPTIONAL_COLUMNS = ("wbsDescription", "amount", "startDate", "endDate", "duration", "createDate")
SCHEDULE_COLUMNS = ("startDate", "endDate", "duration")
DATE_COLUMNS = ("startDate", "endDate", "createDate")
WBS_TYPES = tuple(t.value for t in WbsType)

TEMPLATE_COLUMNS = ("wbsCode", "wbsName", "wbsType", "wbsDescription", "amount", "startDate", "endDate", "duration")
TEMPLATE_ROWS = (
    ("1", "Engineering & Design", "Summary", "Engineering and design phase", "5000", "", "", ""),
    ("1.1", "Preliminary Design", "WorkPackage", "Initial design work", "2000", "", "", ""),
    ("1.1.1", "Requirements Analysis", "Activity", "Gather requirements", "", "2024-01-08", "2024-01-19", "12"),
    ("2", "Procurement & Construction", "Summary", "Procurement and construction", "85000", "", "", ""),
    ("2.1", "Material Procurement", "WorkPackage", "Purchase materials", "15000", "", "", ""),
    ("2.1.1", "Vendor Selection", "Activity", "Select vendors", "", "2024-02-05", "2024-02-16", "12"),
    ("3", "Testing & Commissioning", "Summary", "Testing and commissioning", "10000", "", "", ""),
)


@dataclass
class WbsRow:
    line: int
    code: str
    name: str
    type: WbsType
    description: str | None = None
    amount: Decimal | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = None
    create_date: dt.date | None = None

    def as_dict(self) -> dict:
        return {
            "line": self.line,
            "wbsCode": self.code,
            "wbsName": self.name,
            "wbsType": self.type.value,
            "wbsDescription": self.description,
            "amount": str(self.amount) if self.amount is not None else None,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "duration": self.duration,
            "createDate": self.create_date.isoformat() if self.create_date else None,
        }


class ParseResult(NamedTuple):
    rows: list[WbsRow]
    errors: list[RowError]

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]


def generate_csv_template() -> str:
    return "\n".join(",".join(r) for r in (TEMPLATE_COLUMNS, *TEMPLATE_ROWS))


def parse_wbs_csv(text: str) -> ParseResult:
    records = iter_csv_records(text)
    if not records:
        return ParseResult([], [RowError("CSV file is empty or contains no valid data")])
    (_, header), body = records[0], records[1:]
    return parse_wbs_table(header, body)


def parse_wbs_table(header: list[str], records: Iterable[tuple[int, list[str]]]) -> ParseResult:
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        return ParseResult([], [RowError(f"Missing required columns: {', '.join(missing)}")])

    rows: list[WbsRow] = []
    errors: list[RowError] = []
    for line, values in records:
        if len(values) != len(header):
            errors.append(RowError(f"Column count mismatch (expected {len(header)}, got {len(values)})", line))
            continue
        parsed = _parse_row(line, dict(zip(header, values)))
        if isinstance(parsed, RowError):
            errors.append(parsed)
        else:
            rows.append(parsed)
    return ParseResult(rows, errors)


def _parse_date(line: int, row: dict[str, str], col: str) -> dt.date | None | RowError:
    raw = row.get(col, "")
    if not raw:
        return None
    d = to_iso_date(raw)
    if d is None:
        return RowError(f"Invalid {col} format (expected YYYY-MM-DD)", line, col)
    return d


def _parse_row(line: int, row: dict[str, str]) -> WbsRow | RowError:
    code = row.get("wbsCode", "")
    name = row.get("wbsName", "")
    if not code:
        return RowError("Missing WBS code", line, "wbsCode")
    if not name:
        return RowError("Missing WBS name", line, "wbsName")
    if row.get("wbsType") not in WBS_TYPES:
        return RowError("Invalid WBS type - must be Summary, WorkPackage, or Activity", line, "wbsType")

    wbs_type = WbsType(row["wbsType"])
    out = WbsRow(line=line, code=code, name=name, type=wbs_type, description=row.get("wbsDescription") or None)

    if wbs_type in (WbsType.summary, WbsType.work_package):
        present = [c for c in SCHEDULE_COLUMNS if row.get(c)]
        if present:
            return RowError(f"{wbs_type.value} type should not have dates or duration ({', '.join(present)})", line, present[0])
        amount = to_decimal(row.get("amount"))
        if amount is None or amount < 0:
            return RowError(f"{wbs_type.value} type must have a valid budget amount", line, "amount")
        out.amount = amount
    else:
        if not row.get("startDate") and not row.get("endDate"):
            return RowError("Activity type must have a start date and an end date", line, "startDate")
        if not is_zero_or_blank(row.get("amount")):
            return RowError("Activity type cannot have a budget amount (must be 0 or empty)", line, "amount")
        out.amount = Decimal("0")
        for col, attr in (("startDate", "start_date"), ("endDate", "end_date")):
            d = _parse_date(line, row, col)
            if isinstance(d, RowError):
                return d
            setattr(out, attr, d)
        if row.get("duration"):
            duration = to_decimal(row["duration"])
            if duration is None:
                return RowError("duration must be a number", line, "duration")
            out.duration = math.ceil(duration)

    created = _parse_date(line, row, "createDate")
    if isinstance(created, RowError):
        return created
    out.create_date = created
    return out
