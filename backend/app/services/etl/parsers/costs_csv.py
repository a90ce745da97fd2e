import datetime as dt
from dataclasses import dataclass
from decimal import Decimal

from app.services.etl.utils import iter_csv_records, to_decimal, to_iso_date
from app.services.etl.validators import RowError

REQUIRED_COLUMNS = ("wbsCode", "amount", "entryDate")


@dataclass
class CostRow:
    line: int
    wbs_code: str
    amount: Decimal
    entry_date: dt.date
    description: str | None = None


def parse_costs_csv(text: str) -> tuple[list[CostRow], list[RowError]]:
    records = iter_csv_records(text)
    if not records:
        return [], [RowError("CSV file is empty or contains no valid data")]
    (_, header), body = records[0], records[1:]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        return [], [RowError(f"Missing required columns: {', '.join(missing)}")]

    rows: list[CostRow] = []
    errors: list[RowError] = []
    for line, values in body:
        if len(values) != len(header):
            errors.append(RowError(f"Column count mismatch (expected {len(header)}, got {len(values)})", line))
            continue
        row = dict(zip(header, values))
        if not row["wbsCode"]:
            errors.append(RowError("Missing WBS code", line, "wbsCode"))
            continue
        amount = to_decimal(row["amount"])
        if amount is None:
            errors.append(RowError("amount must be a number", line, "amount"))
            continue
        entry_date = to_iso_date(row["entryDate"])
        if entry_date is None:
            errors.append(RowError("Invalid entryDate format (expected YYYY-MM-DD)", line, "entryDate"))
            continue
        rows.append(CostRow(line, row["wbsCode"], amount, entry_date, row.get("description") or None))
    return rows, errors
