from typing import Any, BinaryIO

import openpyxl

from app.services.etl.parsers.wbs_csv import DATE_COLUMNS, ParseResult, parse_wbs_table
from app.services.etl.utils import cell_to_text, norm_str
from app.services.etl.validators import RowError

PREFERRED_SHEET = "WBS"


def _trim(values: list[Any]) -> list[Any]:
    while values and (values[-1] is None or values[-1] == ""):
        values.pop()
    return values


def read_wbs_workbook(source: str | BinaryIO) -> ParseResult:
    """Read the WBS sheet (or the first sheet) using the CSV column layout.

    Workbook rows are numbered as Excel shows them. Short rows are padded since
    empty trailing cells are not stored in the file; extra filled cells beyond
    the header still count as a column mismatch.
    """
    wb = openpyxl.load_workbook(source, data_only=True, read_only=True)
    try:
        ws = wb[PREFERRED_SHEET] if PREFERRED_SHEET in wb.sheetnames else wb[wb.sheetnames[0]]
        header: list[str] | None = None
        records: list[tuple[int, list[str]]] = []
        for row_num, row in enumerate(ws.iter_rows(values_only=True), start=1):
            values = _trim(list(row))
            if not values:
                continue
            if header is None:
                header = [norm_str(v) or "" for v in values]
                continue
            texts = [
                cell_to_text(v, as_date=i < len(header) and header[i] in DATE_COLUMNS)
                for i, v in enumerate(values)
            ]
            texts += [""] * (len(header) - len(texts))
            records.append((row_num, texts))
    finally:
        wb.close()

    if header is None:
        return ParseResult([], [RowError("Workbook is empty or contains no valid data")])
    return parse_wbs_table(header, records)
