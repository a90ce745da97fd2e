import datetime as dt
from pathlib import Path
from typing import Iterable

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import mm

from app.core.config import settings
from app.db.models.wbs import WbsItem, WbsType
from app.services.etl.parsers.wbs_csv import TEMPLATE_COLUMNS


def _text(v) -> str:
    if v is None:
        return ""
    if isinstance(v, dt.date):
        return v.isoformat()
    # the import format is one record per line
    return " ".join(str(v).split())


def wbs_frame(items: Iterable[WbsItem]) -> pd.DataFrame:
    """WBS items in the import column layout, every cell already rendered as text."""
    records = []
    for i in items:
        is_activity = i.type == WbsType.activity.value
        records.append(
            {
                "wbsCode": i.code,
                "wbsName": _text(i.name),
                "wbsType": i.type,
                "wbsDescription": _text(i.description),
                "amount": "" if is_activity else _text(i.budgeted_cost),
                "startDate": _text(i.start_date) if is_activity else "",
                "endDate": _text(i.end_date) if is_activity else "",
                "duration": _text(i.duration) if is_activity else "",
            }
        )
    return pd.DataFrame(records, columns=list(TEMPLATE_COLUMNS), dtype=str)


def export_wbs_csv(items: Iterable[WbsItem]) -> str:
    return wbs_frame(items).to_csv(index=False, lineterminator="\n")


def export_wbs_xlsx(items: Iterable[WbsItem], out_path: Path) -> Path:
    df = wbs_frame(items)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out_path, engine="xlsxwriter") as w:
        df.to_excel(w, index=False, sheet_name="WBS")
    return out_path


def export_cost_summary_pdf(summary: dict, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(out_path), pagesize=A4)
    width, height = A4
    y = height - 20*mm
    c.setFont("Helvetica-Bold", 14)
    c.drawString(20*mm, y, "Cost Summary")
    y -= 10*mm
    c.setFont("Helvetica", 11)
    cur = summary["currency"]
    pct = summary["percent_spent"]
    lines = [
        f"Project ID: {summary['project_id']}",
        f"Project budget: {summary['project_budget']:.2f} {cur}",
        f"Budgeted (top-level WBS): {summary['total_budgeted']:.2f} {cur}",
        f"Actual: {summary['total_actual']:.2f} {cur}",
        f"Variance: {summary['variance']:.2f} {cur}",
        f"Spent: {pct:.2f} %" if pct is not None else "Spent: n/a",
    ]
    for ln in lines:
        c.drawString(20*mm, y, ln)
        y -= 7*mm

    y -= 5*mm
    c.setFont("Helvetica-Bold", 11)
    c.drawString(20*mm, y, "Code")
    c.drawString(40*mm, y, "Name")
    c.drawString(110*mm, y, "Budget")
    c.drawString(140*mm, y, "Actual")
    c.drawString(170*mm, y, "Variance")
    c.setFont("Helvetica", 10)
    for r in summary["rows"]:
        y -= 6*mm
        if y < 20*mm:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - 20*mm
        c.drawString(20*mm, y, r["code"])
        c.drawString(40*mm, y, r["name"][:40])
        c.drawRightString(135*mm, y, f"{r['budgeted_cost']:.2f}")
        c.drawRightString(165*mm, y, f"{r['actual_cost']:.2f}")
        c.drawRightString(195*mm, y, f"{r['variance']:.2f}")
    c.showPage()
    c.save()
    return out_path

def default_export_path(prefix: str, ext: str) -> Path:
    ts = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d_%H%M%S")
    return Path(settings.EXPORT_DIR) / f"{prefix}_{ts}.{ext}"
