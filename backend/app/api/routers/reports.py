from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, Response
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.crud.projects import require_project
from app.crud.wbs import list_wbs_items
from app.schemas.reports import CostSummaryOut
from app.services.reports.service import cost_summary
from app.services.exports.exporter import (
    default_export_path,
    export_cost_summary_pdf,
    export_wbs_csv,
    export_wbs_xlsx,
)

router = APIRouter()
exports_router = APIRouter()

@router.get("/cost-summary", response_model=CostSummaryOut)
def get_cost_summary(project_id: int = Query(...), db: Session = Depends(get_db)):
    return cost_summary(db, project_id)


@exports_router.get("/wbs.csv")
def export_wbs_as_csv(project_id: int = Query(...), db: Session = Depends(get_db)):
    require_project(db, project_id)
    return Response(
        content=export_wbs_csv(list_wbs_items(db, project_id)),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="wbs_{project_id}.csv"'},
    )

@exports_router.get("/wbs.xlsx")
def export_wbs_as_xlsx(project_id: int = Query(...), db: Session = Depends(get_db)):
    require_project(db, project_id)
    out = export_wbs_xlsx(list_wbs_items(db, project_id), default_export_path(f"wbs_{project_id}", "xlsx"))
    return FileResponse(
        path=str(out),
        filename=out.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

@exports_router.get("/cost-summary.pdf")
def export_cost_summary(project_id: int = Query(...), db: Session = Depends(get_db)):
    summary = cost_summary(db, project_id)
    out = export_cost_summary_pdf(summary, default_export_path(f"cost_summary_{project_id}", "pdf"))
    return FileResponse(path=str(out), filename=out.name, media_type="application/pdf")
