from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.schemas.costs import CostEntryCreate, CostEntryOut, CostImportOut
from app.crud.costs import create_cost_entry, delete_cost_entry, require_cost_entry
from app.crud.projects import require_project
from app.services.etl.importer import run_cost_import

router = APIRouter()

@router.post("", response_model=CostEntryOut, status_code=201)
def post_cost_entry(data: CostEntryCreate, db: Session = Depends(get_db)):
    return create_cost_entry(db, data)

@router.delete("/{entry_id}", status_code=204)
def remove_cost_entry(entry_id: int, db: Session = Depends(get_db)):
    delete_cost_entry(db, require_cost_entry(db, entry_id))

@router.post("/import", response_model=CostImportOut)
def import_costs(
    project_id: int = Query(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    require_project(db, project_id)
    result = run_cost_import(db, project_id, file.filename or "costs.csv", file.file.read())
    return CostImportOut(
        created=[CostEntryOut.model_validate(e) for e in result.created],
        errors=[str(e) for e in result.errors],
    )
