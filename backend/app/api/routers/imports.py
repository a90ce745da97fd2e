from fastapi import APIRouter, Depends, UploadFile, File, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.errors import NotFoundError, ReferentialError
from app.schemas.imports import ImportRunOut, ImportErrorOut, WbsImportOut, WbsParseOut
from app.crud.imports import get_import_run, list_imports, list_import_errors
from app.crud.projects import require_project
from app.services.etl.importer import detect_kind, parse_wbs_file, run_wbs_import
from app.services.etl.parsers.wbs_csv import generate_csv_template
from app.services.etl.utils import bytes_sha256
from app.services.files import ensure_dirs, save_upload, upload_path

router = APIRouter()


@router.get("", response_model=list[ImportRunOut])
def get_imports(project_id: int = Query(...), db: Session = Depends(get_db)):
    require_project(db, project_id)
    return list_imports(db, project_id)


@router.get("/template")
def get_template():
    return Response(
        content=generate_csv_template(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="wbs_template.csv"'},
    )


@router.get("/{import_run_id}/errors", response_model=list[ImportErrorOut])
def get_errors(import_run_id: int, db: Session = Depends(get_db)):
    if not get_import_run(db, import_run_id):
        raise NotFoundError("Import run not found")
    return list_import_errors(db, import_run_id)


@router.delete("/{import_run_id}", status_code=204)
def delete_import_run(import_run_id: int, db: Session = Depends(get_db)):
    run = get_import_run(db, import_run_id)
    if not run:
        raise NotFoundError("Import run not found")
    if run.status == "running":
        raise ReferentialError("Import is running; cannot delete")

    # imported rows stay, they belong to the project now
    db.delete(run)
    db.commit()

    file_path = upload_path(run.project_id, run.file_hash, run.file_name)
    if file_path.exists():
        file_path.unlink()


@router.post("/wbs/parse", response_model=WbsParseOut)
def parse_wbs(file: UploadFile = File(...)):
    name = file.filename or ""
    parsed = parse_wbs_file(file.file.read(), detect_kind(name))
    return WbsParseOut(rows=[r.as_dict() for r in parsed.rows], errors=parsed.messages)


@router.post("/wbs", response_model=WbsImportOut)
def upload_wbs(
    project_id: int = Query(..., description="Project the WBS rows are imported into"),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    require_project(db, project_id)
    name = file.filename or ""
    detect_kind(name)
    data = file.file.read()

    ensure_dirs()
    save_upload(data, upload_path(project_id, bytes_sha256(data), name))

    result = run_wbs_import(db, project_id, name, data)
    return WbsImportOut(
        run=ImportRunOut.model_validate(result.run),
        created=result.created,
        updated=result.updated,
        errors=[str(e) for e in result.errors],
    )
