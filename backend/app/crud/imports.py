import datetime as dt
from sqlalchemy.orm import Session
from app.db.models.import_run import ImportRun
from app.db.models.import_error import ImportError
from app.services.etl.validators import RowError

def get_import_run(db: Session, import_run_id: int) -> ImportRun | None:
    return db.query(ImportRun).filter(ImportRun.id==import_run_id).one_or_none()

def create_import_run(db: Session, project_id: int, kind: str, file_name: str, file_hash: str) -> ImportRun:
    run = ImportRun(
        project_id=project_id,
        kind=kind,
        file_name=file_name,
        file_hash=file_hash,
        status="running",
        started_at=dt.datetime.now(dt.timezone.utc),
    )
    db.add(run)
    db.commit()
    db.refresh(run)
    return run

def set_import_status(
    db: Session,
    import_run_id: int,
    status: str,
    finished_at: dt.datetime | None = None,
    rows_loaded: int | None = None,
):
    run = db.query(ImportRun).filter(ImportRun.id==import_run_id).one()
    run.status = status
    if finished_at is not None:
        run.finished_at = finished_at
    if rows_loaded is not None:
        run.rows_loaded = rows_loaded
    db.commit()

def list_imports(db: Session, project_id: int):
    return db.query(ImportRun).filter(ImportRun.project_id==project_id).order_by(ImportRun.id.desc()).all()

def list_import_errors(db: Session, import_run_id: int):
    return db.query(ImportError).filter(ImportError.import_run_id==import_run_id).order_by(ImportError.id).all()

def add_import_errors(db: Session, import_run_id: int, errors: list[RowError]):
    for er in errors:
        db.add(ImportError(
            import_run_id=import_run_id,
            row_num=er.row_num,
            column=er.column,
            message=er.message
        ))
    db.commit()
