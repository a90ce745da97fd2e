from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError, FieldError
from app.core.logging import logger
from app.db.models.project import Project
from app.db.models.wbs import WbsItem
from app.db.models.task import Task
from app.schemas.project import ProjectCreate, ProjectUpdate

def list_projects(db: Session):
    return db.query(Project).order_by(Project.id).all()

def get_project(db: Session, project_id: int) -> Project | None:
    return db.query(Project).filter(Project.id == project_id).one_or_none()

def require_project(db: Session, project_id: int) -> Project:
    p = get_project(db, project_id)
    if not p:
        raise NotFoundError(f"Project {project_id} not found")
    return p

def create_project(db: Session, data: ProjectCreate) -> Project:
    p = Project(
        name=data.name,
        description=data.description,
        start_date=data.start_date,
        end_date=data.end_date,
        budget=data.budget,
        currency=data.currency.value,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def update_project(db: Session, p: Project, data: ProjectUpdate) -> Project:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "currency" in changes:
        changes["currency"] = changes["currency"].value
    start = changes.get("start_date", p.start_date)
    end = changes.get("end_date", p.end_date)
    if end < start:
        raise ValidationError([FieldError("end_date", "end_date cannot be before start_date")])
    for k, v in changes.items():
        setattr(p, k, v)
    db.commit()
    db.refresh(p)
    return p


def delete_project(db: Session, p: Project) -> None:
    # rows below the project go with it through ON DELETE CASCADE
    wbs_count = db.query(func.count(WbsItem.id)).filter(WbsItem.project_id == p.id).scalar()
    task_count = db.query(func.count(Task.id)).filter(Task.project_id == p.id).scalar()
    db.delete(p)
    db.commit()
    logger.info("project_deleted", project_id=p.id, wbs_items=wbs_count, tasks=task_count)
