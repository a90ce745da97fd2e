from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.errors import FieldError, NotFoundError, ReferentialError, ValidationError
from app.db.models.task import Task
from app.db.models.wbs import WbsItem, WbsType
from app.schemas.tasks import TaskCreate, TaskUpdate

def list_project_tasks(db: Session, project_id: int) -> list[Task]:
    return db.query(Task).filter(Task.project_id == project_id).order_by(Task.id).all()

def list_activity_tasks(db: Session, activity_id: int) -> list[Task]:
    return db.query(Task).filter(Task.activity_id == activity_id).order_by(Task.id).all()

def require_task(db: Session, task_id: int) -> Task:
    t = db.query(Task).filter(Task.id == task_id).one_or_none()
    if not t:
        raise NotFoundError(f"Task {task_id} not found")
    return t

def create_task(db: Session, data: TaskCreate) -> Task:
    activity = db.query(WbsItem).filter(WbsItem.id == data.activity_id).one_or_none()
    if not activity:
        raise ReferentialError(f"Activity {data.activity_id} not found")
    if activity.type != WbsType.activity.value:
        raise ValidationError([FieldError("activity_id", "Tasks can only be attached to 'Activity' items")])

    t = Task(project_id=activity.project_id, **data.model_dump(exclude_none=True))
    db.add(t)
    db.commit()
    db.refresh(t)
    return t

def update_task(db: Session, t: Task, data: TaskUpdate) -> Task:
    changes = data.model_dump(exclude_unset=True)
    start = changes.get("start_date", t.start_date)
    end = changes.get("end_date", t.end_date)
    if start and end and end < start:
        raise ValidationError([FieldError("end_date", "end_date cannot be before start_date")])
    if "name" in changes and changes["name"] is None:
        raise ValidationError([FieldError("name", "name cannot be empty")])
    for k, v in changes.items():
        if k == "percent_complete" and v is None:
            v = Decimal("0")
        setattr(t, k, v)
    db.commit()
    db.refresh(t)
    return t

def delete_task(db: Session, t: Task) -> None:
    db.delete(t)
    db.commit()
