from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.schemas.tasks import TaskCreate, TaskOut, TaskUpdate
from app.crud.tasks import create_task, delete_task, require_task, update_task

router = APIRouter()

@router.post("", response_model=TaskOut, status_code=201)
def post_task(data: TaskCreate, db: Session = Depends(get_db)):
    return create_task(db, data)

@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: int, db: Session = Depends(get_db)):
    return require_task(db, task_id)

@router.patch("/{task_id}", response_model=TaskOut)
def patch_task(task_id: int, data: TaskUpdate, db: Session = Depends(get_db)):
    return update_task(db, require_task(db, task_id), data)

@router.delete("/{task_id}", status_code=204)
def remove_task(task_id: int, db: Session = Depends(get_db)):
    delete_task(db, require_task(db, task_id))
