from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.errors import ReferentialError
from app.schemas.wbs import WbsItemCreate, WbsItemOut, WbsItemUpdate, WbsProgressUpdate
from app.schemas.dependencies import DependencyOut
from app.schemas.costs import CostEntryOut
from app.schemas.tasks import TaskOut
from app.crud.projects import get_project
from app.crud.wbs import (
    create_wbs_item,
    delete_wbs_item,
    list_work_packages,
    require_wbs_item,
    update_progress,
    update_wbs_item,
)
from app.crud.dependencies import list_item_dependencies
from app.crud.costs import list_cost_entries
from app.crud.tasks import list_activity_tasks

router = APIRouter()

@router.post("", response_model=WbsItemOut, status_code=201)
def post_wbs_item(data: WbsItemCreate, db: Session = Depends(get_db)):
    if not get_project(db, data.project_id):
        raise ReferentialError(f"Project {data.project_id} not found")
    return create_wbs_item(db, data)

@router.get("/{item_id}", response_model=WbsItemOut)
def get_wbs_item(item_id: int, db: Session = Depends(get_db)):
    return require_wbs_item(db, item_id)

@router.patch("/{item_id}", response_model=WbsItemOut)
def patch_wbs_item(item_id: int, data: WbsItemUpdate, db: Session = Depends(get_db)):
    return update_wbs_item(db, require_wbs_item(db, item_id), data)

@router.patch("/{item_id}/progress", response_model=WbsItemOut)
def patch_progress(item_id: int, data: WbsProgressUpdate, db: Session = Depends(get_db)):
    return update_progress(db, require_wbs_item(db, item_id), data)

@router.delete("/{item_id}", status_code=204)
def remove_wbs_item(item_id: int, db: Session = Depends(get_db)):
    delete_wbs_item(db, require_wbs_item(db, item_id))

@router.get("/{item_id}/work-packages", response_model=list[WbsItemOut])
def get_work_packages(item_id: int, db: Session = Depends(get_db)):
    item = require_wbs_item(db, item_id)
    return list_work_packages(db, item.project_id, parent_id=item.id)

@router.get("/{item_id}/dependencies", response_model=list[DependencyOut])
def get_dependencies(item_id: int, db: Session = Depends(get_db)):
    require_wbs_item(db, item_id)
    return list_item_dependencies(db, item_id)

@router.get("/{item_id}/costs", response_model=list[CostEntryOut])
def get_costs(item_id: int, db: Session = Depends(get_db)):
    require_wbs_item(db, item_id)
    return list_cost_entries(db, item_id)

@router.get("/{item_id}/tasks", response_model=list[TaskOut])
def get_tasks(item_id: int, db: Session = Depends(get_db)):
    require_wbs_item(db, item_id)
    return list_activity_tasks(db, item_id)
