from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.schemas.project import ProjectCreate, ProjectOut, ProjectUpdate
from app.schemas.wbs import WbsItemOut, WbsNodeOut
from app.schemas.dependencies import DependencyOut
from app.schemas.tasks import TaskOut
from app.crud.projects import create_project, delete_project, list_projects, require_project, update_project
from app.crud.wbs import list_wbs_items, list_work_packages, wbs_tree
from app.crud.dependencies import list_project_dependencies
from app.crud.tasks import list_project_tasks

router = APIRouter()

@router.get("", response_model=list[ProjectOut])
def get_projects(db: Session = Depends(get_db)):
    return list_projects(db)

@router.post("", response_model=ProjectOut, status_code=201)
def post_project(data: ProjectCreate, db: Session = Depends(get_db)):
    return create_project(db, data)

@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, db: Session = Depends(get_db)):
    return require_project(db, project_id)

@router.put("/{project_id}", response_model=ProjectOut)
def put_project(project_id: int, data: ProjectUpdate, db: Session = Depends(get_db)):
    return update_project(db, require_project(db, project_id), data)

@router.delete("/{project_id}", status_code=204)
def remove_project(project_id: int, db: Session = Depends(get_db)):
    delete_project(db, require_project(db, project_id))


@router.get("/{project_id}/wbs", response_model=list[WbsItemOut])
def get_project_wbs(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    return list_wbs_items(db, project_id)

@router.get("/{project_id}/wbs/tree", response_model=list[WbsNodeOut])
def get_project_wbs_tree(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    return wbs_tree(db, project_id)

@router.get("/{project_id}/work-packages", response_model=list[WbsItemOut])
def get_project_work_packages(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    return list_work_packages(db, project_id)

@router.get("/{project_id}/dependencies", response_model=list[DependencyOut])
def get_project_dependencies(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    return list_project_dependencies(db, project_id)

@router.get("/{project_id}/tasks", response_model=list[TaskOut])
def get_project_tasks(project_id: int, db: Session = Depends(get_db)):
    require_project(db, project_id)
    return list_project_tasks(db, project_id)
