from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.schemas.dependencies import DependencyCreate, DependencyOut
from app.crud.dependencies import create_dependency, delete_dependency, require_dependency

router = APIRouter()

@router.post("", response_model=DependencyOut, status_code=201)
def post_dependency(data: DependencyCreate, db: Session = Depends(get_db)):
    return create_dependency(db, data)

@router.delete("/{dependency_id}", status_code=204)
def remove_dependency(dependency_id: int, db: Session = Depends(get_db)):
    delete_dependency(db, require_dependency(db, dependency_id))
