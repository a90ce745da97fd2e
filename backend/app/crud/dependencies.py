from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ReferentialError
from app.db.models.dependency import Dependency
from app.db.models.wbs import WbsItem
from app.schemas.dependencies import DependencyCreate
from app.services.wbs.graph import check_new_dependency

def list_project_dependencies(db: Session, project_id: int) -> list[Dependency]:
    return (
        db.query(Dependency)
        .join(WbsItem, Dependency.predecessor_id == WbsItem.id)
        .filter(WbsItem.project_id == project_id)
        .order_by(Dependency.id)
        .all()
    )

def list_item_dependencies(db: Session, item_id: int) -> list[Dependency]:
    return (
        db.query(Dependency)
        .filter(or_(Dependency.predecessor_id == item_id, Dependency.successor_id == item_id))
        .order_by(Dependency.id)
        .all()
    )

def _endpoint(db: Session, item_id: int) -> WbsItem:
    item = db.query(WbsItem).filter(WbsItem.id == item_id).one_or_none()
    if not item:
        raise ReferentialError(f"WBS item {item_id} not found")
    return item

def create_dependency(db: Session, data: DependencyCreate) -> Dependency:
    predecessor = _endpoint(db, data.predecessor_id)
    successor = _endpoint(db, data.successor_id)
    edges = [(d.predecessor_id, d.successor_id) for d in list_project_dependencies(db, predecessor.project_id)]
    check_new_dependency(predecessor, successor, edges)

    dep = Dependency(
        predecessor_id=predecessor.id,
        successor_id=successor.id,
        type=data.type.value,
        lag=data.lag,
    )
    db.add(dep)
    db.commit()
    db.refresh(dep)
    return dep

def require_dependency(db: Session, dependency_id: int) -> Dependency:
    dep = db.query(Dependency).filter(Dependency.id == dependency_id).one_or_none()
    if not dep:
        raise NotFoundError(f"Dependency {dependency_id} not found")
    return dep

def delete_dependency(db: Session, dep: Dependency) -> None:
    db.delete(dep)
    db.commit()
