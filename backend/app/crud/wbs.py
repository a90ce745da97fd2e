from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import FieldError, NotFoundError, ReferentialError, ValidationError
from app.core.logging import logger
from app.db.models.wbs import WbsItem, WbsType
from app.schemas.wbs import WbsItemCreate, WbsItemOut, WbsItemUpdate, WbsNodeOut, WbsProgressUpdate
from app.services.wbs.hierarchy import (
    WbsNode,
    build_tree,
    check_budget_floor,
    check_child_budget,
    check_type_change,
    code_sort_key,
    place_item,
)
from app.services.wbs.rules import validate_wbs_item

def get_wbs_item(db: Session, item_id: int) -> WbsItem | None:
    return db.query(WbsItem).filter(WbsItem.id == item_id).one_or_none()

def require_wbs_item(db: Session, item_id: int) -> WbsItem:
    item = get_wbs_item(db, item_id)
    if not item:
        raise NotFoundError(f"WBS item {item_id} not found")
    return item

def list_wbs_items(db: Session, project_id: int) -> list[WbsItem]:
    items = db.query(WbsItem).filter(WbsItem.project_id == project_id).all()
    return sorted(items, key=lambda i: code_sort_key(i.code))

def list_children(db: Session, project_id: int, parent_id: int | None) -> list[WbsItem]:
    q = db.query(WbsItem).filter(WbsItem.project_id == project_id)
    if parent_id is None:
        q = q.filter(WbsItem.parent_id.is_(None))
    else:
        q = q.filter(WbsItem.parent_id == parent_id)
    return sorted(q.all(), key=lambda i: code_sort_key(i.code))

def list_work_packages(db: Session, project_id: int, parent_id: int | None = None) -> list[WbsItem]:
    q = db.query(WbsItem).filter(WbsItem.project_id == project_id, WbsItem.type == WbsType.work_package.value)
    if parent_id is not None:
        q = q.filter(WbsItem.parent_id == parent_id)
    return sorted(q.all(), key=lambda i: code_sort_key(i.code))


def _node_out(node: WbsNode) -> WbsNodeOut:
    return WbsNodeOut(
        **WbsItemOut.model_validate(node.item).model_dump(),
        rolled_up_budget=node.rolled_up_budget,
        rolled_up_actual=node.rolled_up_actual,
        children=[_node_out(c) for c in node.children],
    )

def wbs_tree(db: Session, project_id: int) -> list[WbsNodeOut]:
    return [_node_out(n) for n in build_tree(list_wbs_items(db, project_id))]


def create_wbs_item(db: Session, data: WbsItemCreate) -> WbsItem:
    parent = None
    if data.parent_id is not None:
        parent = get_wbs_item(db, data.parent_id)
        if parent is None or parent.project_id != data.project_id:
            raise ReferentialError(f"Parent WBS item {data.parent_id} not found in project {data.project_id}")

    payload = validate_wbs_item(data)
    siblings = list_children(db, data.project_id, data.parent_id)
    placement = place_item(payload.type, parent, siblings, settings.MAX_WBS_LEVEL, code=payload.code)
    if payload.type != WbsType.activity:
        budget_errors = check_child_budget(parent, siblings, payload.budgeted_cost)
        if budget_errors:
            raise ValidationError(budget_errors)

    taken = db.query(WbsItem.id).filter(WbsItem.project_id == data.project_id, WbsItem.code == placement.code).first()
    if taken:
        raise ReferentialError(f"WBS code '{placement.code}' already exists in this project")

    item = WbsItem(
        **payload.model_dump(exclude={"code", "type"}),
        type=payload.type.value,
        code=placement.code,
        level=placement.level,
        is_top_level=placement.is_top_level,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("wbs_item_created", wbs_item_id=item.id, project_id=item.project_id, code=item.code, type=item.type)
    return item


def update_wbs_item(db: Session, item: WbsItem, data: WbsItemUpdate) -> WbsItem:
    changes = data.model_dump(exclude_unset=True)
    nulls = [FieldError(k, f"{k} cannot be empty") for k in ("name", "type") if k in changes and changes[k] is None]
    if nulls:
        raise ValidationError(nulls)
    merged = {
        "project_id": item.project_id,
        "parent_id": item.parent_id,
        "name": item.name,
        "description": item.description,
        "type": WbsType(item.type),
        "code": item.code,
        "budgeted_cost": item.budgeted_cost,
        "start_date": item.start_date,
        "end_date": item.end_date,
        "duration": item.duration,
        **changes,
    }
    payload = validate_wbs_item(WbsItemCreate(**merged))

    parent = item.parent
    children = list(item.children)
    errors = check_type_change(item, parent, children, payload.type, item.is_top_level)
    if payload.type != WbsType.activity and payload.budgeted_cost != item.budgeted_cost:
        siblings = list_children(db, item.project_id, item.parent_id)
        errors += check_child_budget(parent, siblings, payload.budgeted_cost, exclude_id=item.id)
        errors += check_budget_floor(children, payload.budgeted_cost)
    if errors:
        raise ValidationError(errors)

    for k, v in payload.model_dump(exclude={"project_id", "parent_id", "code", "type"}).items():
        setattr(item, k, v)
    item.type = payload.type.value
    db.commit()
    db.refresh(item)
    return item


def update_progress(db: Session, item: WbsItem, data: WbsProgressUpdate) -> WbsItem:
    changes = data.model_dump(exclude_unset=True)
    start = changes.get("actual_start_date", item.actual_start_date)
    end = changes.get("actual_end_date", item.actual_end_date)
    if start and end and end < start:
        raise ValidationError([FieldError("actual_end_date", "actual_end_date cannot be before actual_start_date")])
    for k, v in changes.items():
        if v is None and k in ("percent_complete", "actual_cost"):
            v = Decimal("0")
        setattr(item, k, v)
    db.commit()
    db.refresh(item)
    return item


def delete_wbs_item(db: Session, item: WbsItem) -> None:
    if item.is_top_level:
        raise ReferentialError("Cannot delete top-level WBS items")
    db.delete(item)
    db.commit()
    logger.info("wbs_item_deleted", wbs_item_id=item.id, project_id=item.project_id, code=item.code)
