from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.errors import FieldError, NotFoundError, ReferentialError, ValidationError
from app.db.models.cost_entry import CostEntry
from app.db.models.wbs import WbsItem, WbsType
from app.schemas.costs import CostEntryCreate

COST_TARGET_MESSAGE = "Cost entries can only be recorded against Summary or WorkPackage items"

def list_cost_entries(db: Session, wbs_item_id: int) -> list[CostEntry]:
    return (
        db.query(CostEntry)
        .filter(CostEntry.wbs_item_id == wbs_item_id)
        .order_by(CostEntry.entry_date, CostEntry.id)
        .all()
    )

def require_cost_entry(db: Session, entry_id: int) -> CostEntry:
    entry = db.query(CostEntry).filter(CostEntry.id == entry_id).one_or_none()
    if not entry:
        raise NotFoundError(f"Cost entry {entry_id} not found")
    return entry

def create_cost_entry(db: Session, data: CostEntryCreate) -> CostEntry:
    item = db.query(WbsItem).filter(WbsItem.id == data.wbs_item_id).one_or_none()
    if not item:
        raise ReferentialError(f"WBS item {data.wbs_item_id} not found")
    if item.type == WbsType.activity.value:
        raise ValidationError([FieldError("wbs_item_id", COST_TARGET_MESSAGE)])

    entry = CostEntry(
        wbs_item_id=item.id,
        amount=data.amount,
        description=data.description,
        entry_date=data.entry_date,
    )
    item.actual_cost = (item.actual_cost or Decimal("0")) + data.amount
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry

def delete_cost_entry(db: Session, entry: CostEntry) -> None:
    item = entry.wbs_item
    item.actual_cost = (item.actual_cost or Decimal("0")) - entry.amount
    db.delete(entry)
    db.commit()
