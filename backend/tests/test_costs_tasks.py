import datetime as dt
from decimal import Decimal

import pytest

from app.core.errors import ReferentialError, ValidationError
from app.crud.costs import create_cost_entry, delete_cost_entry, list_cost_entries
from app.crud.tasks import create_task, list_activity_tasks, update_task
from app.schemas.costs import CostEntryCreate
from app.schemas.tasks import TaskCreate, TaskUpdate


def _entry(item_id, amount, day=1):
    return CostEntryCreate(wbs_item_id=item_id, amount=Decimal(amount), entry_date=dt.date(2024, 2, day))


def test_cost_entries_move_actual_cost(db, make_item):
    top = make_item("Summary", budget=Decimal("1000"))
    wp = make_item("WorkPackage", parent=top, budget=Decimal("500"))
    e1 = create_cost_entry(db, _entry(wp.id, "120.25", 3))
    create_cost_entry(db, _entry(wp.id, "30", 1))
    assert wp.actual_cost == Decimal("150.25")
    assert [e.amount for e in list_cost_entries(db, wp.id)] == [Decimal("30"), Decimal("120.25")]

    delete_cost_entry(db, e1)
    db.refresh(wp)
    assert wp.actual_cost == Decimal("30")


def test_cost_entry_rejects_activity(db, make_item):
    top = make_item("Summary", budget=Decimal("1000"))
    wp = make_item("WorkPackage", parent=top, budget=Decimal("500"))
    act = make_item("Activity", parent=wp)
    with pytest.raises(ValidationError) as ei:
        create_cost_entry(db, _entry(act.id, "10"))
    assert ei.value.errors[0].path == "wbs_item_id"
    with pytest.raises(ReferentialError):
        create_cost_entry(db, _entry(9999, "10"))


def test_tasks_attach_to_activities(db, project, make_item):
    top = make_item("Summary", budget=Decimal("1000"))
    wp = make_item("WorkPackage", parent=top, budget=Decimal("500"))
    act = make_item("Activity", parent=wp)

    t = create_task(db, TaskCreate(activity_id=act.id, name="Order formwork", duration=3))
    assert t.project_id == project.id
    assert t.percent_complete == 0
    assert list_activity_tasks(db, act.id) == [t]

    with pytest.raises(ValidationError):
        create_task(db, TaskCreate(activity_id=wp.id, name="Misplaced"))

    t = update_task(db, t, TaskUpdate(start_date=dt.date(2024, 3, 5), percent_complete=Decimal("40")))
    assert t.percent_complete == Decimal("40")
    with pytest.raises(ValidationError):
        update_task(db, t, TaskUpdate(end_date=dt.date(2024, 3, 1)))
