from decimal import Decimal

from sqlalchemy.orm import Session

from app.crud.projects import require_project
from app.crud.wbs import list_wbs_items
from app.services.wbs.hierarchy import build_tree

ZERO = Decimal("0")


def _percent(actual: Decimal, budget: Decimal) -> float | None:
    if not budget:
        return None
    return round(float(actual / budget * 100), 2)


def cost_summary(db: Session, project_id: int) -> dict:
    """Budget against actual cost for a project and each of its top-level items.

    Top-level budgets are what the project is planned against, so children are
    not added on top of them. Actual cost sums every item's ledger.
    """
    project = require_project(db, project_id)
    roots = build_tree(list_wbs_items(db, project_id))

    rows = []
    for node in roots:
        budget = node.item.budgeted_cost or ZERO
        actual = node.rolled_up_actual
        rows.append(
            {
                "wbs_item_id": node.item.id,
                "code": node.item.code,
                "name": node.item.name,
                "budgeted_cost": budget,
                "actual_cost": actual,
                "variance": budget - actual,
                "percent_spent": _percent(actual, budget),
            }
        )

    total_budgeted = sum((r["budgeted_cost"] for r in rows), ZERO)
    total_actual = sum((r["actual_cost"] for r in rows), ZERO)
    return {
        "project_id": project.id,
        "currency": project.currency,
        "project_budget": project.budget,
        "total_budgeted": total_budgeted,
        "total_actual": total_actual,
        "variance": total_budgeted - total_actual,
        "percent_spent": _percent(total_actual, total_budgeted),
        "rows": rows,
    }
