from decimal import Decimal
from pydantic import BaseModel

class CostSummaryRow(BaseModel):
    wbs_item_id: int
    code: str
    name: str
    budgeted_cost: Decimal
    actual_cost: Decimal
    variance: Decimal
    percent_spent: float | None

class CostSummaryOut(BaseModel):
    project_id: int
    currency: str
    project_budget: Decimal
    total_budgeted: Decimal
    total_actual: Decimal
    variance: Decimal
    percent_spent: float | None
    rows: list[CostSummaryRow]
