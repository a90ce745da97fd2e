import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, ConfigDict

class CostEntryCreate(BaseModel):
    wbs_item_id: int
    amount: Decimal
    description: str | None = None
    entry_date: dt.date

class CostEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    wbs_item_id: int
    amount: Decimal
    description: str | None = None
    entry_date: dt.date
    created_at: dt.datetime | None = None

class CostImportOut(BaseModel):
    created: list[CostEntryOut]
    errors: list[str]
