import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.db.models.wbs import WbsType


class WbsItemCreate(BaseModel):
    project_id: int
    parent_id: int | None = None
    name: str = Field(..., min_length=1, max_length=256)
    description: str | None = None
    type: WbsType
    # assigned from the tree position when omitted
    code: str | None = Field(None, max_length=64)
    budgeted_cost: Decimal | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = None


class WbsItemUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=256)
    description: str | None = None
    type: WbsType | None = None
    budgeted_cost: Decimal | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = None


class WbsProgressUpdate(BaseModel):
    percent_complete: Decimal | None = Field(None, ge=0, le=100)
    actual_cost: Decimal | None = Field(None, ge=0)
    actual_start_date: dt.date | None = None
    actual_end_date: dt.date | None = None

    @model_validator(mode="after")
    def _check_dates(self):
        if self.actual_start_date and self.actual_end_date and self.actual_end_date < self.actual_start_date:
            raise ValueError("actual_end_date cannot be before actual_start_date")
        return self


class WbsItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    parent_id: int | None = None
    name: str
    description: str | None = None
    level: int
    code: str
    type: WbsType
    budgeted_cost: Decimal
    actual_cost: Decimal
    percent_complete: Decimal
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = None
    actual_start_date: dt.date | None = None
    actual_end_date: dt.date | None = None
    is_top_level: bool
    created_at: dt.datetime | None = None


class WbsNodeOut(WbsItemOut):
    rolled_up_budget: Decimal
    rolled_up_actual: Decimal
    children: list["WbsNodeOut"] = []


WbsNodeOut.model_rebuild()
