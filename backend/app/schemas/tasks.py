import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaskBase(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=256)
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = Field(None, ge=1)
    percent_complete: Decimal | None = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def _check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class TaskCreate(TaskBase):
    activity_id: int
    name: str = Field(..., min_length=1, max_length=256)


class TaskUpdate(TaskBase):
    pass


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_id: int
    project_id: int
    name: str
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = None
    percent_complete: Decimal
    created_at: dt.datetime | None = None
