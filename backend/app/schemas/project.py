import datetime as dt
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.db.models.project import Currency

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=256)
    description: str | None = None
    start_date: dt.date
    end_date: dt.date
    budget: Decimal = Field(..., ge=0)
    currency: Currency = Currency.usd

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=3, max_length=256)
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    budget: Decimal | None = Field(None, ge=0)
    currency: Currency | None = None

class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    start_date: dt.date
    end_date: dt.date
    budget: Decimal
    currency: str
    created_at: dt.datetime | None = None
