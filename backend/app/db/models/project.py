import datetime as dt
from decimal import Decimal
from enum import Enum
from sqlalchemy import String, Text, Date, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.models._mixins import TimestampMixin

class Currency(str, Enum):
    usd = "USD"
    eur = "EUR"
    sar = "SAR"

class Project(Base, TimestampMixin):
    __tablename__ = "project"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(256))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[dt.date] = mapped_column(Date)
    end_date: Mapped[dt.date] = mapped_column(Date)
    budget: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    currency: Mapped[str] = mapped_column(String(3), default=Currency.usd.value)

    wbs_items = relationship(
        "WbsItem",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WbsItem.code",
    )
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)
    import_runs = relationship("ImportRun", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)
