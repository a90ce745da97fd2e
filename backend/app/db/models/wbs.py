import datetime as dt
from decimal import Decimal
from enum import Enum
from sqlalchemy import String, Text, ForeignKey, Integer, Date, Numeric, Boolean, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.models._mixins import TimestampMixin

class WbsType(str, Enum):
    summary = "Summary"
    work_package = "WorkPackage"
    activity = "Activity"

class WbsItem(Base, TimestampMixin):
    __tablename__ = "wbs_item"
    __table_args__ = (UniqueConstraint("project_id", "code", name="uq_wbs_item_project_code"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)
    parent_id: Mapped[int | None] = mapped_column(ForeignKey("wbs_item.id", ondelete="CASCADE"), nullable=True, index=True)

    name: Mapped[str] = mapped_column(String(256))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer)
    code: Mapped[str] = mapped_column(String(64), index=True)  # dotted path, e.g. "1.2.3"
    type: Mapped[str] = mapped_column(String(16))

    budgeted_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    actual_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    percent_complete: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))

    # Activities only
    start_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    actual_start_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    actual_end_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    is_top_level: Mapped[bool] = mapped_column(Boolean, default=False)

    project = relationship("Project", back_populates="wbs_items")
    parent = relationship("WbsItem", remote_side="WbsItem.id", back_populates="children")
    children = relationship("WbsItem", back_populates="parent", cascade="all, delete-orphan", passive_deletes=True)

    cost_entries = relationship("CostEntry", back_populates="wbs_item", cascade="all, delete-orphan", passive_deletes=True)
    outgoing_dependencies = relationship(
        "Dependency",
        foreign_keys="Dependency.predecessor_id",
        back_populates="predecessor",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    incoming_dependencies = relationship(
        "Dependency",
        foreign_keys="Dependency.successor_id",
        back_populates="successor",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    tasks = relationship("Task", back_populates="activity", cascade="all, delete-orphan", passive_deletes=True)
