from enum import Enum
from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.models._mixins import TimestampMixin


class DependencyType(str, Enum):
    finish_to_start = "FinishToStart"
    start_to_start = "StartToStart"
    finish_to_finish = "FinishToFinish"
    start_to_finish = "StartToFinish"


class Dependency(Base, TimestampMixin):
    __tablename__ = "dependency"
    __table_args__ = (UniqueConstraint("predecessor_id", "successor_id", name="uq_dependency_edge"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    predecessor_id: Mapped[int] = mapped_column(ForeignKey("wbs_item.id", ondelete="CASCADE"), index=True)
    successor_id: Mapped[int] = mapped_column(ForeignKey("wbs_item.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(16), default=DependencyType.finish_to_start.value)
    lag: Mapped[int] = mapped_column(Integer, default=0)  # days

    predecessor = relationship("WbsItem", foreign_keys=[predecessor_id], back_populates="outgoing_dependencies")
    successor = relationship("WbsItem", foreign_keys=[successor_id], back_populates="incoming_dependencies")
