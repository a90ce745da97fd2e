import datetime as dt
from sqlalchemy import String, ForeignKey, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base
from app.db.models._mixins import TimestampMixin

class ImportRun(Base, TimestampMixin):
    __tablename__ = "import_run"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.id", ondelete="CASCADE"), index=True)

    kind: Mapped[str] = mapped_column(String(16), default="wbs")  # wbs|costs
    file_name: Mapped[str] = mapped_column(String(512))
    file_hash: Mapped[str] = mapped_column(String(64), index=True)
    status: Mapped[str] = mapped_column(String(32), default="running")  # running|success|success_with_errors|failed
    started_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    finished_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    rows_loaded: Mapped[int] = mapped_column(Integer, default=0)

    project = relationship("Project", back_populates="import_runs")
    errors = relationship(
        "ImportError",
        back_populates="import_run",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ImportError.id",
    )
