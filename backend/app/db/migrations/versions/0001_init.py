"""init

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    ]


def upgrade():
    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("budget", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        *_timestamps(),
    )

    op.create_table(
        "wbs_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("project.id", ondelete="CASCADE"), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("wbs_item.id", ondelete="CASCADE"), nullable=True),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("budgeted_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("actual_cost", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("percent_complete", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("actual_start_date", sa.Date(), nullable=True),
        sa.Column("actual_end_date", sa.Date(), nullable=True),
        sa.Column("is_top_level", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.UniqueConstraint("project_id", "code", name="uq_wbs_item_project_code"),
    )
    op.create_index("ix_wbs_item_project_id", "wbs_item", ["project_id"])
    op.create_index("ix_wbs_item_parent_id", "wbs_item", ["parent_id"])
    op.create_index("ix_wbs_item_code", "wbs_item", ["code"])

    op.create_table(
        "dependency",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("predecessor_id", sa.Integer(), sa.ForeignKey("wbs_item.id", ondelete="CASCADE"), nullable=False),
        sa.Column("successor_id", sa.Integer(), sa.ForeignKey("wbs_item.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False, server_default="FinishToStart"),
        sa.Column("lag", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("predecessor_id", "successor_id", name="uq_dependency_edge"),
    )
    op.create_index("ix_dependency_predecessor_id", "dependency", ["predecessor_id"])
    op.create_index("ix_dependency_successor_id", "dependency", ["successor_id"])

    op.create_table(
        "cost_entry",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("wbs_item_id", sa.Integer(), sa.ForeignKey("wbs_item.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("entry_date", sa.Date(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_cost_entry_wbs_item_id", "cost_entry", ["wbs_item_id"])
    op.create_index("ix_cost_entry_entry_date", "cost_entry", ["entry_date"])

    op.create_table(
        "task",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("activity_id", sa.Integer(), sa.ForeignKey("wbs_item.id", ondelete="CASCADE"), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("project.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("percent_complete", sa.Numeric(5, 2), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_task_activity_id", "task", ["activity_id"])
    op.create_index("ix_task_project_id", "task", ["project_id"])

    op.create_table(
        "import_run",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("project.id", ondelete="CASCADE"), nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False, server_default="wbs"),
        sa.Column("file_name", sa.String(length=512), nullable=False),
        sa.Column("file_hash", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rows_loaded", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_import_run_project_id", "import_run", ["project_id"])
    op.create_index("ix_import_run_file_hash", "import_run", ["file_hash"])

    op.create_table(
        "import_error",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("import_run_id", sa.Integer(), sa.ForeignKey("import_run.id", ondelete="CASCADE"), nullable=False),
        sa.Column("row_num", sa.Integer(), nullable=True),
        sa.Column("column", sa.String(length=128), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_import_error_import_run_id", "import_error", ["import_run_id"])


def downgrade():
    op.drop_table("import_error")
    op.drop_table("import_run")
    op.drop_table("task")
    op.drop_table("cost_entry")
    op.drop_table("dependency")
    op.drop_table("wbs_item")
    op.drop_table("project")
