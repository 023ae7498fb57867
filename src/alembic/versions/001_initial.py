"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

AutoString = sqlmodel.sql.sqltypes.AutoString


def _analyze_columns() -> list[sa.SchemaItem]:
    """Columns shared by every analysis table."""
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_name", AutoString(length=200), nullable=False),
        sa.Column("use_case", AutoString(length=200), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="progress"),
        sa.Column("current_step", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("execution_id", AutoString(length=255), nullable=True),
        sa.Column("execution_status", AutoString(length=20), nullable=True),
        sa.Column("execution_step", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    ]


def _miner_columns() -> list[sa.Column]:
    return [
        sa.Column("business_line", AutoString(length=500), nullable=True),
        sa.Column("country", AutoString(length=100), nullable=True),
        sa.Column("timeline", AutoString(length=100), nullable=True),
        sa.Column("language", AutoString(length=50), nullable=True),
        sa.Column("additional_information", AutoString(), nullable=True),
    ]


def _index_analyze_table(table: str) -> None:
    op.create_index(f"ix_{table}_user_id", table, ["user_id"], unique=False)
    op.create_index(f"ix_{table}_execution_id", table, ["execution_id"], unique=False)


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", AutoString(length=255), nullable=False),
        sa.Column("hashed_password", AutoString(length=255), nullable=False),
        sa.Column("company_name", AutoString(length=200), nullable=False),
        sa.Column("first_name", AutoString(length=100), nullable=True),
        sa.Column("last_name", AutoString(length=100), nullable=True),
        sa.Column("logo", AutoString(length=500), nullable=True),
        sa.Column("role", AutoString(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "usercases",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # 2. Analyses, one table per workflow family
    op.create_table(
        "analyzes",
        *_analyze_columns(),
        *_miner_columns(),
        sa.Column("result_text", AutoString(), nullable=True),
        sa.Column("summary", AutoString(), nullable=True),
        sa.Column("improvement_leverages", AutoString(), nullable=True),
        sa.Column("head_to_head", AutoString(), nullable=True),
        sa.Column("sources", AutoString(), nullable=True),
    )
    _index_analyze_table("analyzes")

    op.create_table(
        "sales_miner_analyzes",
        *_analyze_columns(),
        *_miner_columns(),
        sa.Column("result_text", AutoString(), nullable=True),
        sa.Column("yaml_file", AutoString(length=500), nullable=True),
    )
    _index_analyze_table("sales_miner_analyzes")

    op.create_table(
        "vitelis_sales_analyzes",
        *_analyze_columns(),
        sa.Column("url", AutoString(length=500), nullable=True),
        sa.Column("industry_id", sa.Integer(), nullable=True),
        sa.Column("docx_file", AutoString(length=500), nullable=True),
        sa.Column("company_id", sa.Integer(), nullable=True),
        sa.Column("report_id", sa.Integer(), nullable=True),
        sa.Column("generated_report_id", AutoString(length=255), nullable=True),
    )
    _index_analyze_table("vitelis_sales_analyzes")

    # 3. Deep-dive reports
    op.create_table(
        "industries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column("url", AutoString(length=500), nullable=True),
        sa.Column("industry_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["industry_id"], ["industries.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_companies_name", "companies", ["name"], unique=False)

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column("description", AutoString(), nullable=True),
        sa.Column("use_case", AutoString(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "report_companies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "report_id", "company_id", name="uq_report_companies_report_company"
        ),
    )
    op.create_index(
        "ix_report_companies_report_id", "report_companies", ["report_id"], unique=False
    )

    # 4. Generation steps and the status matrix
    op.create_table(
        "report_generation_steps",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column("url", AutoString(length=500), nullable=False),
        sa.Column("dependency", AutoString(length=200), nullable=True),
        sa.Column("settings", postgresql.JSONB(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "report_steps",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("step_id", sa.Integer(), nullable=False),
        sa.Column("step_order", sa.Integer(), nullable=False, server_default="1"),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["step_id"], ["report_generation_steps.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("report_id", "step_id", name="uq_report_steps_report_step"),
    )
    op.create_index("ix_report_steps_report_id", "report_steps", ["report_id"], unique=False)

    op.create_table(
        "report_step_statuses",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("step_id", sa.Integer(), nullable=False),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="PENDING"),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["step_id"], ["report_generation_steps.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "report_id", "company_id", "step_id", name="uq_report_step_statuses_cell"
        ),
    )
    op.create_index(
        "ix_report_step_statuses_report_id", "report_step_statuses", ["report_id"], unique=False
    )

    op.create_table(
        "report_orchestrator",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="PENDING"),
        sa.Column("metadata", postgresql.JSONB(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("report_id"),
    )

    # 5. Chats
    op.create_table(
        "chats",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("preview", AutoString(length=500), nullable=True),
        sa.Column("message_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_message", AutoString(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chats_user_id", "chats", ["user_id"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("chat_id", sa.Uuid(), nullable=False),
        sa.Column("content", AutoString(), nullable=False),
        sa.Column("role", AutoString(length=20), nullable=False, server_default="user"),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_chat_id", "messages", ["chat_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_messages_chat_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_chats_user_id", table_name="chats")
    op.drop_table("chats")

    op.drop_table("report_orchestrator")
    op.drop_index("ix_report_step_statuses_report_id", table_name="report_step_statuses")
    op.drop_table("report_step_statuses")
    op.drop_index("ix_report_steps_report_id", table_name="report_steps")
    op.drop_table("report_steps")
    op.drop_table("report_generation_steps")

    op.drop_index("ix_report_companies_report_id", table_name="report_companies")
    op.drop_table("report_companies")
    op.drop_table("reports")
    op.drop_index("ix_companies_name", table_name="companies")
    op.drop_table("companies")
    op.drop_table("industries")

    for table in ("vitelis_sales_analyzes", "sales_miner_analyzes", "analyzes"):
        op.drop_index(f"ix_{table}_execution_id", table_name=table)
        op.drop_index(f"ix_{table}_user_id", table_name=table)
        op.drop_table(table)

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
