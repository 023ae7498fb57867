"""Report settings, validator settings and data collection queries

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 12:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

AutoString = sqlmodel.sql.sqltypes.AutoString


def upgrade() -> None:
    op.create_table(
        "report_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column("master_file_id", AutoString(length=255), nullable=False),
        sa.Column("prefix", sa.Integer(), nullable=True),
        sa.Column(
            "settings", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "source_validation_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", AutoString(length=200), nullable=False),
        sa.Column(
            "settings", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.add_column("reports", sa.Column("report_settings_id", sa.Integer(), nullable=True))
    op.add_column(
        "reports", sa.Column("source_validation_settings_id", sa.Integer(), nullable=True)
    )
    op.create_foreign_key(
        "fk_reports_report_settings",
        "reports",
        "report_settings",
        ["report_settings_id"],
        ["id"],
        ondelete="SET NULL",
    )
    op.create_foreign_key(
        "fk_reports_source_validation_settings",
        "reports",
        "source_validation_settings",
        ["source_validation_settings_id"],
        ["id"],
        ondelete="SET NULL",
    )

    op.create_table(
        "data_collection_queries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column(
            "query", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "report_data_collection_queries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("data_collection_query_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["data_collection_query_id"], ["data_collection_queries.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "report_id", "data_collection_query_id", name="uq_report_queries_report_query"
        ),
    )
    op.create_index(
        "ix_report_data_collection_queries_report_id",
        "report_data_collection_queries",
        ["report_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_report_data_collection_queries_report_id",
        table_name="report_data_collection_queries",
    )
    op.drop_table("report_data_collection_queries")
    op.drop_table("data_collection_queries")

    op.drop_constraint("fk_reports_source_validation_settings", "reports", type_="foreignkey")
    op.drop_constraint("fk_reports_report_settings", "reports", type_="foreignkey")
    op.drop_column("reports", "source_validation_settings_id")
    op.drop_column("reports", "report_settings_id")

    op.drop_table("source_validation_settings")
    op.drop_table("report_settings")
