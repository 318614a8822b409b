"""code generator and schedule job tables

Revision ID: 0005
Revises: 0004
Create Date: 2025-08-04 10:40:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0005"
down_revision: Union[str, None] = "0004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntPK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
Timestamp = sa.TIMESTAMP(timezone=True)


def _common() -> list:
    return [
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column("created_time", Timestamp, nullable=False),
        sa.Column("updated_time", Timestamp, nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "gen_business",
        *_common(),
        sa.Column("app_name", sa.String(length=64), nullable=False),
        sa.Column("table_name", sa.String(length=255), nullable=False),
        sa.Column("doc_comment", sa.String(length=255), nullable=False),
        sa.Column("table_comment", sa.String(length=255), nullable=True),
        sa.Column("class_name", sa.String(length=64), nullable=True),
        sa.Column("schema_name", sa.String(length=64), nullable=True),
        sa.Column("filename", sa.String(length=64), nullable=True),
        sa.Column("default_datetime_column", sa.Boolean(), nullable=False),
        sa.Column("api_version", sa.String(length=20), nullable=False),
        sa.Column("gen_path", sa.String(length=255), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.UniqueConstraint("table_name"),
    )

    op.create_table(
        "gen_column",
        *_common(),
        sa.Column("business_id", sa.BigInteger(), nullable=False),
        sa.Column("column_name", sa.String(length=64), nullable=False),
        sa.Column("column_comment", sa.String(length=255), nullable=True),
        sa.Column("column_type", sa.String(length=32), nullable=False),
        sa.Column("python_type", sa.String(length=32), nullable=True),
        sa.Column("ts_type", sa.String(length=32), nullable=True),
        sa.Column("required", sa.Boolean(), nullable=False),
        sa.Column("is_pk", sa.Boolean(), nullable=False),
        sa.Column("is_fk", sa.Boolean(), nullable=False),
        sa.Column("is_query", sa.Boolean(), nullable=False),
        sa.Column("is_list", sa.Boolean(), nullable=False),
        sa.Column("is_form", sa.Boolean(), nullable=False),
        sa.Column("query_type", sa.String(length=16), nullable=True),
        sa.Column("form_type", sa.String(length=16), nullable=True),
        sa.Column("sort", sa.Integer(), nullable=False),
    )
    op.create_index(op.f("ix_gen_column_business_id"), "gen_column", ["business_id"])

    op.create_table(
        "sys_schedule_job",
        *_common(),
        sa.Column("job_name", sa.String(length=64), nullable=False),
        sa.Column("job_group", sa.String(length=64), nullable=False),
        sa.Column("invoke_target", sa.String(length=500), nullable=False),
        sa.Column("cron_expression", sa.String(length=128), nullable=False),
        sa.Column("misfire_policy", sa.Integer(), nullable=False),
        sa.Column("concurrent", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("remark", sa.Text(), nullable=True),
    )
    op.create_index(op.f("ix_sys_schedule_job_job_name"), "sys_schedule_job", ["job_name"])


def downgrade() -> None:
    op.drop_table("sys_schedule_job")
    op.drop_table("gen_column")
    op.drop_table("gen_business")
