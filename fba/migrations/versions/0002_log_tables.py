"""log tables (login, operation, access)

Revision ID: 0002
Revises: 0001
Create Date: 2025-08-04 10:10:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntPK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
Timestamp = sa.TIMESTAMP(timezone=True)


def upgrade() -> None:
    op.create_table(
        "sys_login_log",
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("ip", sa.String(length=64), nullable=False),
        sa.Column("os", sa.String(length=64), nullable=True),
        sa.Column("browser", sa.String(length=64), nullable=True),
        sa.Column("device", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("msg", sa.String(length=255), nullable=False),
        sa.Column("login_time", Timestamp, nullable=False),
        sa.Column("created_time", Timestamp, nullable=False),
    )
    op.create_index(op.f("ix_sys_login_log_user_id"), "sys_login_log", ["user_id"])
    op.create_index(op.f("ix_sys_login_log_username"), "sys_login_log", ["username"])

    op.create_table(
        "sys_opera_log",
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column("trace_id", sa.String(length=64), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("method", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(length=128), nullable=False),
        sa.Column("business_type", sa.String(length=16), nullable=False),
        sa.Column("path", sa.String(length=512), nullable=False),
        sa.Column("ip", sa.String(length=64), nullable=False),
        sa.Column("os", sa.String(length=64), nullable=True),
        sa.Column("browser", sa.String(length=64), nullable=True),
        sa.Column("device", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("args", sa.Text(), nullable=True),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=16), nullable=False),
        sa.Column("msg", sa.Text(), nullable=True),
        sa.Column("cost_time", sa.Float(), nullable=False),
        sa.Column("opera_time", Timestamp, nullable=False),
        sa.Column("created_time", Timestamp, nullable=False),
    )
    op.create_index(op.f("ix_sys_opera_log_trace_id"), "sys_opera_log", ["trace_id"])
    op.create_index(op.f("ix_sys_opera_log_username"), "sys_opera_log", ["username"])

    op.create_table(
        "sys_access_log",
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column("trace_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("user_name", sa.String(length=64), nullable=True),
        sa.Column("dept_id", sa.BigInteger(), nullable=True),
        sa.Column("dept_name", sa.String(length=64), nullable=True),
        sa.Column("method", sa.String(length=16), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("query_params", sa.Text(), nullable=True),
        sa.Column("request_body", sa.Text(), nullable=True),
        sa.Column("status_code", sa.Integer(), nullable=False),
        sa.Column("response_body", sa.Text(), nullable=True),
        sa.Column("client_ip", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("os", sa.String(length=64), nullable=True),
        sa.Column("browser", sa.String(length=64), nullable=True),
        sa.Column("device_type", sa.String(length=64), nullable=True),
        sa.Column("referer", sa.String(length=1024), nullable=True),
        sa.Column("cost_time", sa.Integer(), nullable=False),
        sa.Column("is_error", sa.Boolean(), nullable=False),
        sa.Column("error_msg", sa.Text(), nullable=True),
        sa.Column("access_time", Timestamp, nullable=False),
        sa.Column("created_time", Timestamp, nullable=False),
    )
    op.create_index(op.f("ix_sys_access_log_trace_id"), "sys_access_log", ["trace_id"])
    op.create_index(op.f("ix_sys_access_log_user_name"), "sys_access_log", ["user_name"])
    op.create_index(op.f("ix_sys_access_log_is_error"), "sys_access_log", ["is_error"])


def downgrade() -> None:
    op.drop_table("sys_access_log")
    op.drop_table("sys_opera_log")
    op.drop_table("sys_login_log")
