"""email record and oauth2 binding tables

Revision ID: 0004
Revises: 0003
Create Date: 2025-08-04 10:30:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0004"
down_revision: Union[str, None] = "0003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntPK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
Timestamp = sa.TIMESTAMP(timezone=True)


def upgrade() -> None:
    op.create_table(
        "sys_email_record",
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column("to_email", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_html", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("error_msg", sa.Text(), nullable=True),
        sa.Column("send_time", Timestamp, nullable=True),
        sa.Column("created_time", Timestamp, nullable=False),
    )
    op.create_index(op.f("ix_sys_email_record_to_email"), "sys_email_record", ["to_email"])
    op.create_index(op.f("ix_sys_email_record_status"), "sys_email_record", ["status"])

    op.create_table(
        "sys_oauth_user_bind",
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("provider", sa.String(length=50), nullable=False),
        sa.Column("provider_user_id", sa.String(length=255), nullable=False),
        sa.Column("access_token", sa.String(length=500), nullable=True),
        sa.Column("refresh_token", sa.String(length=500), nullable=True),
        sa.Column("expires_at", Timestamp, nullable=True),
        sa.Column("user_info", sa.Text(), nullable=True),
        sa.Column("created_time", Timestamp, nullable=False),
        sa.Column("updated_time", Timestamp, nullable=True),
        sa.UniqueConstraint("user_id", "provider", name="uk_oauth_user_provider"),
        sa.UniqueConstraint("provider", "provider_user_id", name="uk_oauth_provider_user"),
    )
    op.create_index(op.f("ix_sys_oauth_user_bind_user_id"), "sys_oauth_user_bind", ["user_id"])


def downgrade() -> None:
    op.drop_table("sys_oauth_user_bind")
    op.drop_table("sys_email_record")
