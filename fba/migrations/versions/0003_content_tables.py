"""file, notice, config and dict tables

Revision ID: 0003
Revises: 0002
Create Date: 2025-08-04 10:20:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0003"
down_revision: Union[str, None] = "0002"
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
        "sys_file_info",
        *_common(),
        sa.Column("original_name", sa.String(length=255), nullable=False),
        sa.Column("file_name", sa.String(length=64), nullable=False),
        sa.Column("file_path", sa.String(length=255), nullable=False),
        sa.Column("suffix", sa.String(length=32), nullable=True),
        sa.Column("content_type", sa.String(length=128), nullable=True),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("sha256", sa.String(length=64), nullable=False),
        sa.Column("download_count", sa.Integer(), nullable=False),
        sa.Column("uploader_id", sa.BigInteger(), nullable=True),
        sa.Column("uploader_name", sa.String(length=64), nullable=True),
        sa.Column("del_flag", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index(op.f("ix_sys_file_info_original_name"), "sys_file_info", ["original_name"])
    op.create_index(op.f("ix_sys_file_info_content_type"), "sys_file_info", ["content_type"])
    op.create_index(op.f("ix_sys_file_info_sha256"), "sys_file_info", ["sha256"])

    op.create_table(
        "sys_notice",
        *_common(),
        sa.Column("title", sa.String(length=64), nullable=False),
        sa.Column("type", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
    )
    op.create_index(op.f("ix_sys_notice_title"), "sys_notice", ["title"])

    op.create_table(
        "sys_config",
        *_common(),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("is_frontend", sa.Boolean(), nullable=False),
        sa.Column("remark", sa.String(length=255), nullable=True),
        sa.UniqueConstraint("key"),
    )
    op.create_index(op.f("ix_sys_config_type"), "sys_config", ["type"])

    op.create_table(
        "sys_dict_type",
        *_common(),
        sa.Column("name", sa.String(length=32), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.UniqueConstraint("code"),
    )

    op.create_table(
        "sys_dict_data",
        *_common(),
        sa.Column("label", sa.String(length=64), nullable=False),
        sa.Column("value", sa.String(length=64), nullable=False),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("type_id", sa.BigInteger(), nullable=False),
        sa.Column("type_code", sa.String(length=32), nullable=False),
        sa.Column("is_default", sa.String(length=1), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("remark", sa.Text(), nullable=True),
    )
    op.create_index(op.f("ix_sys_dict_data_type_id"), "sys_dict_data", ["type_id"])
    op.create_index(op.f("ix_sys_dict_data_type_code"), "sys_dict_data", ["type_code"])


def downgrade() -> None:
    op.drop_table("sys_dict_data")
    op.drop_table("sys_dict_type")
    op.drop_table("sys_config")
    op.drop_table("sys_notice")
    op.drop_table("sys_file_info")
