"""system tables (dept, user, role, permission, user_role, role_permission)

Revision ID: 0001
Revises:
Create Date: 2025-08-04 10:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BigIntPK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _pk() -> sa.Column:
    return sa.Column("id", BigIntPK, primary_key=True, autoincrement=True)


def _timestamps() -> list:
    return [
        sa.Column("created_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_time", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def _del_flag() -> sa.Column:
    return sa.Column("del_flag", sa.Integer(), nullable=False, server_default="0")


def upgrade() -> None:
    op.create_table(
        "sys_dept",
        _pk(),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("parent_id", sa.BigInteger(), nullable=True),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("leader", sa.String(length=32), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=64), nullable=True),
        sa.Column("status", sa.Integer(), nullable=False),
        *_timestamps(),
        _del_flag(),
    )
    op.create_index(op.f("ix_sys_dept_parent_id"), "sys_dept", ["parent_id"])

    op.create_table(
        "sys_user",
        _pk(),
        sa.Column("username", sa.String(length=32), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("nickname", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=64), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("avatar", sa.String(length=255), nullable=True),
        sa.Column("dept_id", sa.BigInteger(), nullable=True),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("gender", sa.Integer(), nullable=False),
        sa.Column("is_super", sa.Boolean(), nullable=False),
        sa.Column("last_login_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("last_login_ip", sa.String(length=64), nullable=True),
        *_timestamps(),
        _del_flag(),
        sa.UniqueConstraint("username"),
    )
    op.create_index(op.f("ix_sys_user_dept_id"), "sys_user", ["dept_id"])

    op.create_table(
        "sys_role",
        _pk(),
        sa.Column("name", sa.String(length=32), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("is_system", sa.Boolean(), nullable=False),
        *_timestamps(),
        _del_flag(),
        sa.UniqueConstraint("code"),
    )

    op.create_table(
        "sys_permission",
        _pk(),
        sa.Column("parent_id", sa.BigInteger(), nullable=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("code", sa.String(length=128), nullable=False),
        sa.Column("type", sa.Integer(), nullable=False),
        sa.Column("path", sa.String(length=255), nullable=True),
        sa.Column("component", sa.String(length=255), nullable=True),
        sa.Column("icon", sa.String(length=64), nullable=True),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        *_timestamps(),
        _del_flag(),
        sa.UniqueConstraint("code"),
    )
    op.create_index(op.f("ix_sys_permission_parent_id"), "sys_permission", ["parent_id"])

    op.create_table(
        "sys_user_role",
        _pk(),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("role_id", sa.BigInteger(), nullable=False),
        sa.Column("created_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "role_id", name="uk_user_role"),
    )
    op.create_index(op.f("ix_sys_user_role_user_id"), "sys_user_role", ["user_id"])
    op.create_index(op.f("ix_sys_user_role_role_id"), "sys_user_role", ["role_id"])

    op.create_table(
        "sys_role_permission",
        _pk(),
        sa.Column("role_id", sa.BigInteger(), nullable=False),
        sa.Column("permission_id", sa.BigInteger(), nullable=False),
        sa.Column("created_time", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint("role_id", "permission_id", name="uk_role_permission"),
    )
    op.create_index(op.f("ix_sys_role_permission_role_id"), "sys_role_permission", ["role_id"])
    op.create_index(op.f("ix_sys_role_permission_permission_id"), "sys_role_permission", ["permission_id"])


def downgrade() -> None:
    op.drop_table("sys_role_permission")
    op.drop_table("sys_user_role")
    op.drop_table("sys_permission")
    op.drop_table("sys_role")
    op.drop_table("sys_user")
    op.drop_table("sys_dept")
