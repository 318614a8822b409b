"""menu and data scope tables

Revision ID: 0006
Revises: 0005
Create Date: 2025-08-11 15:20:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0006"
down_revision: Union[str, None] = "0005"
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


def _link(name: str, left: str, right: str, constraint: str) -> None:
    op.create_table(
        name,
        sa.Column("id", BigIntPK, primary_key=True, autoincrement=True),
        sa.Column(left, sa.BigInteger(), nullable=False),
        sa.Column(right, sa.BigInteger(), nullable=False),
        sa.Column("created_time", Timestamp, nullable=False),
        sa.UniqueConstraint(left, right, name=constraint),
    )
    op.create_index(op.f(f"ix_{name}_{left}"), name, [left])
    op.create_index(op.f(f"ix_{name}_{right}"), name, [right])


def upgrade() -> None:
    op.create_table(
        "sys_menu",
        *_common(),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("parent_id", sa.BigInteger(), nullable=True),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("path", sa.String(length=200), nullable=True),
        sa.Column("component", sa.String(length=255), nullable=True),
        sa.Column("type", sa.Integer(), nullable=False),
        sa.Column("perms", sa.String(length=100), nullable=True),
        sa.Column("icon", sa.String(length=100), nullable=True),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.Column("display", sa.Boolean(), nullable=False),
        sa.Column("cache", sa.Boolean(), nullable=False),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
    )
    op.create_index(op.f("ix_sys_menu_parent_id"), "sys_menu", ["parent_id"])
    _link("sys_role_menu", "role_id", "menu_id", "uk_role_menu")

    op.create_table(
        "sys_data_rule",
        *_common(),
        sa.Column("name", sa.String(length=512), nullable=False),
        sa.Column("model", sa.String(length=64), nullable=False),
        sa.Column("column", sa.String(length=32), nullable=False),
        sa.Column("operator", sa.Integer(), nullable=False),
        sa.Column("expression", sa.Integer(), nullable=False),
        sa.Column("value", sa.String(length=256), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "sys_data_scope",
        *_common(),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False),
        sa.UniqueConstraint("name"),
    )
    _link("sys_data_scope_rule", "data_scope_id", "data_rule_id", "uk_data_scope_rule")
    _link("sys_role_data_scope", "role_id", "data_scope_id", "uk_role_data_scope")


def downgrade() -> None:
    op.drop_table("sys_role_data_scope")
    op.drop_table("sys_data_scope_rule")
    op.drop_table("sys_data_scope")
    op.drop_table("sys_data_rule")
    op.drop_table("sys_role_menu")
    op.drop_table("sys_menu")
