# fba/plugins/code_generator/services.py

"""
데이터베이스 테이블 반영(reflection)과 타입 매핑입니다.

SQLAlchemy Inspector 는 동기 API 이므로 AsyncSession.run_sync 안에서 실행합니다.
방언 전용 SQL 을 쓰지 않으므로 PostgreSQL/MySQL/SQLite 모두에서 동작합니다.
"""

from typing import Dict, List, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session
from sqlmodel.ext.asyncio.session import AsyncSession

from . import errors as gen_errors
from . import models as gen_models
from .schemas import ColumnInfo, TableInfo

PYTHON_TYPES: Dict[str, str] = {
    "int": "int", "integer": "int", "tinyint": "int", "smallint": "int", "bigint": "int",
    "varchar": "str", "char": "str", "text": "str", "longtext": "str",
    "datetime": "datetime", "timestamp": "datetime", "date": "date",
    "decimal": "float", "numeric": "float", "float": "float", "double": "float", "real": "float",
    "bool": "bool", "boolean": "bool",
    "json": "dict", "jsonb": "dict",
}

TS_TYPES: Dict[str, str] = {
    "int": "number", "integer": "number", "tinyint": "number", "smallint": "number", "bigint": "number",
    "decimal": "number", "numeric": "number", "float": "number", "double": "number", "real": "number",
    "bool": "boolean", "boolean": "boolean",
    "json": "object", "jsonb": "object",
}


def base_type(column_type: str) -> str:
    """'VARCHAR(64)' → 'varchar', 'TIMESTAMP WITH TIME ZONE' → 'timestamp'"""
    return column_type.split("(")[0].strip().split(" ")[0].lower()


def python_type(data_type: str) -> str:
    return PYTHON_TYPES.get(base_type(data_type), "str")


def ts_type(data_type: str) -> str:
    return TS_TYPES.get(base_type(data_type), "string")


def pascal_case(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


# =============================================================================
# 테이블 반영
# =============================================================================
def _table_comment(inspector, table_name: str, schema: Optional[str]) -> Optional[str]:
    try:
        return inspector.get_table_comment(table_name, schema=schema).get("text")
    except NotImplementedError:
        # SQLite 는 테이블 주석을 지원하지 않습니다.
        return None


async def list_tables(db: AsyncSession, schema: Optional[str] = None) -> List[TableInfo]:
    def _reflect(sync_session: Session) -> List[TableInfo]:
        inspector = inspect(sync_session.connection())
        return [
            TableInfo(table_name=name, table_schema=schema, table_comment=_table_comment(inspector, name, schema))
            for name in sorted(inspector.get_table_names(schema=schema))
        ]
    return await db.run_sync(_reflect)


async def get_table(db: AsyncSession, table_name: str, schema: Optional[str] = None) -> TableInfo:
    for table in await list_tables(db, schema):
        if table.table_name == table_name:
            return table
    raise gen_errors.TableNotFoundError()


async def list_columns(db: AsyncSession, table_name: str, schema: Optional[str] = None) -> List[ColumnInfo]:
    def _reflect(sync_session: Session) -> List[ColumnInfo]:
        inspector = inspect(sync_session.connection())
        if table_name not in inspector.get_table_names(schema=schema):
            raise gen_errors.TableNotFoundError()
        pk_columns = set(inspector.get_pk_constraint(table_name, schema=schema).get("constrained_columns") or ())
        fk_columns = {
            column
            for fk in inspector.get_foreign_keys(table_name, schema=schema)
            for column in fk.get("constrained_columns") or ()
        }
        columns = []
        for column in inspector.get_columns(table_name, schema=schema):
            column_type = str(column["type"])
            name = column["name"]
            columns.append(ColumnInfo(
                column_name=name,
                data_type=base_type(column_type),
                column_type=column_type.lower(),
                is_nullable="YES" if column.get("nullable", True) else "NO",
                column_key="PRI" if name in pk_columns else ("MUL" if name in fk_columns else ""),
                column_comment=column.get("comment"),
            ))
        return columns
    return await db.run_sync(_reflect)


def build_gen_columns(business_id: int, columns: List[ColumnInfo]) -> List[gen_models.GenColumn]:
    return [
        gen_models.GenColumn(
            business_id=business_id,
            column_name=column.column_name,
            column_comment=column.column_comment,
            column_type=column.data_type,
            python_type=python_type(column.data_type),
            ts_type=ts_type(column.data_type),
            required=column.is_nullable == "NO",
            is_pk=column.column_key == "PRI",
            is_fk=column.column_key == "MUL",
            is_query=True,
            is_list=True,
            is_form=column.column_key != "PRI",
            query_type="eq",
            form_type="input",
            sort=index,
        )
        for index, column in enumerate(columns)
    ]


def generate_paths(business: gen_models.GenBusiness) -> List[str]:
    """생성 대상 파일 경로 (api / model / schema / service / crud)."""
    base_path = business.gen_path or f"backend/app/{business.app_name}"
    filename = business.filename or business.table_name
    return [
        f"{base_path}/api/{business.api_version}/{filename}.py",
        f"{base_path}/model/{filename}.py",
        f"{base_path}/schema/{filename}.py",
        f"{base_path}/service/{filename}_service.py",
        f"{base_path}/crud/crud_{filename}.py",
    ]
