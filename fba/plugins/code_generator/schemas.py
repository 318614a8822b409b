# fba/plugins/code_generator/schemas.py

from typing import Annotated, List, Optional

from sqlmodel import SQLModel

from fba.core.schemas import MutableRead
from fba.core.validators import length, pattern

AppName = Annotated[str, length(1, 64, "应用名称长度必须在1-64之间"),
                    pattern(r"^[a-zA-Z][a-zA-Z0-9_]*$", "应用名称只能包含字母、数字和下划线")]
TableName = Annotated[str, length(1, 255, "表名长度必须在1-255之间"),
                      pattern(r"^[a-zA-Z0-9_]+$", "表名只能包含字母、数字和下划线")]
DocComment = Annotated[str, length(1, 255, "文档注释长度必须在1-255之间")]


class TableInfo(SQLModel):
    table_name: str
    table_schema: Optional[str] = None
    table_comment: Optional[str] = None


class ColumnInfo(SQLModel):
    column_name: str
    data_type: str
    column_type: str
    is_nullable: str
    column_key: str
    column_comment: Optional[str] = None


class GenBusinessCreate(SQLModel):
    app_name: AppName
    table_name: TableName
    doc_comment: DocComment
    table_comment: Optional[str] = None
    class_name: Optional[str] = None
    schema_name: Optional[str] = None
    filename: Optional[str] = None
    default_datetime_column: bool = True
    api_version: str = "v1"
    gen_path: Optional[str] = None
    remark: Optional[str] = None


class GenBusinessUpdate(SQLModel):
    """table_name 은 생성 후 바꿀 수 없습니다."""
    app_name: Optional[AppName] = None
    doc_comment: Optional[DocComment] = None
    table_comment: Optional[str] = None
    class_name: Optional[str] = None
    schema_name: Optional[str] = None
    filename: Optional[str] = None
    default_datetime_column: Optional[bool] = None
    api_version: Optional[str] = None
    gen_path: Optional[str] = None
    remark: Optional[str] = None


class GenBusinessRead(MutableRead):
    app_name: str
    table_name: str
    doc_comment: str
    table_comment: Optional[str] = None
    class_name: Optional[str] = None
    schema_name: Optional[str] = None
    filename: Optional[str] = None
    default_datetime_column: bool
    api_version: str
    gen_path: Optional[str] = None
    remark: Optional[str] = None


class GenColumnRead(MutableRead):
    business_id: int
    column_name: str
    column_comment: Optional[str] = None
    column_type: str
    python_type: Optional[str] = None
    ts_type: Optional[str] = None
    required: bool
    is_pk: bool
    is_fk: bool
    is_query: bool
    is_list: bool
    is_form: bool
    query_type: Optional[str] = None
    form_type: Optional[str] = None
    sort: int


class ImportTableRequest(SQLModel):
    app: AppName
    table_name: TableName
    table_schema: Optional[str] = None


class GeneratePaths(SQLModel):
    paths: List[str]
