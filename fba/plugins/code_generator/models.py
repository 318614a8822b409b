# fba/plugins/code_generator/models.py

"""
코드 생성기 메타데이터 (gen_business, gen_column) ORM 모델입니다.
"""

from typing import Optional

from sqlalchemy import BigInteger, Text
from sqlmodel import Field

from fba.core.models import MutableModel


class GenBusiness(MutableModel, table=True):
    __tablename__ = "gen_business"

    app_name: str = Field(max_length=64, description="대상 앱 이름")
    table_name: str = Field(max_length=255, sa_column_kwargs={"unique": True})
    doc_comment: str = Field(max_length=255, description="문서 주석 (기능 이름)")
    table_comment: Optional[str] = Field(default=None, max_length=255)
    class_name: Optional[str] = Field(default=None, max_length=64)
    schema_name: Optional[str] = Field(default=None, max_length=64)
    filename: Optional[str] = Field(default=None, max_length=64)
    default_datetime_column: bool = Field(default=True)
    api_version: str = Field(default="v1", max_length=20)
    gen_path: Optional[str] = Field(default=None, max_length=255)
    remark: Optional[str] = Field(default=None, sa_type=Text)


class GenColumn(MutableModel, table=True):
    __tablename__ = "gen_column"

    business_id: int = Field(sa_type=BigInteger, index=True)
    column_name: str = Field(max_length=64)
    column_comment: Optional[str] = Field(default=None, max_length=255)
    column_type: str = Field(max_length=32)
    python_type: Optional[str] = Field(default=None, max_length=32)
    ts_type: Optional[str] = Field(default=None, max_length=32)
    required: bool = Field(default=False)
    is_pk: bool = Field(default=False)
    is_fk: bool = Field(default=False)
    is_query: bool = Field(default=True)
    is_list: bool = Field(default=True)
    is_form: bool = Field(default=True)
    query_type: Optional[str] = Field(default="eq", max_length=16)
    form_type: Optional[str] = Field(default="input", max_length=16)
    sort: int = Field(default=0)
