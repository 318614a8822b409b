# fba/plugins/file/models.py

"""
'file' 플러그인의 ORM 모델 (sys_file_info) 입니다.
파일 본문은 업로드 디렉토리에 저장되고, 이 테이블은 메타데이터만 가집니다.
"""

from typing import Optional

from sqlalchemy import BigInteger
from sqlmodel import Field

from fba.core.models import MutableModel, SoftDeleteMixin


class FileInfo(MutableModel, SoftDeleteMixin, table=True):
    __tablename__ = "sys_file_info"

    original_name: str = Field(max_length=255, index=True, description="업로드 당시 파일명")
    file_name: str = Field(max_length=64, description="저장 파일명 (<uuid><ext>)")
    file_path: str = Field(max_length=255, description="업로드 루트 기준 상대 경로")
    suffix: Optional[str] = Field(default=None, max_length=32)
    content_type: Optional[str] = Field(default=None, max_length=128, index=True)
    size: int = Field(default=0, sa_type=BigInteger, description="바이트 단위 크기")
    sha256: str = Field(max_length=64, index=True)
    download_count: int = Field(default=0)
    uploader_id: Optional[int] = Field(default=None, sa_type=BigInteger)
    uploader_name: Optional[str] = Field(default=None, max_length=64)
