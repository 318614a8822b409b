# fba/plugins/file/schemas.py

from typing import Optional

from sqlmodel import SQLModel

from fba.core.schemas import MutableRead


class FileInfoCreate(SQLModel):
    original_name: str
    file_name: str
    file_path: str
    suffix: Optional[str] = None
    content_type: Optional[str] = None
    size: int
    sha256: str
    uploader_id: Optional[int] = None
    uploader_name: Optional[str] = None


class FileInfoRead(MutableRead):
    original_name: str
    file_name: str
    file_path: str
    url: str
    suffix: Optional[str] = None
    content_type: Optional[str] = None
    size: int
    sha256: str
    download_count: int
    uploader_id: Optional[int] = None
    uploader_name: Optional[str] = None
