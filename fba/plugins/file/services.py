# fba/plugins/file/services.py

"""
파일 저장과 메타데이터 기록을 묶는 서비스 계층입니다.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from sqlmodel.ext.asyncio.session import AsyncSession

from fba.core.security import AuthContext
from fba.utils.files import UploadTooLarge, resolve_stored_path, save_upload_file

from . import crud as file_crud
from . import errors as file_errors
from . import models as file_models
from . import schemas as file_schemas

logger = logging.getLogger(__name__)

STATIC_URL_PREFIX = "/static/upload"


def to_read(db_obj: file_models.FileInfo) -> file_schemas.FileInfoRead:
    return file_schemas.FileInfoRead.model_validate(
        db_obj, update={"url": f"{STATIC_URL_PREFIX}/{db_obj.file_path}"}
    )


async def upload_file(
    db: AsyncSession, *, upload_dir: Path, max_size: int, upload: UploadFile, uploader: Optional[AuthContext],
) -> file_models.FileInfo:
    """업로드 파일을 디스크에 저장하고 sys_file_info 행을 만듭니다."""
    try:
        stored = await save_upload_file(upload_dir, upload, max_size)
    except UploadTooLarge as e:
        raise file_errors.FileTooLargeError(e.limit)

    if stored.size == 0:
        resolve_stored_path(upload_dir, stored.relative_path).unlink(missing_ok=True)
        raise file_errors.EmptyFileError()

    file_in = file_schemas.FileInfoCreate(
        original_name=upload.filename or stored.file_name,
        file_name=stored.file_name,
        file_path=stored.relative_path,
        suffix=stored.suffix or None,
        content_type=upload.content_type,
        size=stored.size,
        sha256=stored.sha256,
        uploader_id=uploader.user_id if uploader else None,
        uploader_name=uploader.username if uploader else None,
    )
    db_obj = await file_crud.file_info.create(db, obj_in=file_in)
    logger.info("Stored upload '%s' as %s (%d bytes)", db_obj.original_name, db_obj.file_path, db_obj.size)
    return db_obj


def stored_path(upload_dir: Path, db_obj: file_models.FileInfo) -> Path:
    """디스크 위치. 파일이 없거나 업로드 루트 밖이면 NotFound 입니다."""
    try:
        path = resolve_stored_path(upload_dir, db_obj.file_path)
    except ValueError:
        logger.warning("File %s has an invalid stored path %r", db_obj.id, db_obj.file_path)
        raise file_errors.FileNotFoundInStoreError()
    if not path.is_file():
        raise file_errors.FileNotFoundInStoreError()
    return path
