# fba/utils/files.py

import hashlib
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiofiles
from fastapi import UploadFile

CHUNK_SIZE = 64 * 1024


class UploadTooLarge(Exception):
    """업로드 크기가 허용치를 넘었습니다."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"file exceeds {limit} bytes")


@dataclass(frozen=True)
class StoredFile:
    file_name: str          # 저장된 파일명 (<uuid><ext>)
    relative_path: str      # 업로드 루트 기준 경로 (yyyymmdd/<uuid><ext>)
    suffix: str
    size: int
    sha256: str


async def save_upload_file(upload_dir: Path, upload_file: UploadFile, max_size: int) -> StoredFile:
    """
    업로드된 파일을 <upload_dir>/<yyyymmdd>/<uuid><ext> 에 저장합니다.

    - 파일명은 중복을 피하기 위해 UUID 로 새로 만듭니다.
    - 청크 단위로 쓰면서 크기와 sha256 을 계산하고, 한도를 넘으면 부분 파일을 지우고
      UploadTooLarge 를 던집니다.
    """
    sub_dir = datetime.now().strftime("%Y%m%d")
    target_dir = upload_dir / sub_dir
    target_dir.mkdir(parents=True, exist_ok=True)

    suffix = Path(upload_file.filename or "").suffix.lower()
    file_name = f"{uuid.uuid4().hex}{suffix}"
    save_path = target_dir / file_name

    digest = hashlib.sha256()
    size = 0
    try:
        async with aiofiles.open(save_path, "wb") as buffer:
            while chunk := await upload_file.read(CHUNK_SIZE):
                size += len(chunk)
                if size > max_size:
                    raise UploadTooLarge(max_size)
                digest.update(chunk)
                await buffer.write(chunk)
    except UploadTooLarge:
        save_path.unlink(missing_ok=True)
        raise
    finally:
        await upload_file.close()

    return StoredFile(
        file_name=file_name,
        relative_path=f"{sub_dir}/{file_name}",
        suffix=suffix,
        size=size,
        sha256=digest.hexdigest(),
    )


def resolve_stored_path(upload_dir: Path, relative_path: str) -> Path:
    """저장 경로를 업로드 루트 아래의 절대 경로로 바꿉니다. 루트 밖을 가리키면 ValueError."""
    root = upload_dir.resolve()
    path = (root / relative_path).resolve()
    if root not in path.parents:
        raise ValueError(f"path {relative_path!r} escapes the upload directory")
    return path
