# fba/plugins/file/errors.py

"""'file' 플러그인의 오류 종류."""

from fba.core.exceptions import DatabaseError, NotFoundError, OperationFailedError


class FileNotFoundInStoreError(NotFoundError):
    default_message = "文件不存在"


class FileTooLargeError(OperationFailedError):
    def __init__(self, limit: int):
        super().__init__(f"文件大小不能超过 {limit // 1024} KB")


class EmptyFileError(OperationFailedError):
    default_message = "上传文件不能为空"


__all__ = ["DatabaseError", "FileNotFoundInStoreError", "FileTooLargeError", "EmptyFileError"]
