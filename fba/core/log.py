# fba/core/log.py

"""
표준 logging 설정 모듈입니다.

콘솔 핸들러와 <FBA_BASE_PATH>/logs/fba.log 회전 파일 핸들러를 구성하고,
접근 로그 미들웨어가 설정한 trace id 를 모든 로그 레코드에 주입합니다.
"""

import logging
import logging.config
from contextvars import ContextVar

from fba.core.config import Settings

# 현재 요청의 trace id (요청 밖에서는 "-")
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="-")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(trace_id)s | %(name)s:%(lineno)d - %(message)s"


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = trace_id_var.get()
        return True


def setup_logging(settings: Settings) -> None:
    level = "DEBUG" if settings.DEBUG_MODE else "INFO"
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "trace_id": {"()": TraceIdFilter},
        },
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "filters": ["trace_id"],
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "default",
                "filters": ["trace_id"],
                "filename": str(settings.log_dir / "fba.log"),
                "maxBytes": 10 * 1024 * 1024,
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "fba": {"level": level, "handlers": ["console", "file"], "propagate": False},
            "sqlalchemy.engine": {"level": "INFO" if settings.DEBUG_MODE else "WARNING"},
        },
    })
