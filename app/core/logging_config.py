"""서버 기동 시 적용하는 dictConfig 로깅 설정.

uvicorn 기본 설정 위에 애플리케이션(`app`) 로거와 시끄러운 서드파티 로거 레벨을 덧붙입니다.
"""

from __future__ import annotations

import copy
import logging.config
import os
from typing import Any

from uvicorn.config import LOGGING_CONFIG as UVICORN_LOGGING_CONFIG

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
# SQL 쿼리와 HTTP 커넥션 풀 로그는 디버그 레벨에서도 숨긴다
_QUIET_LOGGERS = {
    "sqlalchemy.engine": "WARNING",
    "urllib3.connectionpool": "WARNING",
}


def _level_name(level: str | None) -> str:
    raw = level or os.getenv("LOG_LEVEL") or "INFO"
    return raw.strip().upper()


def build_logging_config(level: str | None = None) -> dict[str, Any]:
    """uvicorn `LOGGING_CONFIG` 사본에 루트/앱/서드파티 로거 레벨을 반영합니다."""
    log_level = _level_name(level)
    config = copy.deepcopy(UVICORN_LOGGING_CONFIG)
    loggers = config.setdefault("loggers", {})

    for name in _UVICORN_LOGGERS:
        loggers.setdefault(name, {})["level"] = log_level
    for name, quiet_level in _QUIET_LOGGERS.items():
        loggers[name] = {"handlers": ["default"], "level": quiet_level, "propagate": False}

    config["root"] = {"handlers": ["default"], "level": log_level}
    return config


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig(build_logging_config(level))
