"""공유 대상 항목 준비.

바이너리 데이터는 임시 디렉터리에 파일로 기록한 뒤 파일 경로로 바꿔 넘기고,
텍스트나 경로 같은 나머지 항목은 그대로 넘깁니다.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Iterable

from app.core.config import get_settings
from app.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SHARE_FILENAME = "document.pdf"


def resolve_export_dir(directory: str | Path | None = None) -> Path:
    """내보내기 디렉터리. 지정값, `EXPORT_DIR` 설정, 시스템 임시 디렉터리 순으로 사용합니다."""
    if directory is not None:
        return Path(directory)
    configured = get_settings().EXPORT_DIR
    return Path(configured) if configured else Path(tempfile.gettempdir())


def write_share_file(data: bytes, filename: str = DEFAULT_SHARE_FILENAME, directory: str | Path | None = None) -> Path:
    """데이터를 파일로 기록하고 경로를 반환합니다.

    기록에 실패해도 예외를 올리지 않고 경로를 그대로 반환합니다.
    이 경우 공유 대상은 존재하지 않는 파일을 받게 됩니다.
    """
    path = resolve_export_dir(directory) / (filename or DEFAULT_SHARE_FILENAME)
    try:
        path.write_bytes(bytes(data))
    except OSError as exc:
        logger.warning("Share file write failed: %s (%s)", path, exc)
    return path


def _numbered_filename(filename: str, number: int) -> str:
    """두 번째 바이너리 항목부터 `document-2.pdf`처럼 번호를 붙입니다."""
    if number == 1:
        return filename
    path = Path(filename)
    return f"{path.stem}-{number}{path.suffix}"


def prepare_share_items(
    items: Iterable[object],
    filename: str = DEFAULT_SHARE_FILENAME,
    directory: str | Path | None = None,
) -> list[object]:
    prepared: list[object] = []
    binary_count = 0
    for item in items:
        if isinstance(item, (bytes, bytearray)):
            binary_count += 1
            name = _numbered_filename(filename or DEFAULT_SHARE_FILENAME, binary_count)
            prepared.append(write_share_file(item, filename=name, directory=directory))
        else:
            prepared.append(item)
    return prepared
