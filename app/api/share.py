"""여행 공유 API: 텍스트 일정, `.tripwit` 파일 내보내기/가져오기."""

from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse, PlainTextResponse
from pydantic import BaseModel, Field

from app.api.dependencies import get_trip_manager, get_trip_or_404
from app.core.logger import get_logger
from app.models import Trip
from app.schemas.trip import TripResponse
from app.services.share_export import prepare_share_items
from app.services.share_service import (
    TRIP_FILE_EXTENSION,
    TripFileError,
    build_transfer,
    decode_transfer,
    encode_transfer,
    export_trip,
    import_trip,
    sanitize_filename,
)
from app.services.text_exporter import generate_text
from app.services.trip_service import TripManager

router = APIRouter(prefix="/api/v1", tags=["share"])
logger = get_logger(__name__)

TRIP_FILE_MEDIA_TYPE = "application/json"


class ShareItemsResponse(BaseModel):
    """공유 대상 항목. 파일은 기록된 경로 문자열로 전달됩니다."""

    items: list[str] = Field(default_factory=list, description="텍스트 또는 파일 경로")


def attachment_disposition(filename: str) -> str:
    """비 ASCII 파일명도 안전하게 담는 Content-Disposition 값."""
    return f"attachment; filename*=UTF-8''{quote(filename)}"


@router.get("/trips/{trip_id}/export/text", response_class=PlainTextResponse)
def export_text(trip: Trip = Depends(get_trip_or_404)) -> PlainTextResponse:  # noqa: B008
    """메시지/이메일에 붙여 넣을 텍스트 일정을 반환합니다."""
    return PlainTextResponse(generate_text(trip))


@router.post("/trips/{trip_id}/export/tripwit", response_class=FileResponse)
def export_trip_file(trip: Trip = Depends(get_trip_or_404)) -> FileResponse:  # noqa: B008
    """여행을 `.tripwit` 파일로 내보냅니다."""
    try:
        path = export_trip(trip)
    except OSError as exc:
        logger.error("Trip export failed: trip_id=%s error=%s", trip.id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="여행 파일 저장 실패") from exc
    return FileResponse(
        path,
        media_type=TRIP_FILE_MEDIA_TYPE,
        headers={"Content-Disposition": attachment_disposition(Path(path).name)},
    )


@router.post("/trips/{trip_id}/share", response_model=ShareItemsResponse)
def share_trip(trip: Trip = Depends(get_trip_or_404)) -> ShareItemsResponse:  # noqa: B008
    """텍스트 일정과 `.tripwit` 파일을 공유 항목으로 준비합니다."""
    file_bytes = encode_transfer(build_transfer(trip)).encode("utf-8")
    items = prepare_share_items(
        [generate_text(trip), file_bytes],
        filename=f"{sanitize_filename(trip.name)}{TRIP_FILE_EXTENSION}",
    )
    return ShareItemsResponse(items=[str(item) for item in items])


@router.post("/trips/import", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def import_trip_file(
    request: Request,
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> TripResponse:
    """요청 본문의 `.tripwit` JSON으로 새 여행을 만듭니다."""
    body = await request.body()
    try:
        transfer = decode_transfer(body)
    except TripFileError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    logger.info("Trip import request received: name=%s schema=v%d", transfer.name, transfer.schema_version)
    trip = import_trip(manager.db, transfer)
    return TripResponse.model_validate(trip)
