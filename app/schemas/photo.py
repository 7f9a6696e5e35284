"""사진-장소 매칭 스키마."""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field

from app.schemas.enums import MatchConfidence
from app.schemas.transfer import to_naive_utc


class PhotoMetadata(BaseModel):
    """사진 라이브러리에서 읽은 위치/촬영 시각 메타데이터."""

    asset_identifier: str = Field(..., description="사진 에셋 식별자")
    latitude: float = Field(..., ge=-90, le=90, description="촬영 위도")
    longitude: float = Field(..., ge=-180, le=180, description="촬영 경도")
    capture_date: Annotated[datetime, AfterValidator(to_naive_utc)] = Field(..., description="촬영 시각")


class PhotoMatchResult(BaseModel):
    """사진 한 장의 매칭 결과."""

    photo: PhotoMetadata
    matched_stop_id: Optional[uuid.UUID] = Field(None, description="매칭된 장소 ID")
    matched_stop_name: Optional[str] = Field(None, description="매칭된 장소 이름")
    distance_meters: Optional[float] = Field(None, description="장소까지의 거리(m)")
    time_offset_seconds: Optional[float] = Field(
        None, description="장소 체류 구간으로부터 벗어난 시간(초). 구간 안이면 0, 시간 정보가 없으면 None"
    )
    confidence: MatchConfidence = Field(MatchConfidence.NONE, description="매칭 신뢰도")


class PhotoMatchRequest(BaseModel):
    """여행 사진 매칭 요청 모델."""

    photos: list[PhotoMetadata] = Field(..., description="매칭할 사진 목록")
    stop_id: Optional[uuid.UUID] = Field(None, description="지정 시 이 장소에 매칭된 사진만 반환")
    radius_miles: Optional[float] = Field(None, gt=0, description="매칭 반경(마일). 기본값은 설정값")
