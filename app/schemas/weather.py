"""날씨 예보 스키마."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class DayForecast(BaseModel):
    """일별 예보."""

    date: date
    high_temp: float = Field(..., description="최고 기온")
    low_temp: float = Field(..., description="최저 기온")
    condition_code: int = Field(..., description="WMO 날씨 코드")
    precip_probability: int = Field(0, description="강수 확률(%)")
    icon: str = Field(..., description="날씨 아이콘 이름")
    description: str = Field(..., description="날씨 설명")
    color: str = Field(..., description="아이콘 색상 이름")


class WeatherResponse(BaseModel):
    """여행 기간 날씨 예보 응답."""

    location_name: str
    temperature_unit: str
    forecasts: list[DayForecast] = Field(default_factory=list)
    error_message: Optional[str] = None
