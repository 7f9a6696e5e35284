"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    DATABASE_URL: str = "sqlite:///./tripwit.db"
    SERVICE_SECRET: str | None = None
    LOG_LEVEL: str = "INFO"
    REQUEST_TIMEOUT_SECONDS: int = 60
    EXTERNAL_API_TIMEOUT_SECONDS: int = 15
    WEATHER_TIMEOUT_SECONDS: int = 10
    WEATHER_API_BASE_URL: str = "https://api.open-meteo.com/v1/forecast"
    WEATHER_TEMPERATURE_UNIT: str = "celsius"
    PHOTO_MATCH_RADIUS_MILES: float = 1.0
    PHOTO_MATCH_TIME_WINDOW_SECONDS: int = 7200
    EXPORT_DIR: str | None = None
    SHARE_FOOTER: str = "Shared from TripWit"
    APP_ENV: str = "development"
    DOCS_MODE: str = "disabled"
    EXPOSE_INTERNAL_ERRORS: bool = False
    CORS_ALLOW_ORIGINS: str = ""
    CORS_ALLOW_METHODS: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Authorization,Content-Type,x-service-secret"
    CORS_ALLOW_CREDENTIALS: bool = False
    SECURITY_HEADERS_ENABLED: bool = True
    ENABLE_HSTS: bool = False
    HSTS_MAX_AGE_SECONDS: int = 31536000
    PROXY_HEADERS_ENABLED: bool = True
    PROXY_TRUSTED_HOSTS: str = "127.0.0.1"
    TRUSTED_HOSTS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("PHOTO_MATCH_RADIUS_MILES", mode="before")
    @classmethod
    def _default_photo_match_radius(cls, value: object) -> float:
        try:
            numeric = float(value) if value is not None else 1.0
        except (TypeError, ValueError):
            numeric = 1.0
        return numeric if numeric > 0 else 1.0

    @field_validator("PHOTO_MATCH_TIME_WINDOW_SECONDS", mode="before")
    @classmethod
    def _clamp_photo_match_time_window(cls, value: object) -> int:
        try:
            numeric = int(value) if value is not None else 7200
        except (TypeError, ValueError):
            numeric = 7200
        return max(0, numeric)

    @field_validator("WEATHER_TEMPERATURE_UNIT", mode="before")
    @classmethod
    def _normalize_temperature_unit(cls, value: object) -> str:
        normalized = str(value or "").strip().lower()
        return normalized if normalized in {"celsius", "fahrenheit"} else "celsius"


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
