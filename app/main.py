"""TripWit API 진입점."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from fastapi.responses import JSONResponse, Response
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.api import expenses, photos, share, stops, trips, weather
from app.api.dependencies import require_service_secret
from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.logging_config import configure_logging
from app.core.readiness import collect_readiness_status
from app.database import init_db
from app.services.validation import TripValidationError

configure_logging()
logger = get_logger(__name__)
settings = get_settings()

_DOCS_MODES = ("disabled", "secret", "public")
_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Cache-Control": "no-store",
}
_GENERIC_ERROR_MESSAGE = "내부 서버 오류가 발생했습니다."


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _docs_mode(raw: str) -> str:
    mode = (raw or "").strip().lower()
    if mode not in _DOCS_MODES:
        logger.warning("Unknown DOCS_MODE %r, falling back to disabled", raw)
        return "disabled"
    return mode


def _install_middlewares(app_: FastAPI, config: Settings) -> None:
    """프록시 헤더, 허용 호스트, CORS 미들웨어를 설정값에 따라 등록합니다."""
    if config.PROXY_HEADERS_ENABLED:
        proxies = _split_csv(config.PROXY_TRUSTED_HOSTS) or ["127.0.0.1"]
        app_.add_middleware(ProxyHeadersMiddleware, trusted_hosts=proxies)

    allowed_hosts = _split_csv(config.TRUSTED_HOSTS)
    if allowed_hosts:
        app_.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)

    origins = _split_csv(config.CORS_ALLOW_ORIGINS)
    if not origins:
        return

    allow_credentials = config.CORS_ALLOW_CREDENTIALS
    if allow_credentials and "*" in origins:
        # 와일드카드 origin과 credentials는 함께 쓸 수 없다
        logger.warning("CORS wildcard origin with credentials requested; credentials disabled")
        allow_credentials = False

    app_.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=_split_csv(config.CORS_ALLOW_METHODS) or ["GET"],
        allow_headers=_split_csv(config.CORS_ALLOW_HEADERS) or ["Content-Type"],
    )


def _register_secret_docs(app_: FastAPI) -> None:
    """서비스 시크릿 헤더가 있어야 열리는 문서 라우트."""
    guard = [Depends(require_service_secret)]

    @app_.get("/openapi.json", include_in_schema=False, dependencies=guard)
    def openapi_json() -> JSONResponse:
        return JSONResponse(app_.openapi())

    @app_.get("/docs", include_in_schema=False, dependencies=guard)
    def swagger_ui() -> Response:
        return get_swagger_ui_html(openapi_url="/openapi.json", title=f"{app_.title} - Swagger UI")

    @app_.get("/redoc", include_in_schema=False, dependencies=guard)
    def redoc_ui() -> Response:
        return get_redoc_html(openapi_url="/openapi.json", title=f"{app_.title} - ReDoc")


@asynccontextmanager
async def lifespan(app_: FastAPI):
    """기동 시 테이블을 준비합니다."""
    init_db()
    logger.info("TripWit API started: env=%s docs=%s", settings.APP_ENV, docs_mode)
    yield


docs_mode = _docs_mode(settings.DOCS_MODE)
public_docs = docs_mode == "public"

app = FastAPI(
    title="TripWit API",
    lifespan=lifespan,
    docs_url="/docs" if public_docs else None,
    redoc_url="/redoc" if public_docs else None,
    openapi_url="/openapi.json" if public_docs else None,
)
_install_middlewares(app, settings)

for module in (trips, stops, expenses, share, photos, weather):
    app.include_router(module.router)

if docs_mode == "secret":
    _register_secret_docs(app)


@app.middleware("http")
async def add_security_headers(request: Request, call_next) -> Response:
    response = await call_next(request)
    if settings.SECURITY_HEADERS_ENABLED:
        for name, value in _SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if settings.ENABLE_HSTS and request.url.scheme == "https":
            response.headers.setdefault("Strict-Transport-Security", f"max-age={settings.HSTS_MAX_AGE_SECONDS}")
    return response


@app.exception_handler(TripValidationError)
async def trip_validation_exception_handler(request: Request, exc: TripValidationError) -> JSONResponse:
    """입력 검증 실패는 오류 코드와 함께 422로 응답합니다."""
    logger.info("Validation failed on %s %s: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=422, content={"detail": str(exc), "code": exc.code.value})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    detail = str(exc) if settings.EXPOSE_INTERNAL_ERRORS else _GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/")
def health_check() -> dict:
    """헬스 체크 엔드포인트."""
    return {"status": "ok", "message": "TripWit API Server is running"}


@app.get("/ready")
async def readiness_check() -> JSONResponse:
    """필수 의존성이 준비되지 않았으면 503을 반환합니다."""
    result = await collect_readiness_status()
    return JSONResponse(status_code=200 if result["status"] == "ready" else 503, content=result)
