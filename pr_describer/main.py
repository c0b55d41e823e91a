from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from pr_describer.api.routers import api_router
from pr_describer.core.config import get_settings
from pr_describer.core.exceptions import register_exception_handlers
from pr_describer.core.limiter import limiter
from pr_describer.core.logging import setup_logging
from pr_describer.core.middleware import RequestLoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 시작 시 설정 로드 및 검증"""
    settings = get_settings()
    setup_logging(settings.log_level, production=settings.is_production)

    missing = settings.missing_required()
    if missing:
        raise RuntimeError(f"필수 설정 누락: {', '.join(missing)}")
    yield


app = FastAPI(
    title="PR Describer",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "UP"}
