"""
Webhook 수신 로깅 미들웨어

GitHub delivery ID를 request_id로 사용해 수신 로그와 백그라운드 실행 로그를 연결한다.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pr_describer.core.context import clear_context, set_request_id
from pr_describer.core.logging import get_logger

logger = get_logger(__name__)

LOGGED_PATH_PREFIX = "/api/"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """API 요청마다 delivery 정보와 처리 결과를 한 줄로 기록"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(LOGGED_PATH_PREFIX):
            return await call_next(request)

        delivery_id = request.headers.get("X-GitHub-Delivery")
        request_id = set_request_id(delivery_id or request.headers.get("X-Request-ID"))
        fields = {
            "path": request.url.path,
            "github_event": request.headers.get("X-GitHub-Event"),
            "delivery_id": delivery_id,
        }
        started = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "webhook 수신",
                status_code=response.status_code,
                elapsed_ms=_elapsed_ms(started),
                **fields,
            )
        except Exception:
            logger.exception("webhook 처리 실패", elapsed_ms=_elapsed_ms(started), **fields)
            raise
        finally:
            clear_context()

        response.headers["X-Request-ID"] = request_id
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
