from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EVENT_CONTEXT_ERROR = "EVENT_CONTEXT_ERROR"
    GIT_OPERATION_ERROR = "GIT_OPERATION_ERROR"
    GENERATION_BACKEND_ERROR = "GENERATION_BACKEND_ERROR"
    PLATFORM_API_ERROR = "PLATFORM_API_ERROR"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomException(Exception):
    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(message)

    def describe(self) -> str:
        """사람이 읽을 수 있는 단일 에러 메시지"""
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class ConfigurationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            message="필수 설정이 올바르지 않습니다",
            detail=detail,
        )


class EventContextError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.EVENT_CONTEXT_ERROR,
            message="지원하지 않는 이벤트입니다. pull_request 이벤트에서만 실행됩니다",
            detail=detail,
        )


class GitOperationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=500,
            error_code=ErrorCode.GIT_OPERATION_ERROR,
            message="Git 명령 실행에 실패했습니다",
            detail=detail,
        )


class GenerationBackendError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.GENERATION_BACKEND_ERROR,
            message="설명 생성 백엔드 호출에 실패했습니다",
            detail=detail,
        )


class PlatformApiError(CustomException):
    def __init__(self, step: str, detail: str | None = None):
        self.step = step
        super().__init__(
            status_code=502,
            error_code=ErrorCode.PLATFORM_API_ERROR,
            message=f"GitHub API 호출에 실패했습니다 (step={step})",
            detail=detail,
        )


class InvalidSignatureError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=401,
            error_code=ErrorCode.INVALID_SIGNATURE,
            message="Webhook 서명이 올바르지 않습니다",
            detail=detail,
        )


def register_exception_handlers(app, expose_detail: bool = True):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        content = {
            "error_code": exc.error_code,
            "message": exc.message,
        }
        if exc.detail and expose_detail:
            content["detail"] = exc.detail

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
        )
