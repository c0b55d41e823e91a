"""
structlog 기반 로깅 설정

- 개발 환경: 컬러풀한 콘솔 출력
- 프로덕션 환경: JSON 형식 출력
- CI 실행: stderr 출력 (stdout은 workflow command 전용), 토큰 마스킹
- 컨텍스트 자동 주입: request_id, run_id, pr_number
"""

import logging
import re
import sys
from typing import TextIO

import structlog

from pr_describer.core.context import get_pr_number, get_request_id, get_run_id

SENSITIVE_PATTERNS = [
    (re.compile(r"(token=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(Bearer\s+)[^\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"\b(gh[pousr]_)[A-Za-z0-9]{20,}"), r"\1***"),
    (re.compile(r"\b(sk-)[A-Za-z0-9_\-]{16,}"), r"\1***"),
]

NOISY_LOGGERS = (
    "httpcore",
    "httpx",
    "langfuse",
    "langchain",
    "langgraph",
    "openai",
    "google_genai",
    "anyio",
)


def mask_secrets(value: str) -> str:
    """토큰, API 키 등 민감한 값 마스킹"""
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def add_run_context(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """현재 요청/실행 컨텍스트를 로그에 주입"""
    context = {
        "request_id": get_request_id(),
        "run_id": get_run_id(),
        "pr_number": get_pr_number(),
    }
    for key, value in context.items():
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def mask_secrets_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = mask_secrets(value)
    return event_dict


def setup_logging(
    level: str = "INFO",
    production: bool = False,
    stream: TextIO | None = None,
    mask: bool = False,
) -> None:
    """structlog 설정 초기화

    Args:
        level: 로그 레벨 이름
        production: JSON 렌더러 사용 여부
        stream: 출력 스트림, 기본 stdout
        mask: 프로덕션이 아니어도 민감한 값 마스킹
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        add_run_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if production or mask:
        processors.append(mask_secrets_processor)

    if production:
        processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # uvicorn 자체 핸들러 대신 root 핸들러 사용
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).handlers.clear()

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog 로거 반환"""
    return structlog.get_logger(name)
