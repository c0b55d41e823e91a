import asyncio
import hashlib
import hmac
import json
import uuid
from asyncio import Semaphore, create_task

from fastapi import APIRouter, Depends, Header, Request

from pr_describer.api.v1.schemas import WebhookResponse
from pr_describer.core.config import Settings, get_settings
from pr_describer.core.exceptions import EventContextError, InvalidSignatureError
from pr_describer.core.limiter import WEBHOOK_RATE_LIMIT, limiter
from pr_describer.core.logging import get_logger
from pr_describer.domain.description.service import SUPPORTED_EVENTS, run_update

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = get_logger(__name__)

HANDLED_ACTIONS = frozenset({"opened", "synchronize", "reopened"})

_run_semaphore: Semaphore | None = None
_background_tasks: set[asyncio.Task] = set()


def _get_semaphore(limit: int) -> Semaphore:
    global _run_semaphore
    if _run_semaphore is None:
        _run_semaphore = Semaphore(limit)
    return _run_semaphore


def verify_signature(secret: str, body: bytes, signature: str | None) -> None:
    """X-Hub-Signature-256 검증, secret이 없으면 검증하지 않음

    Raises:
        InvalidSignatureError: 서명이 없거나 일치하지 않는 경우
    """
    if not secret:
        return
    if not signature or not signature.startswith("sha256="):
        raise InvalidSignatureError(detail="서명 헤더 누락")

    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(f"sha256={expected}", signature):
        raise InvalidSignatureError()


async def _run_in_background(
    settings: Settings,
    event_name: str,
    payload: dict,
    run_id: str,
) -> None:
    """동시 실행 수 제한 하에 PR 설명 갱신 실행"""
    async with _get_semaphore(settings.max_concurrent_runs):
        logger.info("작업 시작 run_id=%s 동시실행제한=%d", run_id, settings.max_concurrent_runs)
        result = await run_update(settings, event_name, payload, run_id=run_id)
        if result.status == "failed":
            logger.error(
                "작업 실패 run_id=%s error_code=%s error=%s",
                run_id,
                result.error_code,
                result.error_message,
            )


@router.post("/github", response_model=WebhookResponse, status_code=202)
@limiter.limit(WEBHOOK_RATE_LIMIT)
async def receive_github_webhook(
    request: Request,
    x_github_event: str | None = Header(default=None),
    x_hub_signature_256: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> WebhookResponse:
    body = await request.body()
    verify_signature(settings.webhook_secret, body, x_hub_signature_256)

    if x_github_event not in SUPPORTED_EVENTS:
        return WebhookResponse(status="ignored", reason=f"event={x_github_event}")

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise EventContextError(detail=f"JSON 파싱 실패: {e}") from e

    if not isinstance(payload, dict):
        raise EventContextError(detail="페이로드가 JSON 객체가 아닙니다")

    action = payload.get("action")
    if action not in HANDLED_ACTIONS:
        return WebhookResponse(status="ignored", reason=f"action={action}")

    run_id = uuid.uuid4().hex[:8]
    task = create_task(_run_in_background(settings, x_github_event, payload, run_id))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    return WebhookResponse(status="accepted", run_id=run_id)
