"""
실행 및 요청 컨텍스트 관리 모듈

contextvars를 사용하여 비동기 환경에서도 안전하게 run_id, pr_number, request_id를 관리
"""

import uuid
from contextvars import ContextVar

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
run_id_var: ContextVar[str | None] = ContextVar("run_id", default=None)
pr_number_var: ContextVar[int | None] = ContextVar("pr_number", default=None)


def get_request_id() -> str | None:
    """현재 컨텍스트의 request_id 반환"""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """
    request_id 설정

    인자가 없으면 8자리 UUID 자동 생성
    """
    if request_id is None:
        request_id = uuid.uuid4().hex[:8]
    request_id_var.set(request_id)
    return request_id


def get_run_id() -> str | None:
    """현재 컨텍스트의 run_id 반환"""
    return run_id_var.get()


def set_run_id(run_id: str | None = None) -> str:
    """run_id 설정, 인자가 없으면 8자리 UUID 자동 생성"""
    if run_id is None:
        run_id = uuid.uuid4().hex[:8]
    run_id_var.set(run_id)
    return run_id


def get_pr_number() -> int | None:
    """현재 컨텍스트의 PR 번호 반환"""
    return pr_number_var.get()


def set_pr_number(pr_number: int | None) -> None:
    """PR 번호 설정"""
    pr_number_var.set(pr_number)


def clear_context() -> None:
    """모든 컨텍스트 변수 초기화"""
    request_id_var.set(None)
    run_id_var.set(None)
    pr_number_var.set(None)
