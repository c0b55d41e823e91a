from dataclasses import dataclass
from typing import Literal

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from pr_describer.core.exceptions import (
    GenerationBackendError,
    GitOperationError,
    PlatformApiError,
)
from pr_describer.core.logging import get_logger
from pr_describer.domain.description.diff_resolver import DiffResolver
from pr_describer.domain.description.ports import (
    DescriptionGeneratorPort,
    GitPort,
    PullRequestPlatformPort,
)
from pr_describer.domain.description.prompts import render_description_prompt
from pr_describer.domain.description.reconciler import CommentReconciler, build_archive_payload
from pr_describer.domain.description.schemas import (
    DescriptionState,
    EventAction,
    IgnoreSpec,
)
from pr_describer.domain.description.significance import classify
from pr_describer.domain.description.ticket import with_ticket_link

logger = get_logger(__name__)


@dataclass
class Collaborators:
    """한 번의 실행에 필요한 외부 협력 객체와 실행 옵션"""

    git: GitPort
    generator: DescriptionGeneratorPort
    platform: PullRequestPlatformPort
    ignore_spec: IgnoreSpec
    fetch_branches: bool = True
    jira_base_url: str | None = None


def _collaborators(config: RunnableConfig) -> Collaborators:
    return config["configurable"]["collaborators"]


def _error(state: DescriptionState, exc) -> DescriptionState:
    return {
        **state,
        "error_code": exc.error_code,
        "error_message": exc.describe(),
    }


async def resolve_diff_node(state: DescriptionState, config: RunnableConfig) -> DescriptionState:
    """diff 계산 노드: 브랜치 fetch 후 이벤트에 맞는 전략으로 diff 계산"""
    deps = _collaborators(config)
    event = state["event"]
    logger.info("resolve_diff_node 시작 action=%s", event.action.value)

    try:
        if deps.fetch_branches:
            deps.git.configure_identity()
            deps.git.fetch(event.base_ref, event.head_ref)

        diff = DiffResolver(deps.git).resolve(event, deps.ignore_spec)

    except GitOperationError as e:
        logger.error("resolve_diff_node Git 오류 error=%s", e.describe())
        return _error(state, e)

    if diff.fallback_reason:
        logger.warning("resolve_diff_node 대체 전략 사용 reason=%s", diff.fallback_reason)

    return {**state, "diff": diff}


async def assess_significance_node(state: DescriptionState) -> DescriptionState:
    """중요도 판정 노드: 사소한 변경이면 생성을 건너뜀"""
    verdict = classify(state["diff"])
    logger.info(
        "assess_significance_node 완료 significant=%s reason=%s",
        verdict.is_significant,
        verdict.reason,
    )
    return {**state, "verdict": verdict, "skipped": not verdict.is_significant}


async def generate_node(state: DescriptionState, config: RunnableConfig) -> DescriptionState:
    """설명 생성 노드"""
    deps = _collaborators(config)
    diff = state["diff"]
    event = state["event"]

    prompt = render_description_prompt(diff.text, state.get("creator"))

    try:
        description = await deps.generator.generate(
            diff.text, prompt, session_id=state.get("run_id")
        )
    except GenerationBackendError as e:
        logger.error("generate_node 생성 오류 error=%s", e.describe())
        return _error(state, e)

    if deps.jira_base_url:
        description = with_ticket_link(description, event.head_ref, deps.jira_base_url)

    logger.info("generate_node 완료 chars=%d", len(description))
    return {**state, "description": description}


async def archive_previous_node(
    state: DescriptionState, config: RunnableConfig
) -> DescriptionState:
    """이전 본문 보관 노드: 기존 본문이 있을 때만 보관 코멘트 갱신"""
    deps = _collaborators(config)
    pr = state["pr"]

    try:
        detail = await deps.platform.get_pull_request(pr)
        previous_body = detail.body or ""

        if not previous_body.strip():
            logger.info("archive_previous_node 이전 본문 없음, 보관 건너뜀")
            return {**state, "previous_body": "", "archived_comment_id": None}

        comment = await CommentReconciler(deps.platform).reconcile(
            pr, build_archive_payload(previous_body)
        )

    except PlatformApiError as e:
        logger.error("archive_previous_node GitHub 오류 error=%s", e.describe())
        return _error(state, e)

    return {**state, "previous_body": previous_body, "archived_comment_id": comment.id}


async def apply_description_node(
    state: DescriptionState, config: RunnableConfig
) -> DescriptionState:
    """PR 본문 갱신 노드"""
    deps = _collaborators(config)

    try:
        await deps.platform.update_pull_request_body(state["pr"], state["description"])
    except PlatformApiError as e:
        logger.error("apply_description_node GitHub 오류 error=%s", e.describe())
        return _error(state, e)

    logger.info("apply_description_node 완료")
    return state


def route_after_diff(state: DescriptionState) -> Literal["assess", "generate", "end"]:
    """에러면 종료, synchronize면 중요도 판정, 그 외에는 바로 생성"""
    if state.get("error_code"):
        return "end"
    if state["event"].action == EventAction.SYNCHRONIZE:
        return "assess"
    return "generate"


def route_after_assess(state: DescriptionState) -> Literal["generate", "end"]:
    """중요하지 않으면 종료"""
    if state.get("error_code") or state.get("skipped"):
        return "end"
    return "generate"


def should_continue(state: DescriptionState) -> Literal["continue", "end"]:
    """에러 상태 확인: 에러 있으면 종료, 없으면 다음 노드로"""
    if state.get("error_code"):
        logger.info("should_continue: 에러 발생, 종료")
        return "end"
    return "continue"


def create_description_workflow() -> CompiledStateGraph:
    """PR 설명 갱신 워크플로우 생성"""
    workflow = StateGraph(DescriptionState)

    workflow.add_node("resolve_diff", resolve_diff_node)
    workflow.add_node("assess_significance", assess_significance_node)
    workflow.add_node("generate", generate_node)
    workflow.add_node("archive_previous", archive_previous_node)
    workflow.add_node("apply_description", apply_description_node)

    workflow.set_entry_point("resolve_diff")

    workflow.add_conditional_edges(
        "resolve_diff",
        route_after_diff,
        {
            "assess": "assess_significance",
            "generate": "generate",
            "end": END,
        },
    )

    workflow.add_conditional_edges(
        "assess_significance",
        route_after_assess,
        {
            "generate": "generate",
            "end": END,
        },
    )

    workflow.add_conditional_edges(
        "generate",
        should_continue,
        {
            "continue": "archive_previous",
            "end": END,
        },
    )

    workflow.add_conditional_edges(
        "archive_previous",
        should_continue,
        {
            "continue": "apply_description",
            "end": END,
        },
    )

    workflow.add_edge("apply_description", END)

    return workflow.compile()
