from pr_describer.core.config import Settings
from pr_describer.core.context import set_pr_number, set_run_id
from pr_describer.core.exceptions import (
    ConfigurationError,
    CustomException,
    ErrorCode,
    EventContextError,
)
from pr_describer.core.logging import get_logger
from pr_describer.domain.description.schemas import (
    ChangeEvent,
    DescriptionState,
    EventAction,
    IgnoreSpec,
    PullRequestRef,
    RunResult,
)
from pr_describer.domain.description.workflow import Collaborators, create_description_workflow
from pr_describer.infra.git.client import GitClient
from pr_describer.infra.github.client import GitHubClient, parse_repository
from pr_describer.infra.llm.factory import create_generator_client

logger = get_logger(__name__)

SUPPORTED_EVENTS = frozenset({"pull_request", "pull_request_target"})

_workflow = None


def _get_workflow():
    global _workflow
    if _workflow is None:
        _workflow = create_description_workflow()
    return _workflow


def parse_pull_request_event(
    event_name: str | None,
    payload: dict,
    repository: str | None = None,
) -> tuple[ChangeEvent, PullRequestRef, str | None]:
    """트리거 이벤트 검증 후 ChangeEvent, PR 식별자, 작성자 추출

    Args:
        event_name: 이벤트 이름 (GITHUB_EVENT_NAME 또는 X-GitHub-Event)
        payload: 이벤트 페이로드
        repository: `owner/repo`, 페이로드에 repository가 없을 때 사용

    Raises:
        EventContextError: pull_request 이벤트가 아니거나 필수 필드가 없는 경우
    """
    if event_name not in SUPPORTED_EVENTS:
        raise EventContextError(detail=f"event={event_name}")

    if not isinstance(payload, dict):
        raise EventContextError(detail="페이로드가 JSON 객체가 아닙니다")

    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        raise EventContextError(detail="페이로드에 pull_request가 없습니다")

    try:
        base_ref = pull_request["base"]["ref"]
        head_ref = pull_request["head"]["ref"]
        number = int(pull_request["number"])
    except (KeyError, TypeError, ValueError) as e:
        raise EventContextError(detail=f"pull_request 필드 누락: {e}") from e

    repo_payload = payload.get("repository") or {}
    try:
        if repo_payload.get("full_name"):
            owner, repo = parse_repository(repo_payload["full_name"])
        elif repository:
            owner, repo = parse_repository(repository)
        else:
            raise EventContextError(detail="레포지토리 정보가 없습니다")
    except ValueError as e:
        raise EventContextError(detail=str(e)) from e

    raw_action = payload.get("action")
    event = ChangeEvent(
        action=EventAction.parse(raw_action),
        base_ref=base_ref,
        head_ref=head_ref,
        raw_action=raw_action,
    )
    pr = PullRequestRef(owner=owner, repo=repo, number=number)
    creator = (pull_request.get("user") or {}).get("login")

    logger.info(
        "이벤트 확인 event=%s action=%s base=%s head=%s",
        event_name,
        raw_action,
        base_ref,
        head_ref,
    )
    return event, pr, creator


def build_collaborators(settings: Settings) -> Collaborators:
    """설정으로 실제 협력 객체 생성"""
    return Collaborators(
        git=GitClient(repo_path=settings.repo_path, timeout=settings.git_timeout),
        generator=create_generator_client(settings),
        platform=GitHubClient(
            token=settings.github_token,
            base_url=settings.github_api_base,
            timeout=settings.github_timeout,
        ),
        ignore_spec=IgnoreSpec.from_override(settings.ignores),
        fetch_branches=settings.git_fetch,
        jira_base_url=settings.jira_base_url if settings.use_jira else None,
    )


def _result_from_state(state: DescriptionState) -> RunResult:
    pr = state["pr"]
    diff = state.get("diff")
    common = {
        "pr_number": pr.number,
        "strategy": diff.strategy_used if diff else None,
        "verdict": state.get("verdict"),
    }

    if state.get("error_code"):
        return RunResult(
            status="failed",
            error_code=state["error_code"],
            error_message=state.get("error_message"),
            **common,
        )

    if state.get("skipped"):
        return RunResult(status="skipped", **common)

    return RunResult(status="updated", description=state["description"], **common)


async def run_update(
    settings: Settings,
    event_name: str | None,
    payload: dict,
    repository: str | None = None,
    collaborators: Collaborators | None = None,
    run_id: str | None = None,
) -> RunResult:
    """PR 설명 갱신 1회 실행

    어떤 단계에서 실패해도 예외를 던지지 않고 status=failed 결과를 반환한다.
    재시도는 하지 않는다.

    Args:
        settings: 프로세스 시작 시 로드한 설정
        event_name: 이벤트 이름
        payload: 이벤트 페이로드
        repository: `owner/repo`
        collaborators: 테스트 등에서 주입할 협력 객체, 없으면 설정으로 생성
        run_id: 로그 상관관계용 ID

    Returns:
        실행 결과
    """
    run_id = set_run_id(run_id)
    owned = collaborators is None
    pr_number = None

    try:
        missing = settings.missing_required()
        if missing:
            raise ConfigurationError(detail=f"누락된 설정: {', '.join(missing)}")

        event, pr, creator = parse_pull_request_event(event_name, payload, repository)
        pr_number = pr.number
        set_pr_number(pr_number)

        if collaborators is None:
            collaborators = build_collaborators(settings)

        initial_state = DescriptionState(event=event, pr=pr, creator=creator, run_id=run_id)
        state = await _get_workflow().ainvoke(
            initial_state,
            config={"configurable": {"collaborators": collaborators}},
        )
        result = _result_from_state(state)

    except CustomException as e:
        logger.error("실행 실패 error_code=%s error=%s", e.error_code, e.describe())
        result = RunResult(
            status="failed",
            pr_number=pr_number,
            error_code=e.error_code,
            error_message=e.describe(),
        )

    except Exception as e:
        logger.error("실행 중 예기치 않은 오류 error=%s", e, exc_info=True)
        result = RunResult(
            status="failed",
            pr_number=pr_number,
            error_code=ErrorCode.INTERNAL_ERROR,
            error_message=str(e) or type(e).__name__,
        )

    finally:
        if owned and collaborators is not None and isinstance(collaborators.platform, GitHubClient):
            await collaborators.platform.close()

    logger.info("실행 종료 status=%s pr_number=%s", result.status, result.pr_number)
    return result
