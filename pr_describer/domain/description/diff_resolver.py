from pr_describer.core.exceptions import GitOperationError
from pr_describer.core.logging import get_logger
from pr_describer.domain.description.ports import GitPort
from pr_describer.domain.description.schemas import (
    ChangeEvent,
    DiffResult,
    DiffStrategy,
    EventAction,
    IgnoreSpec,
)

logger = get_logger(__name__)


class DiffResolver:
    """이벤트 종류에 따라 diff 추출 전략을 선택하고 실행

    - opened 및 기타 action: base와 head 브랜치 전체 diff
    - synchronize: head 커밋 하나만, merge 커밋이면 해당 커밋이 도입한 변경만
    """

    def __init__(self, git: GitPort, remote: str = "origin"):
        self._git = git
        self._remote = remote

    def _remote_ref(self, ref: str) -> str:
        return f"{self._remote}/{ref}"

    def resolve(self, event: ChangeEvent, ignore_spec: IgnoreSpec) -> DiffResult:
        """diff 계산

        Args:
            event: 트리거 이벤트
            ignore_spec: 제외 패턴

        Returns:
            정규화된 diff 결과, 범위 내 변경이 없으면 text는 빈 문자열

        Raises:
            GitOperationError: diff 명령이 실패한 경우
        """
        exclude = ignore_spec.pathspecs()
        logger.info(
            "diff 계산 시작 action=%s base=%s head=%s ignores=%s",
            event.action.value,
            event.base_ref,
            event.head_ref,
            ",".join(ignore_spec.patterns),
        )

        if event.action == EventAction.SYNCHRONIZE:
            result = self._resolve_latest_commit(event, exclude)
        else:
            result = self._resolve_full_branch(event, exclude)

        logger.info(
            "diff 계산 완료 strategy=%s files=%d chars=%d merge=%s",
            result.strategy_used.value,
            len(result.changed_files),
            len(result.text),
            result.is_merge_commit,
        )
        return result

    def _resolve_full_branch(self, event: ChangeEvent, exclude: list[str]) -> DiffResult:
        base = self._remote_ref(event.base_ref)
        head = self._remote_ref(event.head_ref)

        text = self._git.diff_range(base, head, exclude)
        changed_files = self._list_changed(lambda: self._git.changed_paths(base, head, exclude))

        return DiffResult(
            text=text,
            changed_files=changed_files,
            is_merge_commit=False,
            strategy_used=DiffStrategy.FULL_BRANCH,
        )

    def _resolve_latest_commit(self, event: ChangeEvent, exclude: list[str]) -> DiffResult:
        head = self._remote_ref(event.head_ref)
        fallback_reason = None

        try:
            parents = self._git.parent_count(head)
        except GitOperationError as e:
            # shallow clone 등으로 부모 조회 불가
            fallback_reason = f"parent lookup failed: {e.describe()}"
            logger.warning("merge 커밋 판별 실패, 단일 커밋 diff로 대체 error=%s", e.describe())
            parents = 1

        if parents > 1:
            text = self._git.show_commit(head, exclude)
            changed_files = self._list_changed(
                lambda: self._git.commit_changed_paths(head, exclude)
            )
            return DiffResult(
                text=text,
                changed_files=changed_files,
                is_merge_commit=True,
                strategy_used=DiffStrategy.MERGE_SHOW,
            )

        previous = f"{head}~1"
        text = self._git.diff_range(previous, head, exclude)
        changed_files = self._list_changed(
            lambda: self._git.changed_paths(previous, head, exclude)
        )
        return DiffResult(
            text=text,
            changed_files=changed_files,
            is_merge_commit=False,
            strategy_used=DiffStrategy.SINGLE_COMMIT,
            fallback_reason=fallback_reason,
        )

    def _list_changed(self, query) -> list[str]:
        """변경 파일 목록 조회, 실패해도 빈 목록으로 계속 진행"""
        try:
            return query()
        except GitOperationError as e:
            logger.warning("변경 파일 목록 조회 실패 error=%s", e.describe())
            return []
