from enum import Enum
from typing import Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from pr_describer.core.exceptions import ErrorCode

DEFAULT_IGNORE_PATTERNS = ("**/package-lock.json", "**/dist/*")


class EventAction(str, Enum):
    """pull_request 이벤트 action"""

    OPENED = "opened"
    SYNCHRONIZE = "synchronize"
    OTHER = "other"

    @classmethod
    def parse(cls, action: str | None) -> "EventAction":
        """알 수 없는 action은 명시적으로 OTHER로 분류"""
        try:
            return cls(action)
        except ValueError:
            return cls.OTHER


class DiffStrategy(str, Enum):
    """diff 추출 전략"""

    FULL_BRANCH = "full_branch"
    SINGLE_COMMIT = "single_commit"
    MERGE_SHOW = "merge_show"


class ChangeEvent(BaseModel):
    """트리거 이벤트"""

    model_config = ConfigDict(frozen=True)

    action: EventAction
    base_ref: str
    head_ref: str
    raw_action: str | None = None


class PullRequestRef(BaseModel):
    """PR 식별자"""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"


class IgnoreSpec(BaseModel):
    """diff 제외 패턴 집합

    override가 지정되면 기본 패턴을 완전히 대체하며 병합하지 않는다.
    """

    model_config = ConfigDict(frozen=True)

    patterns: tuple[str, ...] = DEFAULT_IGNORE_PATTERNS

    @classmethod
    def from_override(cls, override: str | None) -> "IgnoreSpec":
        """쉼표 구분 override 문자열로 생성, 비어 있으면 기본값"""
        if not override or not override.strip():
            return cls()
        patterns = tuple(item.strip() for item in override.split(",") if item.strip())
        return cls(patterns=patterns)

    def pathspecs(self) -> list[str]:
        """git 제외 pathspec 목록

        git pathspec의 `**/`는 디렉토리가 하나 이상 있어야 일치하므로
        `**/x` 패턴은 레포 루트의 `x`도 함께 제외한다.
        """
        pathspecs: list[str] = []
        for pattern in self.patterns:
            forms = [pattern]
            if pattern.startswith("**/"):
                forms.append(pattern.removeprefix("**/"))
            for form in forms:
                pathspec = f":!{form}"
                if pathspec not in pathspecs:
                    pathspecs.append(pathspec)
        return pathspecs


class DiffResult(BaseModel):
    """정규화된 diff 결과"""

    model_config = ConfigDict(frozen=True)

    text: str
    changed_files: list[str] = Field(default_factory=list)
    is_merge_commit: bool = False
    strategy_used: DiffStrategy
    fallback_reason: str | None = None


class SignificanceVerdict(BaseModel):
    """변경 중요도 판정"""

    model_config = ConfigDict(frozen=True)

    is_significant: bool
    reason: str


class ArchivedComment(BaseModel):
    """이전 PR 본문을 보관하는 코멘트"""

    id: int
    body: str


class PullRequestDetail(BaseModel):
    """PR 조회 결과 중 사용하는 필드"""

    number: int
    body: str | None = None
    author: str | None = None


class RunResult(BaseModel):
    """한 번의 실행 결과"""

    status: Literal["updated", "skipped", "failed"]
    pr_number: int | None = None
    description: str | None = None
    strategy: DiffStrategy | None = None
    verdict: SignificanceVerdict | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None


class DescriptionState(TypedDict, total=False):
    """LangGraph 워크플로우 상태"""

    event: ChangeEvent
    pr: PullRequestRef
    creator: str
    run_id: str
    diff: DiffResult
    verdict: SignificanceVerdict
    description: str
    previous_body: str
    archived_comment_id: int | None
    skipped: bool
    error_code: ErrorCode
    error_message: str
