from collections.abc import Sequence
from typing import Protocol

from pr_describer.domain.description.schemas import (
    ArchivedComment,
    PullRequestDetail,
    PullRequestRef,
)


class GitPort(Protocol):
    """diff 추출 계약, 실패 시 GitOperationError"""

    def configure_identity(self) -> None: ...

    def fetch(self, *refs: str, remote: str = "origin") -> None: ...

    def diff_range(self, ref1: str, ref2: str, exclude: Sequence[str] = ()) -> str: ...

    def changed_paths(self, ref1: str, ref2: str, exclude: Sequence[str] = ()) -> list[str]: ...

    def parent_count(self, commit: str) -> int: ...

    def show_commit(self, commit: str, exclude: Sequence[str] = ()) -> str: ...

    def commit_changed_paths(self, commit: str, exclude: Sequence[str] = ()) -> list[str]: ...


class DescriptionGeneratorPort(Protocol):
    """설명 생성 계약, 실패 시 GenerationBackendError"""

    async def generate(
        self, diff_text: str, prompt: str, session_id: str | None = None
    ) -> str: ...


class PullRequestPlatformPort(Protocol):
    """PR/코멘트 조회 및 수정 계약, 실패 시 PlatformApiError"""

    async def get_pull_request(self, pr: PullRequestRef) -> PullRequestDetail: ...

    async def list_comments(self, pr: PullRequestRef) -> list[ArchivedComment]: ...

    async def create_comment(self, pr: PullRequestRef, body: str) -> ArchivedComment: ...

    async def update_comment(
        self, pr: PullRequestRef, comment_id: int, body: str
    ) -> ArchivedComment: ...

    async def update_pull_request_body(self, pr: PullRequestRef, body: str) -> None: ...
