"""테스트 helper"""

from pr_describer.domain.description.schemas import (
    ArchivedComment,
    PullRequestDetail,
    PullRequestRef,
)


def build_file_diff(path: str, added: list[str], removed: list[str] | None = None) -> str:
    """단일 파일 unified diff 생성"""
    removed = removed or []
    lines = [
        f"diff --git a/{path} b/{path}",
        "index 1111111..2222222 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
        f"@@ -1,{len(removed)} +1,{len(added)} @@",
    ]
    lines += [f"-{line}" for line in removed]
    lines += [f"+{line}" for line in added]
    return "\n".join(lines) + "\n"


class FakePlatform:
    """메모리 기반 GitHub PR/코멘트 저장소"""

    def __init__(self, body: str | None = None, comments: list[ArchivedComment] | None = None):
        self.body = body
        self.comments: list[ArchivedComment] = list(comments or [])
        self.created: list[str] = []
        self.updated: list[tuple[int, str]] = []
        self.body_updates: list[str] = []
        self._next_id = 1000

    async def get_pull_request(self, pr: PullRequestRef) -> PullRequestDetail:
        return PullRequestDetail(number=pr.number, body=self.body, author="octocat")

    async def list_comments(self, pr: PullRequestRef) -> list[ArchivedComment]:
        return list(self.comments)

    async def create_comment(self, pr: PullRequestRef, body: str) -> ArchivedComment:
        comment = ArchivedComment(id=self._next_id, body=body)
        self._next_id += 1
        self.comments.append(comment)
        self.created.append(body)
        return comment

    async def update_comment(
        self, pr: PullRequestRef, comment_id: int, body: str
    ) -> ArchivedComment:
        for index, comment in enumerate(self.comments):
            if comment.id == comment_id:
                self.comments[index] = ArchivedComment(id=comment_id, body=body)
        self.updated.append((comment_id, body))
        return ArchivedComment(id=comment_id, body=body)

    async def update_pull_request_body(self, pr: PullRequestRef, body: str) -> None:
        self.body = body
        self.body_updates.append(body)
