"""
이전 PR 본문 보관 코멘트 관리

PR마다 보관 코멘트는 최대 하나만 유지한다. 기존 코멘트는 숨김 마커 또는
헤더와 보조 문구의 조합으로 찾고, 찾으면 덮어쓰고 없으면 새로 만든다.
조회 후 쓰기는 원자적이지 않아 같은 PR에 대한 동시 실행은 중복 코멘트를 만들 수 있다.
"""

from pr_describer.core.logging import get_logger
from pr_describer.domain.description.ports import PullRequestPlatformPort
from pr_describer.domain.description.schemas import ArchivedComment, PullRequestRef

logger = get_logger(__name__)

ARCHIVE_MARKER = "<!-- pr-describer:original-description -->"
ARCHIVE_HEADER = "**Original description**"
ARCHIVE_FOOTER = (
    "_Archived automatically before this pull request description was regenerated._"
)

CORROBORATING_PHRASES = (
    "archived automatically",
    "description was regenerated",
    "previous description",
)


def build_archive_payload(previous_body: str) -> str:
    """이전 본문을 그대로 담은 보관 코멘트 본문 생성"""
    return f"{ARCHIVE_MARKER}\n{ARCHIVE_HEADER}:\n\n{previous_body}\n\n---\n{ARCHIVE_FOOTER}"


def is_archive_comment(body: str | None) -> bool:
    """보관 코멘트 여부 판별

    숨김 마커가 있으면 보관 코멘트로 본다. 마커가 없으면 헤더와
    보조 문구가 모두 있어야 한다.
    """
    if not body:
        return False
    if ARCHIVE_MARKER in body:
        return True

    has_header = ARCHIVE_HEADER in body
    lowered = body.lower()
    return has_header and any(phrase in lowered for phrase in CORROBORATING_PHRASES)


def find_archive_comment(comments: list[ArchivedComment]) -> ArchivedComment | None:
    """가장 먼저 만들어진 보관 코멘트 반환"""
    for comment in comments:
        if is_archive_comment(comment.body):
            return comment
    return None


class CommentReconciler:
    """보관 코멘트를 찾아 갱신하거나 생성"""

    def __init__(self, platform: PullRequestPlatformPort):
        self._platform = platform

    async def reconcile(self, pr: PullRequestRef, archive_payload: str) -> ArchivedComment:
        """보관 코멘트가 archive_payload를 담도록 보장

        Args:
            pr: 대상 PR
            archive_payload: 코멘트 본문, 숨김 마커가 없으면 앞에 붙임

        Returns:
            갱신 또는 생성된 코멘트
        """
        if ARCHIVE_MARKER not in archive_payload:
            archive_payload = f"{ARCHIVE_MARKER}\n{archive_payload}"

        comments = await self._platform.list_comments(pr)
        existing = find_archive_comment(comments)

        if existing is not None:
            logger.info("보관 코멘트 갱신 pr=%s comment_id=%d", pr.full_name, existing.id)
            return await self._platform.update_comment(pr, existing.id, archive_payload)

        logger.info("보관 코멘트 생성 pr=%s comments=%d", pr.full_name, len(comments))
        return await self._platform.create_comment(pr, archive_payload)
