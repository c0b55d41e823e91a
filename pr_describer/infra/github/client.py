import re

import httpx

from pr_describer.core.exceptions import PlatformApiError
from pr_describer.core.logging import get_logger
from pr_describer.domain.description.schemas import (
    ArchivedComment,
    PullRequestDetail,
    PullRequestRef,
)

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"

REPOSITORY_PATTERN = re.compile(
    r"^(?:https?://github\.com/)?([a-zA-Z0-9_.-]+)/([a-zA-Z0-9_.-]+?)(?:\.git)?/?$"
)

COMMENTS_PER_PAGE = 100
MAX_COMMENT_PAGES = 50


def _get_headers(token: str | None = None) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub 토큰

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def parse_repository(repository: str) -> tuple[str, str]:
    """`owner/repo` 또는 GitHub URL에서 owner와 repo 추출

    Raises:
        ValueError: 형식이 올바르지 않은 경우
    """
    match = REPOSITORY_PATTERN.match(repository.strip())
    if not match:
        raise ValueError(f"유효하지 않은 GitHub 레포지토리: {repository}")
    return match.group(1), match.group(2)


def _describe_http_error(e: httpx.HTTPError) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        try:
            data = e.response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            message = str(data.get("message") or "")
        else:
            message = e.response.text[:200]
        return f"HTTP {e.response.status_code} {message}".strip()
    return f"{type(e).__name__}: {e}"


class GitHubClient:
    """PR 본문과 이슈 코멘트를 다루는 GitHub REST 클라이언트"""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_BASE,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = _get_headers(token)

    async def close(self) -> None:
        """httpx 클라이언트 종료"""
        await self._client.aclose()

    async def _request(self, step: str, method: str, path: str, **kwargs) -> httpx.Response:
        """요청 실행, 실패 시 단계 이름을 담아 PlatformApiError로 변환"""
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.request(method, url, headers=self._headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            detail = _describe_http_error(e)
            logger.error("GitHub API 오류 step=%s detail=%s", step, detail)
            raise PlatformApiError(step=step, detail=detail) from e
        return response

    async def get_pull_request(self, pr: PullRequestRef) -> PullRequestDetail:
        """PR 조회"""
        response = await self._request(
            "get_pull_request", "GET", f"/repos/{pr.owner}/{pr.repo}/pulls/{pr.number}"
        )
        data = response.json()

        logger.info("PR 조회 완료 pr=%s", pr.full_name)
        return PullRequestDetail(
            number=data["number"],
            body=data.get("body"),
            author=(data.get("user") or {}).get("login"),
        )

    async def list_comments(self, pr: PullRequestRef) -> list[ArchivedComment]:
        """PR의 이슈 코멘트 전체 조회"""
        path = f"/repos/{pr.owner}/{pr.repo}/issues/{pr.number}/comments"
        comments: list[ArchivedComment] = []

        for page in range(1, MAX_COMMENT_PAGES + 1):
            response = await self._request(
                "list_comments",
                "GET",
                path,
                params={"per_page": COMMENTS_PER_PAGE, "page": page},
            )
            data = response.json()
            comments.extend(
                ArchivedComment(id=item["id"], body=item.get("body") or "") for item in data
            )
            if len(data) < COMMENTS_PER_PAGE:
                break

        logger.info("코멘트 조회 완료 pr=%s count=%d", pr.full_name, len(comments))
        return comments

    async def create_comment(self, pr: PullRequestRef, body: str) -> ArchivedComment:
        """코멘트 생성"""
        response = await self._request(
            "create_comment",
            "POST",
            f"/repos/{pr.owner}/{pr.repo}/issues/{pr.number}/comments",
            json={"body": body},
        )
        data = response.json()

        logger.info("코멘트 생성 완료 pr=%s comment_id=%s", pr.full_name, data.get("id"))
        return ArchivedComment(id=data["id"], body=data.get("body") or body)

    async def update_comment(
        self, pr: PullRequestRef, comment_id: int, body: str
    ) -> ArchivedComment:
        """코멘트 본문 덮어쓰기"""
        response = await self._request(
            "update_comment",
            "PATCH",
            f"/repos/{pr.owner}/{pr.repo}/issues/comments/{comment_id}",
            json={"body": body},
        )
        data = response.json()

        logger.info("코멘트 갱신 완료 pr=%s comment_id=%d", pr.full_name, comment_id)
        return ArchivedComment(id=data.get("id", comment_id), body=data.get("body") or body)

    async def update_pull_request_body(self, pr: PullRequestRef, body: str) -> None:
        """PR 본문 갱신"""
        await self._request(
            "update_pull_request_body",
            "PATCH",
            f"/repos/{pr.owner}/{pr.repo}/pulls/{pr.number}",
            json={"body": body},
        )
        logger.info("PR 본문 갱신 완료 pr=%s length=%d", pr.full_name, len(body))
