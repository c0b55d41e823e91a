"""테스트 공통 fixture"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pr_describer.core.config import Settings
from pr_describer.domain.description.schemas import (
    ChangeEvent,
    EventAction,
    IgnoreSpec,
    PullRequestRef,
)
from pr_describer.domain.description.workflow import Collaborators
from tests.helpers import FakePlatform, build_file_diff


@pytest.fixture
def settings() -> Settings:
    """테스트용 설정"""
    return Settings(
        _env_file=None,
        ai_name="open-ai",
        api_key="sk-test",
        github_token="ghs-test",
        temperature=0.8,
        ignores="",
        use_jira=False,
    )


@pytest.fixture
def pr_ref() -> PullRequestRef:
    """테스트용 PR 식별자"""
    return PullRequestRef(owner="octo-org", repo="widgets", number=42)


@pytest.fixture
def opened_event() -> ChangeEvent:
    """opened 이벤트"""
    return ChangeEvent(action=EventAction.OPENED, base_ref="main", head_ref="feat/x")


@pytest.fixture
def synchronize_event() -> ChangeEvent:
    """synchronize 이벤트"""
    return ChangeEvent(action=EventAction.SYNCHRONIZE, base_ref="main", head_ref="feat/x")


@pytest.fixture
def small_diff() -> str:
    """1개 파일, 10줄 변경 diff"""
    return build_file_diff(
        "src/widget.py",
        added=[f"value_{i} = {i}" for i in range(5)],
        removed=[f"value_{i} = 0" for i in range(5)],
    )


@pytest.fixture
def mock_git(small_diff) -> MagicMock:
    """git 협력 객체 mock"""
    git = MagicMock()
    git.diff_range.return_value = small_diff
    git.changed_paths.return_value = ["src/widget.py"]
    git.show_commit.return_value = small_diff
    git.commit_changed_paths.return_value = ["src/widget.py"]
    git.parent_count.return_value = 1
    return git


@pytest.fixture
def mock_generator() -> MagicMock:
    """설명 생성 협력 객체 mock"""
    generator = MagicMock()
    generator.generate = AsyncMock(return_value="## What this PR does?\n1. Added widgets🚀")
    return generator


@pytest.fixture
def fake_platform() -> FakePlatform:
    """이전 본문이 있는 PR"""
    return FakePlatform(body="Hand written description")


@pytest.fixture
def collaborators(mock_git, mock_generator, fake_platform) -> Collaborators:
    """워크플로우 협력 객체 묶음"""
    return Collaborators(
        git=mock_git,
        generator=mock_generator,
        platform=fake_platform,
        ignore_spec=IgnoreSpec(),
        fetch_branches=True,
    )


@pytest.fixture
def pull_request_payload() -> dict:
    """pull_request 이벤트 페이로드"""
    return {
        "action": "opened",
        "number": 42,
        "pull_request": {
            "number": 42,
            "body": "Hand written description",
            "user": {"login": "octocat"},
            "base": {"ref": "main"},
            "head": {"ref": "feat/x"},
        },
        "repository": {"full_name": "octo-org/widgets"},
    }


@pytest.fixture
def create_http_error():
    """HTTPStatusError 생성 helper"""

    def _create(status_code: int, message: str = "Error"):
        request = httpx.Request("GET", "https://api.github.com/test")
        return httpx.HTTPStatusError(
            message,
            request=request,
            response=httpx.Response(status_code, request=request, json={"message": message}),
        )

    return _create
