import subprocess
from collections.abc import Sequence

from pr_describer.core.exceptions import GitOperationError
from pr_describer.core.logging import get_logger

logger = get_logger(__name__)

BOT_NAME = "github-actions[bot]"
BOT_EMAIL = "github-actions[bot]@users.noreply.github.com"


def _with_pathspec(args: list[str], exclude: Sequence[str]) -> list[str]:
    """제외 pathspec이 있으면 `--` 뒤에 붙임"""
    if not exclude:
        return args
    return [*args, "--", *exclude]


class GitClient:
    """로컬 작업 트리에서 git 명령을 실행하는 클라이언트"""

    def __init__(self, repo_path: str = ".", timeout: float = 120.0):
        self._repo_path = repo_path
        self._timeout = timeout

    def _run(self, *args: str) -> str:
        """git 명령 실행 후 stdout 반환

        Raises:
            GitOperationError: 종료 코드가 0이 아니거나 실행할 수 없는 경우
        """
        command = ["git", *args]
        try:
            completed = subprocess.run(
                command,
                cwd=self._repo_path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            logger.debug("git 명령 실패 command=%s code=%d", " ".join(command), e.returncode)
            raise GitOperationError(
                detail=f"`{' '.join(command)}` exited with {e.returncode}: {stderr}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise GitOperationError(detail=f"`{' '.join(command)}` timed out") from e
        except OSError as e:
            raise GitOperationError(detail=f"git 실행 불가: {e}") from e

        return completed.stdout

    def configure_identity(self) -> None:
        """커밋 작성자 정보를 bot 계정으로 설정"""
        self._run("config", "user.name", BOT_NAME)
        self._run("config", "user.email", BOT_EMAIL)

    def fetch(self, *refs: str, remote: str = "origin") -> None:
        """원격 브랜치 fetch"""
        self._run("fetch", remote, *refs)
        logger.info("브랜치 fetch 완료 remote=%s refs=%s", remote, ",".join(refs))

    def diff_range(self, ref1: str, ref2: str, exclude: Sequence[str] = ()) -> str:
        """두 ref 사이의 diff"""
        return self._run(*_with_pathspec(["diff", ref1, ref2], exclude))

    def changed_paths(self, ref1: str, ref2: str, exclude: Sequence[str] = ()) -> list[str]:
        """두 ref 사이에서 변경된 파일 경로 목록"""
        output = self._run(*_with_pathspec(["diff", "--name-only", ref1, ref2], exclude))
        return [line for line in output.splitlines() if line.strip()]

    def parent_count(self, commit: str) -> int:
        """커밋의 부모 개수"""
        output = self._run("rev-list", "--parents", "-n", "1", commit).split()
        if not output:
            raise GitOperationError(detail=f"커밋을 찾을 수 없음: {commit}")
        return len(output) - 1

    def show_commit(self, commit: str, exclude: Sequence[str] = ()) -> str:
        """단일 커밋이 도입한 변경만 출력

        merge 커밋은 combined diff로 출력되어 병합으로 들어온 브랜치 이력은 제외된다.
        """
        return self._run(*_with_pathspec(["show", "--format=", commit], exclude))

    def commit_changed_paths(self, commit: str, exclude: Sequence[str] = ()) -> list[str]:
        """단일 커밋에서 변경된 파일 경로 목록"""
        output = self._run(*_with_pathspec(["show", "--name-only", "--format=", commit], exclude))
        return [line for line in output.splitlines() if line.strip()]
