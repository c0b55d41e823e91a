"""
CI 진입점

GitHub Actions 환경변수(GITHUB_EVENT_NAME, GITHUB_EVENT_PATH, GITHUB_REPOSITORY)에서
이벤트를 읽어 한 번 실행하고, 결과를 GITHUB_OUTPUT에 기록한다.
"""

import asyncio
import json
import sys
import uuid
from pathlib import Path

import typer

from pr_describer.core.config import get_settings
from pr_describer.core.exceptions import CustomException, EventContextError
from pr_describer.core.logging import get_logger, setup_logging
from pr_describer.domain.description.schemas import RunResult
from pr_describer.domain.description.service import run_update

logger = get_logger(__name__)


def _escape_command_value(value: str) -> str:
    """workflow command 값 이스케이프"""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def report_failure(message: str) -> None:
    """실패 메시지를 Actions 에러 채널로 출력"""
    typer.echo(f"::error::{_escape_command_value(message)}")


def write_outputs(output_path: str | None, outputs: dict[str, str]) -> None:
    """GITHUB_OUTPUT 파일에 여러 줄 안전한 형식으로 출력 기록"""
    if not output_path:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        for name, value in outputs.items():
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def load_event(event_path: str | None) -> dict:
    """이벤트 페이로드 JSON 로드

    Raises:
        EventContextError: 파일이 없거나 JSON이 아닌 경우
    """
    if not event_path:
        raise EventContextError(detail="GITHUB_EVENT_PATH가 설정되지 않았습니다")
    try:
        return json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise EventContextError(detail=f"이벤트 페이로드를 읽을 수 없음: {e}") from e


def execute(
    event_name: str | None,
    event_path: str | None,
    repository: str | None,
    output_path: str | None,
) -> RunResult:
    """설정과 이벤트를 로드해 한 번 실행"""
    try:
        settings = get_settings()
    except CustomException as e:
        setup_logging(stream=sys.stderr, mask=True)
        return RunResult(status="failed", error_code=e.error_code, error_message=e.describe())

    setup_logging(
        settings.log_level,
        production=settings.is_production,
        stream=sys.stderr,
        mask=True,
    )

    try:
        payload = load_event(event_path)
    except CustomException as e:
        return RunResult(status="failed", error_code=e.error_code, error_message=e.describe())

    result = asyncio.run(run_update(settings, event_name, payload, repository=repository))

    if result.status == "updated":
        write_outputs(
            output_path,
            {"pr_number": str(result.pr_number), "description": result.description or ""},
        )
        logger.info("PR #%d 설명 갱신 완료", result.pr_number)
    elif result.status == "skipped":
        write_outputs(output_path, {"pr_number": str(result.pr_number), "description": ""})
        logger.info(
            "PR #%d 변경이 작아 설명 갱신 건너뜀 reason=%s",
            result.pr_number,
            result.verdict.reason if result.verdict else "",
        )

    return result


def run(
    event_name: str = typer.Option(None, envvar="GITHUB_EVENT_NAME", help="트리거 이벤트 이름"),
    event_path: str = typer.Option(None, envvar="GITHUB_EVENT_PATH", help="이벤트 페이로드 JSON 경로"),
    repository: str = typer.Option(None, envvar="GITHUB_REPOSITORY", help="owner/repo"),
    output_path: str = typer.Option(None, envvar="GITHUB_OUTPUT", help="Actions 출력 파일 경로"),
) -> None:
    """PR 설명을 생성해 본문을 갱신"""
    result = execute(event_name, event_path, repository, output_path)

    if result.status == "failed":
        report_failure(result.error_message or "Unknown error")
        raise typer.Exit(code=1)


def main() -> None:
    typer.run(run)


if __name__ == "__main__":
    main()
