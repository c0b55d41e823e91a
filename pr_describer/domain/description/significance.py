"""
변경 중요도 판정

synchronize 이벤트에서 설명을 다시 생성할 만큼 변경이 큰지 결정한다.
규칙은 아래 우선순위대로 평가하며 처음 일치하는 규칙이 판정을 결정한다.
"""

import re
from dataclasses import dataclass

from pr_describer.domain.description.schemas import DiffResult, SignificanceVerdict

LARGE_CHANGE_LINES = 50
MANY_FILES = 5
MODERATE_CHANGE_LINES = 20

CONFIG_EXTENSIONS = (".json", ".yml", ".yaml", ".toml", ".ini", ".config")

FILE_HEADER_PATTERN = re.compile(r"^diff --(?:git|cc|combined) ")
HUNK_HEADER_PATTERN = re.compile(r"^(@{2,}) ")

DECLARATION_PATTERN = re.compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:public\s+|private\s+|protected\s+|internal\s+)?"
    r"(?:abstract\s+|static\s+|final\s+|sealed\s+|data\s+)*(?:async\s+)?"
    r"(?:def|function|class|interface|type|struct|enum|trait|fn|func)\s+[A-Za-z_$][\w$]*"
    r"|^\s*(?:export\s+)?const\s+[A-Za-z_$][\w$]*\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"
)

IMPORT_PATTERN = re.compile(
    r"^\s*(?:import\s|from\s+\S+\s+import\s|#include\s|using\s+[\w.]+\s*;"
    r"|use\s+[\w:]+(?:::\{[^}]*\})?\s*;|require\s+['\"])"
    r"|\brequire\(\s*['\"]"
)


@dataclass
class DiffStats:
    """diff 텍스트에서 추출한 신호"""

    changed_lines: int = 0
    file_count: int = 0
    has_declarations: bool = False
    has_imports: bool = False


def analyze_diff_text(text: str) -> DiffStats:
    """diff 텍스트를 한 번 순회하며 변경 줄 수, 파일 수, 선언/import 추가 여부 계산

    파일 헤더(`---`/`+++`)는 hunk 밖에 있으므로 변경 줄로 세지 않는다.
    combined diff(`@@@`)는 부모 수만큼의 마커 열을 검사한다.
    """
    stats = DiffStats()
    file_headers: set[str] = set()
    marker_width = 0

    for line in text.splitlines():
        if FILE_HEADER_PATTERN.match(line):
            file_headers.add(line)
            marker_width = 0
            continue

        hunk = HUNK_HEADER_PATTERN.match(line)
        if hunk:
            marker_width = len(hunk.group(1)) - 1
            continue

        if not marker_width:
            continue

        markers = line[:marker_width]
        if "+" in markers:
            stats.changed_lines += 1
            content = line[marker_width:]
            if not stats.has_declarations and DECLARATION_PATTERN.search(content):
                stats.has_declarations = True
            if not stats.has_imports and IMPORT_PATTERN.search(content):
                stats.has_imports = True
        elif "-" in markers:
            stats.changed_lines += 1

    stats.file_count = len(file_headers)
    return stats


def _is_config_file(path: str) -> bool:
    return path.lower().endswith(CONFIG_EXTENSIONS)


def classify(diff: DiffResult) -> SignificanceVerdict:
    """diff가 설명을 다시 생성할 만큼 중요한지 판정

    Args:
        diff: DiffResolver 결과

    Returns:
        판정 결과, 신호가 없으면 중요하지 않음으로 판정
    """
    if not diff.changed_files and not diff.text.strip():
        return SignificanceVerdict(is_significant=False, reason="no files changed")

    stats = analyze_diff_text(diff.text)
    lines = stats.changed_lines
    files = stats.file_count

    if lines >= LARGE_CHANGE_LINES:
        return SignificanceVerdict(
            is_significant=True, reason=f"large change: {lines} lines changed"
        )

    if files >= MANY_FILES:
        return SignificanceVerdict(
            is_significant=True, reason=f"many files changed: {files} files"
        )

    if stats.has_declarations:
        return SignificanceVerdict(is_significant=True, reason="new declarations added")

    if stats.has_imports:
        return SignificanceVerdict(is_significant=True, reason="dependency changes detected")

    if any(_is_config_file(path) for path in diff.changed_files):
        return SignificanceVerdict(is_significant=True, reason="configuration changes detected")

    if lines >= MODERATE_CHANGE_LINES:
        return SignificanceVerdict(
            is_significant=True,
            reason=f"moderate change: {lines} lines across {files} files",
        )

    return SignificanceVerdict(
        is_significant=False,
        reason=f"minor change: {lines} lines across {files} files",
    )
