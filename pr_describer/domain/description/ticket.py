import re

BRANCH_PREFIXES = ("feat/", "fix/")
TICKET_KEY_PATTERN = re.compile(r"\b([A-Z][A-Z0-9]+-\d+)\b")


def extract_branch_name(head_ref: str) -> str:
    """브랜치 이름에서 feat/, fix/ 접두어 제거"""
    name = head_ref
    for prefix in BRANCH_PREFIXES:
        name = name.replace(prefix, "")
    return name


def extract_ticket_key(head_ref: str) -> str | None:
    """브랜치 이름에서 Jira 티켓 키 추출, 없으면 None"""
    match = TICKET_KEY_PATTERN.search(extract_branch_name(head_ref).upper())
    return match.group(1) if match else None


def with_ticket_link(description: str, head_ref: str, jira_base_url: str) -> str:
    """티켓 키가 있으면 설명 앞에 Jira 링크를 붙임"""
    key = extract_ticket_key(head_ref)
    if not key or not jira_base_url:
        return description

    url = f"{jira_base_url.rstrip('/')}/browse/{key}"
    return f"[{key}]({url})\n\n{description}"
