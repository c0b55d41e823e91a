"""보관 코멘트 관리 테스트"""

import pytest

from pr_describer.domain.description.reconciler import (
    ARCHIVE_HEADER,
    ARCHIVE_MARKER,
    CommentReconciler,
    build_archive_payload,
    find_archive_comment,
    is_archive_comment,
)
from pr_describer.domain.description.schemas import ArchivedComment
from tests.helpers import FakePlatform


class TestBuildArchivePayload:
    """build_archive_payload 함수 테스트"""

    def test_contains_previous_body_verbatim(self):
        """이전 본문을 수정 없이 포함"""
        body = "## Summary\n\n- keeps `code` and <b>html</b>\n"

        payload = build_archive_payload(body)

        assert f"{ARCHIVE_HEADER}:\n\n{body}" in payload
        assert payload.startswith(ARCHIVE_MARKER)

    def test_payload_is_recognized(self):
        """생성한 본문은 보관 코멘트로 인식"""
        assert is_archive_comment(build_archive_payload("old text")) is True


class TestIsArchiveComment:
    """is_archive_comment 함수 테스트"""

    def test_marker_only(self):
        """숨김 마커만 있어도 인식"""
        assert is_archive_comment(f"{ARCHIVE_MARKER}\nanything") is True

    def test_header_with_phrase(self):
        """마커가 없어도 헤더와 보조 문구가 있으면 인식"""
        body = f"{ARCHIVE_HEADER}:\n\nold\n\n_This previous description was kept._"

        assert is_archive_comment(body) is True

    def test_phrase_is_case_insensitive(self):
        """보조 문구는 대소문자 무시"""
        body = f"{ARCHIVE_HEADER}:\n\nold\n\nArchived Automatically."

        assert is_archive_comment(body) is True

    def test_header_without_phrase(self):
        """헤더만으로는 인식하지 않음"""
        assert is_archive_comment(f"{ARCHIVE_HEADER}: I quoted this header") is False

    @pytest.mark.parametrize("body", [None, "", "LGTM", "previous description was fine"])
    def test_unrelated_comments(self, body):
        """일반 코멘트는 인식하지 않음"""
        assert is_archive_comment(body) is False


class TestFindArchiveComment:
    """find_archive_comment 함수 테스트"""

    def test_returns_first_match(self):
        """여러 개면 가장 먼저 나온 코멘트"""
        comments = [
            ArchivedComment(id=1, body="LGTM"),
            ArchivedComment(id=2, body=build_archive_payload("a")),
            ArchivedComment(id=3, body=build_archive_payload("b")),
        ]

        assert find_archive_comment(comments).id == 2

    def test_no_match(self):
        """없으면 None"""
        assert find_archive_comment([ArchivedComment(id=1, body="LGTM")]) is None


class TestCommentReconciler:
    """CommentReconciler 테스트"""

    @pytest.mark.asyncio
    async def test_creates_when_missing(self, pr_ref):
        """보관 코멘트가 없으면 생성"""
        platform = FakePlatform(comments=[ArchivedComment(id=1, body="LGTM")])

        payload = build_archive_payload("old")

        comment = await CommentReconciler(platform).reconcile(pr_ref, payload)

        assert comment.body == payload
        assert platform.created == [payload]
        assert platform.updated == []

    @pytest.mark.asyncio
    async def test_updates_existing(self, pr_ref):
        """기존 보관 코멘트는 덮어씀"""
        platform = FakePlatform(
            comments=[ArchivedComment(id=7, body=build_archive_payload("old"))]
        )
        payload = build_archive_payload("new")

        comment = await CommentReconciler(platform).reconcile(pr_ref, payload)

        assert comment.id == 7
        assert platform.created == []
        assert platform.updated == [(7, payload)]

    @pytest.mark.asyncio
    async def test_repeated_runs_keep_single_comment(self, pr_ref):
        """두 번 실행해도 보관 코멘트는 하나이며 마지막 본문을 담음"""
        platform = FakePlatform()
        reconciler = CommentReconciler(platform)

        await reconciler.reconcile(pr_ref, build_archive_payload("first"))
        await reconciler.reconcile(pr_ref, build_archive_payload("second"))

        archives = [c for c in platform.comments if is_archive_comment(c.body)]
        assert len(archives) == 1
        assert archives[0].body == build_archive_payload("second")

    @pytest.mark.asyncio
    async def test_updates_legacy_comment(self, pr_ref):
        """마커 없는 기존 형식 코멘트도 갱신 대상"""
        legacy = f"{ARCHIVE_HEADER}:\n\nold\n\n---\nArchived automatically."
        platform = FakePlatform(comments=[ArchivedComment(id=5, body=legacy)])

        payload = build_archive_payload("new")

        await CommentReconciler(platform).reconcile(pr_ref, payload)

        assert platform.updated == [(5, payload)]

    @pytest.mark.asyncio
    async def test_plain_payloads_keep_single_comment(self, pr_ref):
        """마커 없는 본문으로 두 번 실행해도 코멘트는 하나"""
        platform = FakePlatform()
        reconciler = CommentReconciler(platform)

        await reconciler.reconcile(pr_ref, "first payload")
        await reconciler.reconcile(pr_ref, "second payload")

        assert len(platform.comments) == 1
        assert platform.comments[0].body == f"{ARCHIVE_MARKER}\nsecond payload"
        assert platform.updated[0][0] == platform.comments[0].id

    @pytest.mark.asyncio
    async def test_marker_not_duplicated(self, pr_ref):
        """이미 마커가 있는 본문은 그대로 사용"""
        platform = FakePlatform()
        payload = build_archive_payload("old")

        await CommentReconciler(platform).reconcile(pr_ref, payload)

        assert platform.created == [payload]
        assert payload.count(ARCHIVE_MARKER) == 1
