"""설정 테스트"""

import pytest

from pr_describer.core.config import Settings, get_settings
from pr_describer.core.exceptions import ConfigurationError


@pytest.fixture
def clean_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Settings 테스트"""

    def test_actions_input_aliases(self, monkeypatch):
        """INPUT_ 접두어 환경변수 인식"""
        monkeypatch.setenv("INPUT_AI_NAME", "gemini")
        monkeypatch.setenv("INPUT_API_KEY", "key-from-input")
        monkeypatch.setenv("INPUT_IGNORES", "docs/**")
        monkeypatch.setenv("INPUT_USE_JIRA", "true")

        settings = Settings(_env_file=None)

        assert settings.ai_name == "gemini"
        assert settings.api_key == "key-from-input"
        assert settings.ignores == "docs/**"
        assert settings.use_jira is True

    def test_plain_names(self, monkeypatch):
        """접두어 없는 환경변수 인식"""
        monkeypatch.setenv("AI_NAME", "open-ai")
        monkeypatch.setenv("TEMPERATURE", "0.2")

        settings = Settings(_env_file=None)

        assert settings.ai_name == "open-ai"
        assert settings.temperature == 0.2

    def test_empty_inputs_use_defaults(self, monkeypatch):
        """빈 입력은 기본값"""
        monkeypatch.setenv("INPUT_TEMPERATURE", "")
        monkeypatch.setenv("INPUT_USE_JIRA", "")

        settings = Settings(_env_file=None)

        assert settings.temperature == 0.8
        assert settings.use_jira is False

    def test_is_production(self):
        """environment로 운영 여부 판단"""
        assert Settings(_env_file=None, environment="production").is_production is True
        assert Settings(_env_file=None, environment="development").is_production is False


class TestMissingRequired:
    """missing_required 메서드 테스트"""

    def test_all_present(self, settings):
        """필수 설정이 모두 있으면 빈 목록"""
        assert settings.missing_required() == []

    def test_missing_values(self):
        """누락된 항목 이름 반환"""
        settings = Settings(_env_file=None, ai_name="", api_key="", github_token="")

        assert settings.missing_required() == ["API_KEY", "AI_NAME", "GITHUB_TOKEN"]

    def test_jira_requires_base_url(self, settings):
        """Jira 사용 시 기본 URL 필요"""
        configured = settings.model_copy(update={"use_jira": True, "jira_base_url": ""})

        assert configured.missing_required() == ["JIRA_BASE_URL"]


class TestGetSettings:
    """get_settings 함수 테스트"""

    @pytest.mark.parametrize("value", ["3", "-0.1", "hot"])
    def test_invalid_temperature(self, monkeypatch, clean_settings_cache, value):
        """범위를 벗어나거나 숫자가 아닌 온도는 ConfigurationError"""
        monkeypatch.setenv("INPUT_TEMPERATURE", value)

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "TEMPERATURE" in exc_info.value.detail

    def test_cached(self, clean_settings_cache):
        """같은 인스턴스 반환"""
        assert get_settings() is get_settings()
