from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pr_describer.core.exceptions import ConfigurationError

DEFAULT_TEMPERATURE = 0.8


def _input(name: str) -> AliasChoices:
    """NAME 또는 GitHub Actions 입력 형식(INPUT_NAME) 환경변수 모두 허용"""
    return AliasChoices(name, f"input_{name}")


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # 생성 백엔드 선택: "open-ai" 또는 "gemini"
    ai_name: str = Field(default="", validation_alias=_input("ai_name"))
    api_key: str = Field(default="", validation_alias=_input("api_key"))
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0, validation_alias=_input("temperature")
    )

    # GitHub
    github_token: str = Field(default="", validation_alias=_input("github_token"))
    github_api_base: str = "https://api.github.com"
    github_timeout: float = 60.0

    # diff 제외 패턴 (쉼표 구분, 지정 시 기본값을 대체)
    ignores: str = Field(default="", validation_alias=_input("ignores"))

    # Jira 티켓 링크
    use_jira: bool = Field(default=False, validation_alias=_input("use_jira"))
    jira_base_url: str = Field(default="", validation_alias=_input("jira_base_url"))

    # 모델 설정
    openai_model: str = "gpt-4o"
    gemini_model: str = "gemini-1.5-pro"
    llm_max_tokens: int = 1024
    llm_timeout: float = 120.0

    # Git 설정
    repo_path: str = "."
    git_fetch: bool = True
    git_timeout: float = 120.0

    # 로깅 설정
    log_level: str = "INFO"

    # Langfuse 설정
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # Webhook 설정
    webhook_secret: str = ""
    max_concurrent_runs: int = 2

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("temperature", mode="before")
    @classmethod
    def default_empty_temperature(cls, v):
        """Actions는 미지정 입력을 빈 문자열로 전달"""
        if isinstance(v, str) and not v.strip():
            return DEFAULT_TEMPERATURE
        return v

    @field_validator("use_jira", mode="before")
    @classmethod
    def default_empty_flag(cls, v):
        if isinstance(v, str) and not v.strip():
            return False
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def missing_required(self) -> list[str]:
        """실행에 필요한 필수 설정 중 누락된 항목 반환"""
        missing = []
        if not self.api_key:
            missing.append("API_KEY")
        if not self.ai_name:
            missing.append("AI_NAME")
        if not self.github_token:
            missing.append("GITHUB_TOKEN")
        if self.use_jira and not self.jira_base_url:
            missing.append("JIRA_BASE_URL")
        return missing


@lru_cache
def get_settings() -> Settings:
    """프로세스 시작 시 한 번 로드한 설정 반환

    Raises:
        ConfigurationError: 설정값 형식이 올바르지 않은 경우
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]).upper() for err in e.errors() if err["loc"])
        raise ConfigurationError(detail=f"잘못된 설정값: {fields or e}") from e
