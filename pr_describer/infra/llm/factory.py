from enum import Enum

from pr_describer.core.config import Settings
from pr_describer.core.exceptions import ConfigurationError
from pr_describer.core.logging import get_logger
from pr_describer.infra.llm.base import BaseLLMClient
from pr_describer.infra.llm.gemini_client import GeminiClient
from pr_describer.infra.llm.openai_client import OpenAIClient
from pr_describer.infra.llm.tracing import get_langfuse_handler

logger = get_logger(__name__)


class AIBackend(str, Enum):
    """지원하는 생성 백엔드"""

    OPEN_AI = "open-ai"
    GEMINI = "gemini"


_REGISTRY: dict[AIBackend, type[BaseLLMClient]] = {
    AIBackend.OPEN_AI: OpenAIClient,
    AIBackend.GEMINI: GeminiClient,
}


def parse_backend(ai_name: str) -> AIBackend:
    """ai_name을 백엔드로 변환, 알 수 없는 이름은 기본값 없이 에러

    Raises:
        ConfigurationError: 지원하지 않는 이름인 경우
    """
    try:
        return AIBackend(ai_name.strip().lower())
    except ValueError:
        supported = ", ".join(backend.value for backend in AIBackend)
        raise ConfigurationError(
            detail=f"지원하지 않는 AI 백엔드: {ai_name!r} (지원: {supported})"
        ) from None


def create_generator_client(settings: Settings) -> BaseLLMClient:
    """설정에 맞는 설명 생성 클라이언트 생성"""
    backend = parse_backend(settings.ai_name)
    client_class = _REGISTRY[backend]

    model = settings.openai_model if backend == AIBackend.OPEN_AI else settings.gemini_model
    handler = get_langfuse_handler(settings)

    client = client_class(
        api_key=settings.api_key,
        model=model,
        temperature=settings.temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
        callbacks=[handler] if handler else None,
    )
    logger.info("%s 클라이언트 초기화 model=%s", client.vendor_name, model)
    return client
