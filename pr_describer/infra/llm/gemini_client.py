from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from pr_describer.core.exceptions import ConfigurationError
from pr_describer.domain.description.prompts import GEMINI_SYSTEM
from pr_describer.infra.llm.base import BaseLLMClient


class GeminiClient(BaseLLMClient):
    """Gemini 클라이언트"""

    vendor_name = "Gemini"
    system_prompt = GEMINI_SYSTEM

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-pro",
        temperature: float = 0.8,
        max_tokens: int = 1024,
        timeout: float = 120.0,
        callbacks: list[BaseCallbackHandler] | None = None,
    ):
        super().__init__(callbacks)
        if not api_key:
            raise ConfigurationError(detail="API_KEY가 설정되지 않았습니다")

        self._model_name = model
        self._model = ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=temperature,
            max_output_tokens=max_tokens,
            timeout=timeout,
        )

    def get_chat_model(self) -> BaseChatModel:
        """LangChain ChatGoogleGenerativeAI 모델 반환"""
        return self._model

    def get_model_name(self) -> str:
        """사용 중인 모델 이름 반환"""
        return self._model_name
