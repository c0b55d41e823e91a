from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from pr_describer.core.exceptions import ConfigurationError
from pr_describer.domain.description.prompts import OPENAI_SYSTEM
from pr_describer.infra.llm.base import BaseLLMClient


class OpenAIClient(BaseLLMClient):
    """OpenAI Chat Completions 클라이언트"""

    vendor_name = "OpenAI"
    system_prompt = OPENAI_SYSTEM

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.8,
        max_tokens: int = 1024,
        timeout: float = 120.0,
        callbacks: list[BaseCallbackHandler] | None = None,
    ):
        super().__init__(callbacks)
        if not api_key:
            raise ConfigurationError(detail="API_KEY가 설정되지 않았습니다")

        self._model_name = model
        self._model = ChatOpenAI(
            model=model,
            api_key=api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    def get_chat_model(self) -> BaseChatModel:
        """LangChain ChatOpenAI 모델 반환"""
        return self._model

    def get_model_name(self) -> str:
        """사용 중인 모델 이름 반환"""
        return self._model_name
