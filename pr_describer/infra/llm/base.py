from abc import ABC, abstractmethod

from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from pr_describer.core.exceptions import GenerationBackendError
from pr_describer.core.logging import get_logger

logger = get_logger(__name__)


def _content_text(content: str | list) -> str:
    """메시지 content에서 텍스트만 추출, 블록 리스트면 text 블록을 이어 붙임"""
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class BaseLLMClient(ABC):
    """PR 설명 생성 LLM 클라이언트 추상 클래스"""

    vendor_name: str = "LLM"
    system_prompt: str = ""

    def __init__(self, callbacks: list[BaseCallbackHandler] | None = None):
        self._callbacks = callbacks or []

    @abstractmethod
    def get_chat_model(self) -> BaseChatModel:
        """LangChain 호환 채팅 모델 반환"""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """사용 중인 모델 이름 반환"""
        pass

    async def generate(self, diff_text: str, prompt: str, session_id: str | None = None) -> str:
        """렌더링된 프롬프트로 PR 설명 생성

        Args:
            diff_text: 정규화된 diff, 프롬프트에 이미 포함되어 있으며 로깅에만 사용
            prompt: 렌더링된 프롬프트
            session_id: Langfuse 세션 ID

        Returns:
            생성된 설명

        Raises:
            GenerationBackendError: 벤더 호출 실패 또는 빈 응답
        """
        logger.info(
            "설명 생성 요청 vendor=%s model=%s diff_chars=%d",
            self.vendor_name,
            self.get_model_name(),
            len(diff_text),
        )

        config = {
            "callbacks": self._callbacks,
            "metadata": {
                "langfuse_session_id": session_id,
                "langfuse_tags": ["pr-description", self.vendor_name.lower()],
            },
        }
        messages = [
            SystemMessage(content=self.system_prompt),
            HumanMessage(content=prompt),
        ]

        try:
            response = await self.get_chat_model().ainvoke(messages, config=config)
        except Exception as e:
            raise GenerationBackendError(detail=f"{self.vendor_name} API Error: {e}") from e

        description = _content_text(response.content).strip()

        if not description:
            raise GenerationBackendError(detail=f"{self.vendor_name} API Error: empty response")

        logger.info("설명 생성 완료 vendor=%s chars=%d", self.vendor_name, len(description))
        return description
