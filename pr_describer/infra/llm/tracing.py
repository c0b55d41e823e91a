from langfuse import Langfuse
from langfuse.langchain import CallbackHandler

from pr_describer.core.config import Settings
from pr_describer.core.logging import get_logger

logger = get_logger(__name__)


def get_langfuse_handler(settings: Settings) -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환, 키가 없으면 None"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    Langfuse(
        public_key=settings.langfuse_public_key,
        secret_key=settings.langfuse_secret_key,
        host=settings.langfuse_base_url,
    )
    logger.info("Langfuse 트레이싱 활성화 host=%s", settings.langfuse_base_url)
    return CallbackHandler(public_key=settings.langfuse_public_key)
