from pr_describer.infra.llm.base import BaseLLMClient
from pr_describer.infra.llm.factory import AIBackend, create_generator_client, parse_backend
from pr_describer.infra.llm.gemini_client import GeminiClient
from pr_describer.infra.llm.openai_client import OpenAIClient

__all__ = [
    "AIBackend",
    "BaseLLMClient",
    "GeminiClient",
    "OpenAIClient",
    "create_generator_client",
    "parse_backend",
]
