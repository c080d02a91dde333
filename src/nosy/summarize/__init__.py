"""LLM summarization collaborator."""

from .client import LLMSummarizer
from .config import DEFAULT_MODEL, DEFAULT_PROVIDER, PROVIDERS, LLMSettings
from .messages import DEFAULT_LANGUAGE, MessageOptions, build_chat_messages

__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_MODEL",
    "DEFAULT_PROVIDER",
    "PROVIDERS",
    "LLMSettings",
    "LLMSummarizer",
    "MessageOptions",
    "build_chat_messages",
]
