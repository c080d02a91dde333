"""OpenAI-compatible chat client that turns extracted text into a summary."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from openai import AsyncOpenAI

from nosy.errors import SummarizationError
from nosy.pipeline.progress import ProgressSink
from nosy.summarize.config import LLMSettings
from nosy.summarize.messages import MessageOptions, build_chat_messages

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_retryable(exc: Exception) -> bool:
    status_code = getattr(exc, "status_code", None)
    if status_code in _RETRYABLE_STATUS_CODES:
        return True

    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True

    return type(exc).__name__ in {
        "RateLimitError",
        "APITimeoutError",
        "APIConnectionError",
        "InternalServerError",
    }


def _first_text(response: Any, *, model: str) -> str:
    choices = getattr(response, "choices", None)
    if not isinstance(choices, list) or not choices:
        raise SummarizationError("LLM response missing choices", model=model)

    first = choices[0]
    message = getattr(first, "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if content is None and isinstance(first, dict):
        message_dict = first.get("message", {})
        if isinstance(message_dict, dict):
            content = message_dict.get("content")

    if isinstance(content, list):
        content = "".join(str(part.get("text", "")) for part in content if isinstance(part, dict))

    text = str(content or "").strip()
    if not text:
        raise SummarizationError("LLM returned no text", model=model)
    return text


class LLMSummarizer:
    """Chat-completion summarizer with response validation and retries."""

    def __init__(
        self,
        settings: LLMSettings,
        *,
        messages: MessageOptions | None = None,
        client: Any | None = None,
        max_retries: int = 2,
        retry_base_seconds: float = 0.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if retry_base_seconds < 0:
            raise ValueError("retry_base_seconds cannot be negative")

        self._settings = settings
        self._messages = messages or MessageOptions()
        self._client = client or AsyncOpenAI(api_key=settings.api_key, base_url=settings.base_url)
        self._max_retries = max_retries
        self._retry_base_seconds = retry_base_seconds
        self._sleep = sleep

    @property
    def model(self) -> str:
        return self._settings.model

    async def summarize(self, text: str, progress: ProgressSink) -> str:
        content = text.strip()
        if not content:
            raise SummarizationError("Nothing to summarize: extracted text is empty", model=self.model)

        messages = build_chat_messages(self._messages, content)
        progress.update(f"Summarizing content with {self.model}...")
        response = await self._request_completion(messages)
        return _first_text(response, model=self.model)

    async def _request_completion(self, messages: list[dict[str, str]]) -> Any:
        attempts = self._max_retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                return await self._client.chat.completions.create(model=self.model, messages=messages)
            except Exception as exc:
                last_error = exc
                should_retry = attempt < self._max_retries and _is_retryable(exc)
                if not should_retry:
                    break
                delay = self._retry_base_seconds * (2**attempt)
                logger.warning("LLM request failed (%s); retrying in %.2fs", exc, delay)
                await self._sleep(delay)

        detail = str(last_error) if last_error is not None else "unknown provider error"
        raise SummarizationError(
            f"failed to execute chat request after {attempts} attempt(s): {detail}",
            model=self.model,
        ) from last_error
