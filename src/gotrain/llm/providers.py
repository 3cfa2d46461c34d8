"""
LLM provider client.

This module wraps the OpenAI chat-completions API with:
- JSON-mode plan generation returning raw text (callers parse it)
- Multi-turn coach chat
- Retry with exponential backoff on transient failures
- Mapping of SDK errors onto GoTrain exceptions
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)

from ..exceptions import (
    ConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)
from ..models.chat import ChatMessage


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MODEL = "gpt-4o"


class RetryConfig:
    """Configuration for retry behavior on transient failures."""

    def __init__(
        self,
        max_retries: int = 0,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        retryable_status_codes: Optional[set[int]] = None,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retryable_status_codes = retryable_status_codes or {500, 502, 503, 504}

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number."""
        delay = self.base_delay * (self.exponential_base ** attempt)
        return min(delay, self.max_delay)


def _provider_message(error: Exception) -> str:
    """The provider-supplied message when the SDK exposes one."""
    return getattr(error, "message", None) or str(error)


class LLMClient:
    """
    Chat-completion client used for plan generation and coach chat.

    Usage:
        client = LLMClient(api_key="sk-...")
        raw = await client.completion_json(system, user)
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        retry_config: Optional[RetryConfig] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """
        Initialize the LLM client.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            temperature: Sampling temperature for every request
            retry_config: Configuration for retry behavior
            client: Pre-built SDK client (tests)
        """
        if not api_key and client is None:
            raise ConfigurationError("openai_api_key")

        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.retry_config = retry_config or RetryConfig()

    async def _execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "LLM request",
    ) -> T:
        """
        Execute an operation, retrying transient failures.

        Raises:
            LLMError: On unrecoverable failure
        """
        for attempt in range(self.retry_config.max_retries + 1):
            can_retry = attempt < self.retry_config.max_retries
            start_time = time.time()

            try:
                result = await operation()
                duration_ms = (time.time() - start_time) * 1000
                logger.debug(f"{operation_name} completed in {duration_ms:.0f}ms")
                return result

            except RateLimitError as e:
                if not can_retry:
                    raise LLMRateLimitError(message=_provider_message(e))
                delay = self.retry_config.get_delay(attempt)
                logger.warning(
                    f"{operation_name} rate limited. "
                    f"Retry {attempt + 1}/{self.retry_config.max_retries} in {delay:.1f}s"
                )
                await asyncio.sleep(delay)

            except (APITimeoutError, asyncio.TimeoutError):
                raise LLMTimeoutError()

            except APIConnectionError as e:
                if not can_retry:
                    raise LLMServiceUnavailableError(
                        message=f"Connection to LLM service failed: {_provider_message(e)}",
                    )
                delay = self.retry_config.get_delay(attempt)
                logger.warning(
                    f"{operation_name} connection error. "
                    f"Retry {attempt + 1}/{self.retry_config.max_retries} in {delay:.1f}s: {e}"
                )
                await asyncio.sleep(delay)

            except APIStatusError as e:
                status = e.status_code
                if status in self.retry_config.retryable_status_codes and can_retry:
                    delay = self.retry_config.get_delay(attempt)
                    logger.warning(
                        f"{operation_name} API error (status {status}). "
                        f"Retry {attempt + 1}/{self.retry_config.max_retries} in {delay:.1f}s"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise LLMError(
                    message=_provider_message(e),
                    details={"status_code": status},
                )

            except APIError as e:
                raise LLMError(message=_provider_message(e))

        # Unreachable: the last attempt either returns or raises
        raise LLMError(message=f"{operation_name} failed after all retries")

    @staticmethod
    def _content(response: Any) -> str:
        content = response.choices[0].message.content
        if not content:
            raise LLMResponseInvalidError()
        return content

    async def completion_json(
        self,
        system: str,
        user: str,
        timeout: Optional[float] = 60.0,
    ) -> str:
        """
        Get a JSON-mode completion as raw text.

        The text is returned unparsed: model output is untrusted and is
        decoded by the plan parser.

        Args:
            system: System prompt (must mention JSON)
            user: User message
            timeout: Request timeout in seconds

        Returns:
            The assistant's response text
        """
        async def _make_request() -> str:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    temperature=self.temperature,
                    response_format={"type": "json_object"},
                ),
                timeout=timeout,
            )
            return self._content(response)

        return await self._execute_with_retry(_make_request, "completion_json")

    async def chat(
        self,
        system: str,
        messages: Sequence[ChatMessage],
        timeout: Optional[float] = 60.0,
    ) -> str:
        """
        Get the next assistant turn for a conversation.

        Args:
            system: System prompt carrying goals, plan and instructions
            messages: Transcript so far, oldest first
            timeout: Request timeout in seconds

        Returns:
            The assistant's response text
        """
        payload: List[Dict[str, str]] = [{"role": "system", "content": system}]
        payload.extend(m.to_dict() for m in messages)

        async def _make_request() -> str:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=payload,
                    temperature=self.temperature,
                ),
                timeout=timeout,
            )
            return self._content(response)

        return await self._execute_with_retry(_make_request, "chat")
