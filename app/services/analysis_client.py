"""
Analysis Client
Sends the contract-analysis prompt to the OpenAI chat completions API and
returns the reply text verbatim. Failures are classified into typed errors;
retries are left to the caller because each call costs money.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)

from app.core.errors import AnalysisServiceError, PipelineErrorType
from app.schemas.analysis import AnalysisReply, AnalysisRequest

logger = logging.getLogger(__name__)


class ReasoningClient(Protocol):
    """Anything that can turn an AnalysisRequest into an AnalysisReply"""

    async def complete(self, request: AnalysisRequest) -> AnalysisReply:
        ...


class AnalysisClient:
    """
    OpenAI-backed reasoning client.

    Configuration is passed in explicitly so tests can build a client
    against a substitute AsyncOpenAI instance.
    """

    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        temperature: float = 0.0,
        json_mode: bool = True,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize analysis client.

        Args:
            api_key: OpenAI API key
            model: Chat model to use
            timeout: Upper bound in seconds for a single call
            temperature: Sampling temperature
            json_mode: Ask the API for a JSON object response
            client: Pre-built AsyncOpenAI client (optional)

        Raises:
            AnalysisServiceError: AUTH_FAILURE if no API key is configured
        """
        if not api_key and client is None:
            raise AnalysisServiceError(
                "OpenAI API key is required. Set OPENAI_API_KEY in environment variables.",
                PipelineErrorType.AUTH_FAILURE,
            )
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.json_mode = json_mode
        # SDK retries are disabled; retry policy belongs to callers
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def complete(self, request: AnalysisRequest) -> AnalysisReply:
        """
        Submit the request and return the raw reply.

        Raises:
            AnalysisServiceError: AUTH_FAILURE, QUOTA_EXCEEDED, SERVICE_UNAVAILABLE
                or UNEXPECTED_RESPONSE_SHAPE
        """
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": request.messages(),
            "temperature": self.temperature,
        }
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info(f"Requesting contract analysis from {self.model} ({len(request.prompt)} prompt chars)")
        try:
            completion = await asyncio.wait_for(
                self.client.chat.completions.create(**kwargs),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise AnalysisServiceError(
                f"Analysis call timed out after {self.timeout:.0f}s",
                PipelineErrorType.SERVICE_UNAVAILABLE,
            ) from e
        except Exception as e:
            raise self._parse_error(e) from e

        reply = self._reply_from_completion(completion)
        if reply.truncated:
            logger.warning("Analysis reply was cut off at the token limit; it may not parse")
        logger.info(
            f"Analysis reply received ({len(reply.text)} chars, "
            f"tokens: {reply.prompt_tokens} prompt / {reply.completion_tokens} completion)"
        )
        return reply

    def _reply_from_completion(self, completion: Any) -> AnalysisReply:
        choices = getattr(completion, "choices", None)
        if not choices:
            raise AnalysisServiceError(
                "Completion contained no choices",
                PipelineErrorType.UNEXPECTED_RESPONSE_SHAPE,
                diagnostic=repr(completion)[:2000],
            )
        first = choices[0]
        message = getattr(first, "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise AnalysisServiceError(
                "Completion message has no text content",
                PipelineErrorType.UNEXPECTED_RESPONSE_SHAPE,
                diagnostic=repr(completion)[:2000],
            )

        usage = getattr(completion, "usage", None)
        return AnalysisReply(
            text=content,
            model=getattr(completion, "model", None),
            finish_reason=getattr(first, "finish_reason", None),
            prompt_tokens=getattr(usage, "prompt_tokens", None),
            completion_tokens=getattr(usage, "completion_tokens", None),
        )

    def _parse_error(self, error: Exception) -> AnalysisServiceError:
        """
        Map an OpenAI SDK exception onto a typed service failure.

        Args:
            error: Exception raised by the SDK

        Returns:
            AnalysisServiceError with the matching error type
        """
        if isinstance(error, AnalysisServiceError):
            return error

        if isinstance(error, (AuthenticationError, PermissionDeniedError)):
            return AnalysisServiceError(
                f"Authentication failed: {error}",
                PipelineErrorType.AUTH_FAILURE,
                diagnostic=repr(error),
            )

        if isinstance(error, RateLimitError):
            return AnalysisServiceError(
                f"Rate limit or quota exceeded: {error}",
                PipelineErrorType.QUOTA_EXCEEDED,
                diagnostic=repr(error),
                retry_after=self._retry_after(error),
            )

        # APITimeoutError is a subclass of APIConnectionError
        if isinstance(error, APIConnectionError):
            return AnalysisServiceError(
                f"Network error: {error}",
                PipelineErrorType.SERVICE_UNAVAILABLE,
                diagnostic=repr(error),
            )

        if isinstance(error, APIStatusError):
            return AnalysisServiceError(
                f"OpenAI returned HTTP {error.status_code}: {error}",
                PipelineErrorType.SERVICE_UNAVAILABLE,
                diagnostic=repr(error),
            )

        return AnalysisServiceError(
            f"Unknown error: {error}",
            PipelineErrorType.SERVICE_UNAVAILABLE,
            diagnostic=repr(error),
        )

    @staticmethod
    def _retry_after(error: RateLimitError) -> Optional[float]:
        """Read the Retry-After header from a rate limit response, if present"""
        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None)
        if not headers:
            return None
        value = headers.get("retry-after")
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric Retry-After header: {value!r}")
            return None
