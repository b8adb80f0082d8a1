"""Chat completion client with bounded retry."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol

import openai
from pydantic import BaseModel, ValidationError

from brightlight.core.errors import TransportError, UpstreamError

logger = logging.getLogger(__name__)

SYSTEM_ROLE_PROMPT = "You are a helpful assistant."


class ChatErrorDetail(BaseModel):
    message: str
    type: str
    param: Optional[str] = None
    code: Optional[str | int] = None


class ChatErrorPayload(BaseModel):
    error: ChatErrorDetail


class ChatMessage(BaseModel):
    content: Optional[str] = None


class ChatChoice(BaseModel):
    message: ChatMessage


class ChatCompletionPayload(BaseModel):
    choices: List[ChatChoice]


class CompletionTransport(Protocol):
    def send(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """POST a chat completion request and return the decoded JSON body."""


class OpenAIChatTransport:
    """Sends requests through the OpenAI SDK and hands back the raw JSON payload."""

    def __init__(self, api_key: str | None, *, base_url: str | None = None, timeout: float = 60.0):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client: Optional[openai.OpenAI] = None

    def _get_client(self) -> openai.OpenAI:
        if self._client is None:
            if not self._api_key:
                raise UpstreamError("OPENAI_API_KEY is not configured", error_type="configuration")
            # Retries are owned by TextCompletionClient.
            self._client = openai.OpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    def send(self, body: Dict[str, Any]) -> Dict[str, Any]:
        client = self._get_client()
        try:
            raw = client.chat.completions.with_raw_response.create(**body)
        except openai.APIStatusError as exc:
            if isinstance(exc.body, dict):
                return {"error": exc.body}
            return {"error": {"message": str(exc), "type": "http_error", "code": str(exc.status_code)}}
        except openai.APIConnectionError as exc:
            raise TransportError(f"Completion endpoint unreachable: {exc}") from exc
        return raw.http_response.json()


class TextCompletionClient:
    """
    `complete(prompt) -> text` against a chat completion endpoint.

    Transport failures, error payloads and unrecognised payloads each count as a
    failed attempt. After `max_retries` retries spaced `retry_delay` seconds apart
    the last failure is surfaced as UpstreamError.
    """

    def __init__(
        self,
        transport: CompletionTransport,
        *,
        model: str = "gpt-3.5-turbo",
        max_retries: int = 3,
        retry_delay: float = 1.0,
        cache_enabled: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._transport = transport
        self.model = model
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        # Best-effort memo keyed by the exact prompt; never required for correctness.
        self._cache: Optional[Dict[str, str]] = {} if cache_enabled else None

    def complete(self, prompt: str, *, use_cache: bool = True) -> str:
        """
        Return the completion text for prompt.

        use_cache=False always reaches the endpoint; the fresh answer replaces any
        memoised one.
        """
        if use_cache and self._cache is not None and prompt in self._cache:
            return self._cache[prompt]

        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_ROLE_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        attempts = self.max_retries + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                content = decode_completion(self._transport.send(body))
            except (TransportError, UpstreamError) as exc:
                last_error = exc
                if attempt < attempts:
                    logger.warning("Completion attempt %d/%d failed, retrying: %s", attempt, attempts, exc)
                    self._sleep(self.retry_delay)
                continue

            if self._cache is not None:
                self._cache[prompt] = content
            return content

        logger.error("Completion failed after %d attempts: %s", attempts, last_error)
        if isinstance(last_error, UpstreamError):
            raise UpstreamError(
                f"Completion failed after {attempts} attempts: {last_error.message}",
                error_type=last_error.error_type,
                code=last_error.code,
            ) from last_error
        raise UpstreamError(f"Completion failed after {attempts} attempts: {last_error}") from last_error


def decode_completion(payload: Any) -> str:
    """Interpret a payload as the error schema first, then as the success schema."""
    try:
        failure = ChatErrorPayload.model_validate(payload)
    except ValidationError:
        pass
    else:
        code = None if failure.error.code is None else str(failure.error.code)
        raise UpstreamError(failure.error.message, error_type=failure.error.type, code=code)

    try:
        success = ChatCompletionPayload.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamError(f"Unrecognised completion payload: {exc.error_count()} validation errors") from exc

    if not success.choices:
        return ""
    return success.choices[0].message.content or ""
