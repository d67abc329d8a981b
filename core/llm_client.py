# core/llm_client.py
import asyncio
import json
import logging
from typing import Any, Dict
import httpx
from core.entities import LlmConfig
from util.enums import LlmProvider
from util.errors import (
    InvalidResponseError,
    ParseFailureError,
    RemoteHttpError,
    RemoteTimeoutError,
)
from util.functions import strip_code_fences
from util.timing import timed

logger = logging.getLogger(__name__)


def _request(
    config: LlmConfig, system: str, user: str, temperature: float
) -> tuple[Dict[str, str], Dict[str, Any]]:
    """
    Build headers and payload for the configured wire format.
    """
    if config.provider == LlmProvider.ANTHROPIC:
        headers = {
            "x-api-key": config.api_key or "",
            "anthropic-version": config.anthropic_version,
            "content-type": "application/json",
        }
        payload: Dict[str, Any] = {
            "model": config.model,
            "max_tokens": config.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user}],
            "temperature": temperature,
        }
        return headers, payload

    headers = {
        "Authorization": f"Bearer {config.api_key or ''}",
        "Content-Type": "application/json",
    }
    payload = {
        "model": config.model,
        "max_tokens": config.max_tokens,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "temperature": temperature,
    }
    return headers, payload


def _message_text(provider: LlmProvider, data: Any) -> str:
    """
    Pull the model's text out of the response envelope.
    Raises InvalidResponseError when the envelope is missing or malformed.
    """
    try:
        if provider == LlmProvider.ANTHROPIC:
            node = data["content"][0]
            if node.get("type") != "text":
                raise InvalidResponseError("first content block is not text")
            text = node["text"]
        else:
            text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise InvalidResponseError(f"unexpected response shape: {e!r}") from e
    if not isinstance(text, str) or not text.strip():
        raise InvalidResponseError("empty model output")
    return text


def parse_json_object(text: str) -> Dict[str, Any]:
    raw = strip_code_fences(text)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseFailureError(f"model output is not JSON: {e.msg}") from e
    if not isinstance(parsed, dict):
        raise ParseFailureError("model output is not a JSON object")
    return parsed


async def complete(
    config: LlmConfig,
    *,
    system: str,
    user: str,
    temperature: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    One chat completion against the configured provider; returns the raw model text.

    Errors are all RemoteVerifierError subclasses:
    non-2xx / transport -> RemoteHttpError, bad envelope -> InvalidResponseError,
    time budget exceeded -> RemoteTimeoutError.
    """
    temp = config.temperature if temperature is None else temperature
    headers, payload = _request(config, system, user, temp)
    timeout = httpx.Timeout(config.timeout_seconds, connect=5.0)

    async def _post() -> httpx.Response:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            return await client.post(config.api_url, headers=headers, json=payload)

    with timed(logger, "ai.complete", provider=config.provider.value, model=config.model):
        try:
            res = await asyncio.wait_for(_post(), timeout=config.timeout_seconds)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning("ai.complete.timeout after=%.1fs", config.timeout_seconds)
            raise RemoteTimeoutError(
                f"LLM call exceeded {config.timeout_seconds:.0f}s"
            ) from e
        except httpx.RequestError as e:
            logger.error("ai.complete.request_error err=%s", type(e).__name__)
            raise RemoteHttpError(None, str(e)) from e

    if res.status_code // 100 != 2:
        logger.error("ai.complete.bad_status status=%d", res.status_code)
        raise RemoteHttpError(res.status_code, res.text)

    try:
        data = res.json()
    except ValueError as e:
        raise InvalidResponseError("response body is not JSON") from e
    return _message_text(config.provider, data)
