"""Utilities for calling locally hosted LLMs (Ollama)."""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any
from urllib import error, request

from cortexmix.errors import LocalLLMError, TransientLLMError

DEFAULT_OLLAMA_BASE_URL = "http://127.0.0.1:11434"
_CHAT_ENDPOINT = "/api/chat"
# Status codes where waiting and retrying can help
_RETRYABLE_STATUS = {429, 502, 503, 504}


def _perform_ollama_request(
    payload: dict[str, Any],
    base_url: str,
    timeout: float,
) -> str:
    """Execute the blocking HTTP request against the Ollama REST API."""

    url = f"{base_url.rstrip('/')}{_CHAT_ENDPOINT}"
    data = json.dumps(payload).encode("utf-8")
    req = request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )

    try:
        with request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
    except error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="ignore") if exc.fp else ""
        message = body or exc.reason
        error_cls = TransientLLMError if exc.code in _RETRYABLE_STATUS else LocalLLMError
        raise error_cls(
            f"Ollama chat request failed with status {exc.code}: {message}"
        ) from exc
    except error.URLError as exc:
        raise LocalLLMError(
            f"Could not reach Ollama at {url}: {exc.reason}"
        ) from exc

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LocalLLMError("Ollama returned non-JSON response.") from exc

    message = parsed.get("message") or {}
    # Empty content is reported by the caller as an empty response
    return message.get("content") or ""


async def call_ollama_chat(
    *,
    system_prompt: str,
    user_prompt: str,
    llm_model: str,
    base_url: str | None = None,
    timeout: float = 30.0,
    temperature: float | None = None,
    max_tokens: int | None = None,
    json_mode: bool = False,
) -> str:
    """Invoke a local Ollama model and return the assistant text."""

    resolved_base = (
        base_url or os.getenv("OLLAMA_BASE_URL") or DEFAULT_OLLAMA_BASE_URL
    ).rstrip("/")

    system_prompt = system_prompt.strip()
    user_prompt = user_prompt.strip()
    if not user_prompt:
        raise LocalLLMError("Cannot call Ollama with an empty user prompt.")

    messages: list[dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user_prompt})

    options: dict[str, Any] = {}
    if temperature is not None:
        options["temperature"] = temperature
    if max_tokens is not None:
        options["num_predict"] = max_tokens

    payload: dict[str, Any] = {
        "model": llm_model,
        "messages": messages,
        "stream": False,
    }
    if options:
        payload["options"] = options
    if json_mode:
        payload["format"] = "json"

    return await asyncio.to_thread(
        _perform_ollama_request,
        payload,
        resolved_base,
        timeout,
    )


__all__ = ["LocalLLMError", "call_ollama_chat", "DEFAULT_OLLAMA_BASE_URL"]
