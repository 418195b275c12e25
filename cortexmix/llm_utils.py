"""Helper utilities for LLM transport, error classification and retries."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from mirascope import llm
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from cortexmix.config import Config
from cortexmix.errors import EmptyResponseError, LLMCallError, LocalLLMError, TransientLLMError
from cortexmix.local_llm import call_ollama_chat
from cortexmix.logging_utils import log_error


# Substrings providers use for quota/rate-limit/overload failures
_TRANSIENT_MARKERS = ("429", "rate_limit", "rate limit", "quota", "overloaded", "503", "502")


def is_transient_error(exc: BaseException) -> bool:
    """Return True for failures that a short wait is likely to fix."""

    if isinstance(exc, (TransientLLMError, asyncio.TimeoutError)):
        return True
    if isinstance(exc, LLMCallError):
        return False
    text = f"{type(exc).__name__} {exc}".lower()
    return any(marker in text for marker in _TRANSIENT_MARKERS)


def _combine_prompts(system_prompt: str, user_prompt: str) -> str:
    return "\n\n".join(section for section in (system_prompt, user_prompt) if section)


def _response_text(response: Any) -> str:
    """Extract assistant text from a Mirascope response (or a plain string)."""

    if isinstance(response, str):
        return response
    content = getattr(response, "content", None)
    return content if isinstance(content, str) else ""


async def call_llm_text(
    *,
    system_prompt: str,
    user_prompt: str,
    llm_provider: str,
    llm_model: str,
    temperature: float | None = None,
    max_tokens: int | None = None,
    json_mode: bool = False,
    max_attempts: int | None = None,
    timeout: float | None = None,
    backoff_seconds: float = 2.0,
    on_retry: Callable[[int, BaseException], None] | None = None,
) -> str:
    """Invoke a free-text LLM call with retries on transient failures.

    Retries use exponential backoff (2s then 4s with the default three
    attempts and ``backoff_seconds``) and fire only for rate limits, overloads and
    timeouts. Other provider errors propagate immediately as
    ``LLMCallError``. An empty reply raises ``EmptyResponseError``.
    """

    system_prompt = system_prompt.strip()
    user_prompt = user_prompt.strip()
    attempts = max_attempts if max_attempts is not None else Config.LLM_MAX_ATTEMPTS
    timeout = timeout if timeout is not None else Config.LLM_TIMEOUT_SECONDS
    temperature = temperature if temperature is not None else Config.LLM_TEMPERATURE
    max_tokens = max_tokens if max_tokens is not None else Config.LLM_MAX_TOKENS

    use_local_llm = llm_provider.lower() == "ollama"

    remote_invoke: Callable[[str], Any] | None = None
    if not use_local_llm:
        @llm.call(
            provider=llm_provider,
            model=llm_model,
            call_params={"temperature": temperature, "max_tokens": max_tokens},
        )
        async def _invoke(prompt: str) -> str:
            return prompt

        remote_invoke = _invoke

    attempt_number = 0
    # Only TransientLLMError triggers a retry; reraise=True hands the last
    # failure to the caller once attempts are exhausted.
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(TransientLLMError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=backoff_seconds, min=0, max=backoff_seconds * 4),
        reraise=True,
    ):
        with attempt:
            attempt_number += 1
            try:
                if use_local_llm:
                    raw = await asyncio.wait_for(
                        call_ollama_chat(
                            system_prompt=system_prompt,
                            user_prompt=user_prompt,
                            llm_model=llm_model,
                            base_url=Config.OLLAMA_BASE_URL,
                            timeout=timeout,
                            temperature=temperature,
                            max_tokens=max_tokens,
                            json_mode=json_mode,
                        ),
                        timeout=timeout,
                    )
                else:
                    if remote_invoke is None:
                        raise RuntimeError("Remote LLM invoke is not initialized.")
                    response = await asyncio.wait_for(
                        remote_invoke(_combine_prompts(system_prompt, user_prompt)),
                        timeout=timeout,
                    )
                    raw = _response_text(response)
            except LocalLLMError:
                # Local server offline or misconfigured; retrying won't help
                raise
            except Exception as exc:
                if is_transient_error(exc):
                    log_error(
                        f"LLM call failed (attempt {attempt_number}/{attempts}): {exc}"
                    )
                    if on_retry is not None:
                        on_retry(attempt_number, exc)
                    raise TransientLLMError(str(exc) or type(exc).__name__) from exc
                if isinstance(exc, LLMCallError):
                    raise
                raise LLMCallError(f"{llm_provider} call failed: {exc}") from exc

            if not raw or not raw.strip():
                raise EmptyResponseError(f"Empty response from {llm_provider}/{llm_model}")
            return raw

    # AsyncRetrying with reraise=True always exits via return or raise
    raise RuntimeError("LLM retry mechanism exited unexpectedly")
