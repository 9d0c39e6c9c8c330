"""Async OpenAI chat-completion wrapper used for analysis and upgrade calls."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from typing import Any, Callable

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_TOKENS = 2_000

# Retry settings for rate-limit (429) and connection errors
_MAX_RETRIES = 5
_BASE_DELAY = 2  # seconds, floor for exponential backoff

TokensCallback = Callable[[int, int], None]
"""Called with (input_tokens, output_tokens) when a completion finishes."""


def _parse_retry_after(exc: RateLimitError) -> float | None:
    """Extract the suggested retry delay from an OpenAI rate limit error.

    Checks the ``Retry-After`` header first, then falls back to parsing
    the "Please try again in Xs / Xms" substring from the error message.
    Returns seconds as a float, or None if not found.
    """
    try:
        headers = exc.response.headers  # type: ignore[union-attr]
        if retry_after := headers.get("retry-after"):
            return float(retry_after)
    except (AttributeError, TypeError, ValueError):
        pass

    m = re.search(r"try again in (\d+(?:\.\d+)?)\s*(ms|s)\b", str(exc), re.IGNORECASE)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value

    return None


class CompletionClient:
    """Thin async wrapper around the OpenAI SDK.

    One request per call; callers await each call before issuing the next.
    """

    def __init__(self, api_key: str | None = None, model: str = DEFAULT_MODEL) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def _call_with_retry(self, **kwargs: Any) -> Any:
        """Call chat.completions.create with exponential backoff on 429 errors.

        Waits at least as long as the suggested retry-after time, uses
        exponential backoff as a floor and adds ±25% jitter. Fails
        immediately when the request itself exceeds the token limit.
        """
        for attempt in range(_MAX_RETRIES):
            try:
                return await self._client.chat.completions.create(**kwargs)
            except RateLimitError as exc:
                msg = str(exc).lower()
                if "request too large" in msg or "context_length_exceeded" in msg:
                    logger.error("Request exceeds token limit (not retryable): %s", exc)
                    raise
                if attempt == _MAX_RETRIES - 1:
                    raise

                backoff = _BASE_DELAY * (2 ** attempt)
                suggested = _parse_retry_after(exc)
                base_delay = max(suggested or 0.0, backoff)
                jitter = random.uniform(-0.25 * base_delay, 0.25 * base_delay)
                delay = max(1.0, base_delay + jitter)

                logger.warning(
                    "Rate limited (429), retrying in %.1fs (attempt %d/%d, "
                    "suggested=%.1fs, backoff=%ds): %s",
                    delay, attempt + 1, _MAX_RETRIES,
                    suggested or 0.0, backoff, exc,
                )
                await asyncio.sleep(delay)
            except (APIConnectionError, APITimeoutError) as exc:
                if attempt == _MAX_RETRIES - 1:
                    raise
                backoff = _BASE_DELAY * (2 ** min(attempt, 3))
                jitter = random.uniform(-0.25 * backoff, 0.25 * backoff)
                delay = max(1.0, backoff + jitter)
                logger.warning(
                    "Connection error, retrying in %.1fs (attempt %d/%d): %s",
                    delay, attempt + 1, _MAX_RETRIES, exc,
                )
                await asyncio.sleep(delay)

    async def complete(
        self,
        *,
        system: str,
        user_message: str,
        json_mode: bool = False,
        temperature: float = 0.3,
        max_tokens: int = MAX_TOKENS,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        """Single request/response.

        When ``json_mode`` is True the API guarantees the response is a
        JSON object.
        """
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._call_with_retry(**kwargs)
        usage = getattr(response, "usage", None)
        if on_tokens and usage:
            on_tokens(getattr(usage, "prompt_tokens", 0), getattr(usage, "completion_tokens", 0))
        content = response.choices[0].message.content
        if not content:
            raise RuntimeError("No content received from the completion API")
        return content


# ======================================================================
# Dry-run client: canned responses, no API calls
# ======================================================================

_DRY_RUN_ANALYSIS = json.dumps({
    "clarity": 6,
    "specificity": 4,
    "effectiveness": 5,
    "creativity": 5,
    "structure": 4,
    "coherence": 6,
    "readability": 7,
    "languageQuality": 6,
    "contextualRichness": 3,
    "strengths": ["States the task directly"],
    "weaknesses": ["Too vague about the expected output", "No context or constraints"],
    "suggestions": ["Describe the desired output format", "Add relevant background"],
    "estimatedPerformance": "fair",
    "complexity": "low",
})

_DRY_RUN_UPGRADE = (
    "You are an experienced assistant. Complete the task described below with "
    "attention to the intended audience, providing relevant context, a clear "
    "explanation of your reasoning, and an output that follows the requested "
    "format precisely."
)


class DryRunClient:
    """Drop-in replacement for CompletionClient that makes zero API calls."""

    def __init__(self, model: str = DEFAULT_MODEL) -> None:
        self.model = model
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        *,
        system: str,
        user_message: str,
        json_mode: bool = False,
        temperature: float = 0.3,
        max_tokens: int = MAX_TOKENS,
        on_tokens: TokensCallback | None = None,
    ) -> str:
        self.calls.append({"system": system, "user_message": user_message, "json_mode": json_mode})
        logger.info("[dry-run] completion requested (%d chars)", len(user_message))
        if on_tokens:
            on_tokens(len(user_message) // 4, 0)
        return _DRY_RUN_ANALYSIS if json_mode else _DRY_RUN_UPGRADE
