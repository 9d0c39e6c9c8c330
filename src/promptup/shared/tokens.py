"""Token and cost estimation heuristics."""

from __future__ import annotations

import math

# USD per 1K tokens
PRICING_PER_1K_TOKENS: dict[str, float] = {
    "gpt-4": 0.03,
    "gpt-4-turbo-preview": 0.01,
    "gpt-3.5-turbo": 0.0015,
    "gpt-4o-mini": 0.0015,
}
DEFAULT_PRICE_PER_1K = 0.03


def estimate_token_count(text: str) -> int:
    """Rough token count: about four characters per token for English text."""
    return math.ceil(len(text) / 4)


def estimate_cost(token_count: int, model: str) -> float:
    """Estimated USD cost of ``token_count`` tokens; unknown models use gpt-4 pricing."""
    rate = PRICING_PER_1K_TOKENS.get(model, DEFAULT_PRICE_PER_1K)
    return (token_count / 1000) * rate
