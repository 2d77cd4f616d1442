"""Token usage accounting and cost estimation."""

from typing import Iterable, Optional

from pydantic import Field

from .base import BaseReportModel


class TokenUsage(BaseReportModel):
    """Token counts reported by the completion service."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    @classmethod
    def aggregate(cls, usages: Iterable["TokenUsage"]) -> "TokenUsage":
        """Sum a sequence of usages. An empty sequence gives all zeros."""
        total = cls()
        for usage in usages:
            total = total + usage
        return total


class Pricing(BaseReportModel):
    """USD price per one million tokens."""

    input_per_million: float = Field(default=2.0, ge=0.0)
    output_per_million: float = Field(default=8.0, ge=0.0)


def estimate_cost(usage: TokenUsage, pricing: Optional[Pricing] = None) -> float:
    """Estimate the USD cost of a run from its token usage.

    Args:
        usage: Aggregated token usage
        pricing: Per-million rates (default from settings)

    Returns:
        Estimated cost in USD
    """
    if pricing is None:
        from docextract.config import settings

        pricing = settings.pricing

    input_cost = usage.input_tokens / 1_000_000 * pricing.input_per_million
    output_cost = usage.output_tokens / 1_000_000 * pricing.output_per_million
    return input_cost + output_cost
