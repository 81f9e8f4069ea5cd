"""
Generative model client port (interface).

The orchestrator depends on this Protocol only; the OpenAI adapter lives in
services/llm/client.py and tests use a scripted fake.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from shared.ai_context import AIRequestContext


@dataclass
class TokenUsage:
    """Token counts reported by the provider for one or more calls."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


@dataclass
class ModelCompletion:
    """Raw text of a single model call plus its usage."""

    text: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: Optional[str] = None


class WorkoutModelClient(Protocol):
    """Interface for the text-generation model used to draft workouts."""

    async def complete(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        context: Optional[AIRequestContext] = None,
    ) -> ModelCompletion:
        """
        Send a single-message prompt and return the raw completion.

        Args:
            prompt: Full prompt text
            max_tokens: Completion token budget
            temperature: Sampling temperature
            context: Request metadata for usage attribution

        Returns:
            ModelCompletion with the raw text

        Raises:
            ModelTransportError: On timeout, connection or provider failure
        """
        ...
