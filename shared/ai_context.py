"""
AI Request Context for tracking metadata in AI API calls.

This module provides the AIRequestContext dataclass that is passed to every
generative model call so usage can be attributed per user and per feature.

Usage:
    from shared.ai_context import AIRequestContext

    context = AIRequestContext(
        user_id="user_123",
        feature_name="workout_generation",
        environment="production",
    )
    await model_client.complete(prompt, max_tokens=1800, temperature=0.7, context=context)
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4


VALID_ENVIRONMENTS = {"production", "staging", "development", "test"}


@dataclass
class AIRequestContext:
    """
    Context to attach to AI API calls for tracking and observability.

    Args:
        user_id: The user making the request (for cost attribution)
        feature_name: The feature triggering the AI call (for cost breakdown)
        request_id: Identifier grouping all model calls of one generation
        environment: Deployment environment
        extra: Additional metadata key-value pairs
    """
    user_id: Optional[str] = None
    feature_name: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid4()))
    environment: str = "production"
    extra: dict = field(default_factory=dict)

    def __post_init__(self):
        """Validate context after initialization."""
        if self.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment '{self.environment}'. "
                f"Must be one of: {', '.join(sorted(VALID_ENVIRONMENTS))}"
            )

        if self.user_id is not None and not self.user_id:
            raise ValueError("user_id must be a non-empty string if provided")

        if self.feature_name is not None and not self.feature_name:
            raise ValueError("feature_name must be a non-empty string if provided")

    def to_properties(self) -> dict:
        """Flatten the context into string properties for request metadata."""
        properties = {
            "environment": self.environment,
            "request_id": self.request_id,
        }
        if self.user_id:
            properties["user_id"] = self.user_id
        if self.feature_name:
            properties["feature_name"] = self.feature_name
        for key, value in self.extra.items():
            properties[key] = str(value)
        return properties
