"""
OpenAI client wrapper for workout generation.

Provides the OpenAIWorkoutModel class, the production WorkoutModelClient.
Retries are owned by the orchestrator, so the SDK's own retry loop is off.
"""

import logging
from typing import Optional

from openai import NOT_GIVEN, APIError, APITimeoutError, AsyncOpenAI

from application.exceptions import ModelTransportError
from application.ports.model_client import ModelCompletion, TokenUsage
from shared.ai_context import AIRequestContext

logger = logging.getLogger(__name__)


class OpenAIWorkoutModel:
    """
    OpenAI chat-completions client used to draft workouts.

    The prompt is sent as a single system message and the model is asked for
    a JSON object response.
    """

    DEFAULT_MODEL = "gpt-4o-mini"
    DEFAULT_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize the model client.

        Args:
            api_key: OpenAI API key
            model: Model to use (default: gpt-4o-mini)
            timeout_seconds: Per-request timeout
            client: Pre-built AsyncOpenAI client (for tests)
        """
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        context: Optional[AIRequestContext] = None,
    ) -> ModelCompletion:
        """
        Call the OpenAI API with a single system message.

        Raises:
            ModelTransportError: On timeout or any provider/transport error
        """
        extra_headers = {}
        if context:
            extra_headers = {
                f"X-Workout-{key.replace('_', '-').title()}": value
                for key, value in context.to_properties().items()
            }

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
                user=context.user_id if context and context.user_id else NOT_GIVEN,
                extra_headers=extra_headers or None,
            )
        except APITimeoutError as e:
            raise ModelTransportError(f"OpenAI request timed out: {e}") from e
        except APIError as e:
            raise ModelTransportError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise ModelTransportError("OpenAI returned no choices")

        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens or 0,
                completion_tokens=response.usage.completion_tokens or 0,
                total_tokens=response.usage.total_tokens or 0,
            )

        content = response.choices[0].message.content or ""
        logger.debug(
            f"OpenAI completion: model={response.model}, "
            f"prompt_tokens={usage.prompt_tokens}, completion_tokens={usage.completion_tokens}"
        )
        return ModelCompletion(text=content, usage=usage, model=response.model or self._model)
