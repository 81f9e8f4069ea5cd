"""
AI-powered workout generator.

Drives the model through at most two attempts:
1. Build the prompt for the request
2. Call the model under a hard timeout
3. Validate the raw text into a ValidatedWorkout
4. On a parse/validation failure only, retry once with a stricter prompt

Transport failures and timeouts are never retried.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from application.exceptions import ModelOutputError, ModelTransportError
from application.ports.model_client import TokenUsage, WorkoutModelClient
from models.generation import GenerateWorkoutRequest
from services.llm.prompts import AttemptKind, build_workout_prompt, max_tokens_for
from services.llm.schemas import ValidatedWorkout, validate_workout_response
from shared.ai_context import AIRequestContext

logger = logging.getLogger(__name__)

ERROR_KIND_TRANSPORT = "model_transport"
ERROR_KIND_OUTPUT = "model_output"

# Characters of each raw response kept in failure logs
RAW_RESPONSE_LOG_LIMIT = 2000


@dataclass
class GenerationResult:
    """Outcome of a generation run, successful or not."""

    success: bool
    data: Optional[ValidatedWorkout] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    raw_responses: List[str] = field(default_factory=list)
    attempts: int = 0
    elapsed_ms: int = 0
    token_usage: TokenUsage = field(default_factory=TokenUsage)
    model: Optional[str] = None

    @property
    def raw_response(self) -> Optional[str]:
        """Raw text of the last attempt."""
        return self.raw_responses[-1] if self.raw_responses else None


class WorkoutGenerator:
    """
    Orchestrates model calls for a single workout generation.

    The generator never raises for model failures; it reports them in the
    GenerationResult so the caller can map them to a response.
    """

    MAX_ATTEMPTS = 2
    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        model_client: WorkoutModelClient,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize the generator.

        Args:
            model_client: Client for the generative model
            temperature: Sampling temperature for every attempt
            timeout_seconds: Hard limit for a single model call
        """
        self._model_client = model_client
        self._temperature = temperature
        self._timeout_seconds = timeout_seconds

    async def generate(
        self,
        request: GenerateWorkoutRequest,
        context: Optional[AIRequestContext] = None,
    ) -> GenerationResult:
        """
        Generate and validate a workout for the request.

        Args:
            request: Validated generation request
            context: Request metadata attached to every model call

        Returns:
            GenerationResult with the validated workout on success, or the
            error kind and every raw response on failure
        """
        start = time.monotonic()
        max_tokens = max_tokens_for(request.exercise_count)
        raw_responses: List[str] = []
        usage = TokenUsage()
        model: Optional[str] = None
        attempts = 0
        workout: Optional[ValidatedWorkout] = None

        def finish(**kwargs) -> GenerationResult:
            return GenerationResult(
                raw_responses=raw_responses,
                attempts=attempts,
                elapsed_ms=int((time.monotonic() - start) * 1000),
                token_usage=usage,
                model=model,
                **kwargs,
            )

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.MAX_ATTEMPTS),
                retry=retry_if_exception_type(ModelOutputError),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    attempt_kind = AttemptKind.FIRST if attempts == 1 else AttemptKind.RETRY
                    prompt = build_workout_prompt(request, attempt_kind)

                    completion = await self._call_model(prompt, max_tokens, context)
                    usage = usage + completion.usage
                    model = completion.model or model
                    raw_responses.append(completion.text)

                    workout = validate_workout_response(
                        completion.text, expected_count=request.exercise_count
                    )
        except ModelTransportError as e:
            logger.error(f"Model call failed on attempt {attempts}: {e}")
            return finish(success=False, error=e.public_message, error_kind=ERROR_KIND_TRANSPORT)
        except ModelOutputError as e:
            logger.error(f"Model output invalid after {attempts} attempt(s): {e}")
            for number, raw in enumerate(raw_responses, start=1):
                logger.error(
                    f"Raw model response {number}/{len(raw_responses)}: "
                    f"{raw[:RAW_RESPONSE_LOG_LIMIT]!r}"
                )
            return finish(success=False, error=e.public_message, error_kind=ERROR_KIND_OUTPUT)

        result = finish(success=True, data=workout)
        logger.info(
            f"Generated workout with {len(workout.exercises)} exercises in "
            f"{result.elapsed_ms}ms ({attempts} attempt(s), {usage.total_tokens} tokens)"
        )
        return result

    async def _call_model(
        self,
        prompt: str,
        max_tokens: int,
        context: Optional[AIRequestContext],
    ):
        """Call the model under the hard timeout; every failure is a transport error."""
        try:
            return await asyncio.wait_for(
                self._model_client.complete(
                    prompt,
                    max_tokens=max_tokens,
                    temperature=self._temperature,
                    context=context,
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ModelTransportError(
                f"Model call exceeded {self._timeout_seconds}s timeout"
            ) from e
        except ModelTransportError:
            raise
        except Exception as e:
            raise ModelTransportError(f"Model call failed: {e}") from e
