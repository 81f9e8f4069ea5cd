"""
Workout generation pipeline.

Single entry point used by the API:
validate -> quota gate -> generate -> resolve exercises -> persist.
Every failure is raised as a WorkoutGenerationError subclass carrying the
status code and public message for the response.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from application.exceptions import (
    ModelOutputError,
    ModelTransportError,
    QuotaExceededError,
    RequestValidationError,
)
from core.constants import GENERATION_QUOTA_KEY
from models.generation import GenerateWorkoutRequest
from models.workout import Principal
from services.exercise_resolver import ExerciseResolver, ResolvedExercise
from services.quota_gate import QuotaGate
from services.workout_generator import ERROR_KIND_TRANSPORT, WorkoutGenerator
from services.workout_persistence import WorkoutPersistence, normalize_reps
from shared.ai_context import AIRequestContext

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    """Result of a successful pipeline run."""

    success: bool
    workout_id: Optional[str] = None
    workout: Optional[Dict[str, Any]] = None
    exercises: List[Dict[str, Any]] = field(default_factory=list)
    attempts: int = 0
    generation_time_ms: int = 0


def exercise_view(index: int, resolved: ResolvedExercise) -> Dict[str, Any]:
    """Exercise as returned to the caller alongside the workout."""
    return {
        "id": resolved.exercise.id,
        "name": resolved.exercise.name,
        "sets": resolved.proposed.sets,
        "reps": normalize_reps(resolved.proposed.reps),
        "rest_time_seconds": resolved.proposed.rest_time_seconds,
        "rationale": resolved.proposed.rationale,
        "primary_muscles": resolved.exercise.primary_muscles,
        "secondary_muscles": resolved.exercise.secondary_muscles,
        "equipment": resolved.exercise.equipment,
        "order_index": index,
        "is_placeholder": resolved.exercise.is_placeholder,
    }


class WorkoutGenerationPipeline:
    """Runs one workout generation for a principal."""

    def __init__(
        self,
        generator: WorkoutGenerator,
        resolver: ExerciseResolver,
        persistence: WorkoutPersistence,
        quota_gate: QuotaGate,
        environment: str = "production",
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            generator: Model orchestrator
            resolver: Exercise catalog resolver
            persistence: Workout persistence coordinator
            quota_gate: Generation quota gate
            environment: Deployment environment, attached to model calls
            executor: Thread pool for blocking repository calls, the event
                loop's default executor when None
        """
        self._generator = generator
        self._resolver = resolver
        self._persistence = persistence
        self._quota_gate = quota_gate
        self._environment = environment
        self._executor = executor

    async def run(
        self,
        request: Union[GenerateWorkoutRequest, Dict[str, Any]],
        principal: Principal,
    ) -> GenerationOutcome:
        """
        Generate, resolve and persist a workout.

        Args:
            request: Generation request, or its raw camelCase payload
            principal: The caller

        Returns:
            GenerationOutcome for the persisted workout

        Raises:
            RequestValidationError: Malformed request (400)
            QuotaExceededError: Quota exhausted (429)
            ModelTransportError: Model unreachable or timed out (500)
            ModelOutputError: Model output invalid after the retry (500)
            CatalogResolutionError: Catalog unavailable in strict mode (500)
            PersistenceError: Workout could not be saved (500)
        """
        request = self._validate(request)
        loop = asyncio.get_event_loop()

        allowed = await loop.run_in_executor(
            self._executor, partial(self._quota_gate.check_and_consume, principal)
        )
        if not allowed:
            raise QuotaExceededError(f"Generation quota exhausted for user {principal.user_id}")

        context = AIRequestContext(
            user_id=principal.user_id,
            feature_name=GENERATION_QUOTA_KEY,
            environment=self._environment,
            extra={"exercise_count": request.exercise_count},
        )
        logger.info(
            f"Generating workout for user {principal.user_id}: "
            f"{request.exercise_count} exercises, focus={request.workout_focus}, "
            f"muscles={request.muscle_focus} (request {context.request_id})"
        )

        generation = await self._generator.generate(request, context=context)
        if not generation.success:
            if generation.error_kind == ERROR_KIND_TRANSPORT:
                raise ModelTransportError(generation.error)
            raise ModelOutputError(generation.error, raw_responses=generation.raw_responses)

        resolved = await self._resolver.resolve_all(generation.data.exercises)
        created_count = sum(1 for r in resolved if r.created)
        placeholder_count = sum(1 for r in resolved if r.exercise.is_placeholder)
        logger.info(
            f"Resolved {len(resolved)} exercises ({created_count} new, "
            f"{placeholder_count} placeholders)"
        )

        workout = await loop.run_in_executor(
            self._executor,
            partial(
                self._persistence.persist,
                generation.data,
                resolved,
                request,
                principal,
                generation,
            ),
        )

        exercises = [exercise_view(i, r) for i, r in enumerate(resolved)]
        return GenerationOutcome(
            success=True,
            workout_id=workout.get("id"),
            workout={**workout, "exercises": exercises},
            exercises=exercises,
            attempts=generation.attempts,
            generation_time_ms=generation.elapsed_ms,
        )

    @staticmethod
    def _validate(request: Union[GenerateWorkoutRequest, Dict[str, Any]]) -> GenerateWorkoutRequest:
        if isinstance(request, GenerateWorkoutRequest):
            return request
        try:
            return GenerateWorkoutRequest.model_validate(request)
        except ValidationError as e:
            raise RequestValidationError(f"Invalid generation request: {e}") from e
