"""
Workout persistence coordinator.

Writes a generated workout across the workouts and workout_exercises tables
so that a workout is never left behind without its exercises:

1. Draft - build the workout row from the validated workout and catalog data
2. Insert the workout row
3. Link all exercises in one batch; on failure delete the workout row
4. Recompute summary fields (best-effort)
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional, Union

from application.exceptions import PersistenceError, SummaryRecomputeError
from application.ports import WorkoutRepository
from core.constants import AVERAGE_SET_SECONDS, MAX_RATIONALE_LENGTH
from core.sanitization import sanitize_workout_name
from models.generation import GenerateWorkoutRequest
from models.workout import Principal, WorkoutStatus
from services.exercise_resolver import ResolvedExercise
from services.llm.schemas import ValidatedWorkout
from services.workout_generator import GenerationResult

logger = logging.getLogger(__name__)

DEFAULT_REPS = "10"
DEFAULT_WEIGHT_UNIT = "lbs"
DEFAULT_JOINT_GROUPS = "Multiple joints"
DEFAULT_EQUIPMENT_SUMMARY = "Bodyweight"
MIN_REPS = 1
MAX_REPS = 100


def _unique(values: List[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def normalize_reps(reps: Union[int, str, None]) -> str:
    """
    Normalize a rep value for the text reps column.

    Integers are clamped to 1-100, strings are trimmed, anything else
    becomes the default of "10".
    """
    if isinstance(reps, bool):
        return DEFAULT_REPS
    if isinstance(reps, int):
        return str(min(MAX_REPS, max(MIN_REPS, reps)))
    if isinstance(reps, str) and reps.strip():
        return reps.strip()
    return DEFAULT_REPS


def estimate_duration_minutes(resolved: List[ResolvedExercise]) -> int:
    """Working time per set plus rest between sets, rounded up to minutes."""
    total_seconds = sum(
        r.proposed.sets * AVERAGE_SET_SECONDS + r.proposed.sets * r.proposed.rest_time_seconds
        for r in resolved
    )
    return math.ceil(total_seconds / 60)


def calculate_workout_summary(resolved: List[ResolvedExercise]) -> Dict[str, Any]:
    """
    Derive the summary columns of a workout from its resolved exercises.

    Args:
        resolved: Resolved exercises in workout order

    Returns:
        Dict of summary column values
    """
    return {
        "total_sets": sum(r.proposed.sets for r in resolved),
        "total_exercises": len(resolved),
        "estimated_duration_minutes": estimate_duration_minutes(resolved),
        "primary_muscles_targeted": _unique(
            [m for r in resolved for m in r.exercise.primary_muscles]
        ),
        "equipment_needed_array": _unique([r.exercise.equipment for r in resolved]),
    }


def _display_name(value: str) -> str:
    return value.replace("_", " ").strip().title()


class WorkoutPersistence:
    """
    Persists generated workouts with all-or-nothing visibility.

    Repository calls are blocking; callers on the event loop run persist()
    in an executor.
    """

    def __init__(self, workout_repo: WorkoutRepository):
        """
        Initialize the coordinator.

        Args:
            workout_repo: Repository for workouts and workout_exercises
        """
        self._workout_repo = workout_repo

    def persist(
        self,
        workout: ValidatedWorkout,
        resolved: List[ResolvedExercise],
        request: GenerateWorkoutRequest,
        principal: Principal,
        generation: Optional[GenerationResult] = None,
    ) -> Dict[str, Any]:
        """
        Persist a validated workout and its exercise links.

        Args:
            workout: Validated model output
            resolved: Resolved exercises in workout order
            request: The generation request
            principal: Owner of the new workout
            generation: Orchestrator result, for diagnostic columns

        Returns:
            The persisted workout row, including summary fields when the
            recompute succeeded

        Raises:
            PersistenceError: If the workout insert or the exercise linking failed
        """
        draft = self.build_draft(workout, resolved, request, principal, generation)

        try:
            created = self._workout_repo.create(draft)
        except Exception as e:
            logger.error(f"Failed to insert workout for user {principal.user_id}: {e}")
            raise PersistenceError(f"Workout insert failed: {e}") from e

        workout_id = created.get("id")
        if not workout_id:
            raise PersistenceError("Workout insert returned no id")

        rows = self.build_link_rows(workout_id, resolved)
        try:
            self._workout_repo.add_exercises(rows)
        except Exception as e:
            logger.error(f"Failed to link {len(rows)} exercises to workout {workout_id}: {e}")
            self._rollback(workout_id)
            raise PersistenceError(f"Exercise linking failed for workout {workout_id}: {e}") from e

        logger.info(f"Persisted workout {workout_id} with {len(rows)} exercises")

        try:
            created = self._recompute_summary(workout_id, resolved, created)
        except SummaryRecomputeError as e:
            logger.warning(f"Summary recompute skipped for workout {workout_id}: {e}")

        return created

    def build_draft(
        self,
        workout: ValidatedWorkout,
        resolved: List[ResolvedExercise],
        request: GenerateWorkoutRequest,
        principal: Principal,
        generation: Optional[GenerationResult] = None,
    ) -> Dict[str, Any]:
        """Build the workouts row. Display fields come from catalog data, not the model."""
        muscle_focus = _unique([m for r in resolved for m in r.exercise.primary_muscles])
        if not muscle_focus:
            muscle_focus = list(request.muscle_focus)

        equipment = _unique([r.exercise.equipment for r in resolved])
        equipment_needed = (
            ", ".join(_display_name(e) for e in equipment)
            if equipment
            else DEFAULT_EQUIPMENT_SUMMARY
        )

        fallback_name = (
            f"{_display_name(request.primary_focus)} "
            f"{' '.join(_display_name(m) for m in request.muscle_focus)} Workout"
        )

        raw_response = generation.raw_response if generation else None
        if request.exclude_exercises:
            raw_response = json.dumps(
                {
                    "source": "regenerate",
                    "excluded_exercises": request.exclude_exercises,
                    "raw_response": raw_response,
                }
            )

        draft = {
            "user_id": principal.user_id,
            "name": sanitize_workout_name(workout.name, fallback_name),
            "total_duration_minutes": estimate_duration_minutes(resolved),
            "muscle_groups_targeted": ", ".join(muscle_focus),
            "joint_groups_affected": workout.joint_groups_affected or DEFAULT_JOINT_GROUPS,
            "equipment_needed": equipment_needed,
            "workout_data": {
                "exercises": [r.proposed.model_dump(mode="json") for r in resolved],
                "total_duration_minutes": workout.total_duration_minutes,
                "muscle_groups_targeted": workout.muscle_groups_targeted,
                "joint_groups_affected": workout.joint_groups_affected,
                "equipment_needed": workout.equipment_needed,
            },
            "raw_ai_response": raw_response,
            "muscle_focus": muscle_focus,
            "workout_focus": list(request.workout_focus),
            "exercise_count": request.exercise_count,
            "special_instructions": request.special_instructions or "",
            "status": WorkoutStatus.NEW.value,
        }

        if generation:
            draft.update(
                {
                    "ai_model": generation.model,
                    "prompt_tokens": generation.token_usage.prompt_tokens,
                    "completion_tokens": generation.token_usage.completion_tokens,
                    "generation_time_ms": generation.elapsed_ms,
                    "parse_attempts": generation.attempts,
                }
            )

        return draft

    def build_link_rows(
        self, workout_id: str, resolved: List[ResolvedExercise]
    ) -> List[Dict[str, Any]]:
        """One workout_exercises row per exercise; order_index is the list position."""
        return [
            {
                "workout_id": workout_id,
                "exercise_id": r.exercise.id,
                "exercise_name": r.exercise.name,
                "order_index": index,
                "sets": r.proposed.sets,
                "reps": normalize_reps(r.proposed.reps),
                "rest_seconds": r.proposed.rest_time_seconds,
                "rationale": (r.proposed.rationale or "")[:MAX_RATIONALE_LENGTH],
                "weight_unit": DEFAULT_WEIGHT_UNIT,
            }
            for index, r in enumerate(resolved)
        ]

    def _rollback(self, workout_id: str) -> None:
        """Delete the workout row; its links go with it by cascade."""
        try:
            self._workout_repo.delete(workout_id)
            logger.info(f"Rolled back workout {workout_id}")
        except Exception as e:
            logger.error(f"Rollback failed, workout {workout_id} may be orphaned: {e}")

    def _recompute_summary(
        self,
        workout_id: str,
        resolved: List[ResolvedExercise],
        created: Dict[str, Any],
    ) -> Dict[str, Any]:
        summary = calculate_workout_summary(resolved)
        try:
            updated = self._workout_repo.update(workout_id, summary)
        except Exception as e:
            raise SummaryRecomputeError(f"Summary update failed: {e}") from e
        return updated or {**created, **summary}
