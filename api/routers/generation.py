"""
Workout generation router.

This router provides endpoints for AI-powered workout generation:
- Generate and save a new workout from muscle and focus selections
- Report the caller's remaining generation quota
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_generation_pipeline, get_principal, get_quota_gate
from application.exceptions import WorkoutGenerationError
from models.generation import (
    GenerateWorkoutRequest,
    GenerateWorkoutResponse,
    QuotaStatusResponse,
)
from models.workout import Principal
from services.generation_pipeline import WorkoutGenerationPipeline
from services.quota_gate import QuotaGate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/workouts/generate",
    tags=["Generation"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    """Failure body shared by all generation errors."""
    body = GenerateWorkoutResponse(success=False, error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.post(
    "",
    response_model=GenerateWorkoutResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def generate_workout(
    request: GenerateWorkoutRequest,
    principal: Principal = Depends(get_principal),
    pipeline: WorkoutGenerationPipeline = Depends(get_generation_pipeline),
):
    """
    Generate a new workout using AI and save it.

    1. **Quota**: Counts the request against the caller's daily quota
       (admins are exempt).

    2. **Generation**: Prompts the model for a structured workout, retrying
       once with a stricter prompt if the output is not valid.

    3. **Exercise Resolution**: Maps each exercise onto the shared catalog,
       creating new catalog entries as needed.

    4. **Persistence**: Saves the workout and its ordered exercises together;
       a partial save is rolled back.

    Args:
        request: Generation parameters:
            - muscleFocus: 1-4 muscle groups
            - workoutFocus: 1-3 focus types, first is primary
            - exerciseCount: 1-10
            - specialInstructions: optional, up to 140 characters
            - excludeExercises: optional names to avoid

    Returns:
        {"success": true, "workoutId": ..., "workout": ...}

    Errors:
        400 invalid request, 401 unauthenticated, 429 quota exhausted,
        500 generation or save failure; body {"success": false, "error": ...}
    """
    logger.info(
        f"Generate workout request: user={principal.user_id}, "
        f"muscles={request.muscle_focus}, focus={request.workout_focus}, "
        f"count={request.exercise_count}"
    )

    try:
        outcome = await pipeline.run(request, principal)
    except WorkoutGenerationError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(f"Workout generation failed ({type(e).__name__}): {e}")
        return error_response(e.status_code, e.public_message)
    except Exception as e:
        logger.exception(f"Unexpected error during workout generation: {e}")
        return error_response(500, WorkoutGenerationError.public_message)

    return GenerateWorkoutResponse(
        success=True,
        workout_id=outcome.workout_id,
        workout=outcome.workout,
    )


@router.get(
    "/quota",
    response_model=QuotaStatusResponse,
    response_model_by_alias=True,
)
def get_generation_quota(
    principal: Principal = Depends(get_principal),
    quota_gate: QuotaGate = Depends(get_quota_gate),
):
    """
    Get the caller's remaining generations for the current window.

    Returns:
        {"limit", "remaining", "resetAt", "unlimited"}
    """
    status = quota_gate.remaining(principal)
    return QuotaStatusResponse(
        limit=status.limit,
        remaining=status.remaining,
        reset_at=status.reset_at,
        unlimited=status.unlimited,
    )
