"""Models package for the workout generation service."""

from models.generation import (
    GenerateWorkoutRequest,
    GenerateWorkoutResponse,
    QuotaStatusResponse,
)
from models.workout import (
    CatalogExercise,
    FocusType,
    MovementType,
    Principal,
    WorkoutStatus,
)

__all__ = [
    "CatalogExercise",
    "FocusType",
    "MovementType",
    "Principal",
    "WorkoutStatus",
    "GenerateWorkoutRequest",
    "GenerateWorkoutResponse",
    "QuotaStatusResponse",
]
