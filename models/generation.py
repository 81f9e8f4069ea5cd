"""
Request/response models for workout generation.

These models define the API contract for AI-powered workout generation.
The wire format uses camelCase keys; Python code uses snake_case.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import (
    MAX_EXCLUDED_EXERCISES,
    MAX_EXERCISE_COUNT,
    MAX_MUSCLE_FOCUS,
    MAX_WORKOUT_FOCUS,
    MIN_EXERCISE_COUNT,
)
from core.sanitization import sanitize_special_instructions, sanitize_user_input


class GenerateWorkoutRequest(BaseModel):
    """Request model for generating a workout."""

    model_config = ConfigDict(populate_by_name=True)

    muscle_focus: List[str] = Field(
        alias="muscleFocus",
        min_length=1,
        max_length=MAX_MUSCLE_FOCUS,
        description="Muscle group IDs to target (e.g., 'chest', 'triceps')",
    )
    workout_focus: List[str] = Field(
        alias="workoutFocus",
        min_length=1,
        max_length=MAX_WORKOUT_FOCUS,
        description="Training objectives; the first one is primary",
    )
    exercise_count: int = Field(
        alias="exerciseCount",
        ge=MIN_EXERCISE_COUNT,
        le=MAX_EXERCISE_COUNT,
        description="Number of exercises to generate",
    )
    special_instructions: Optional[str] = Field(
        None,
        alias="specialInstructions",
        description="Free-text guidance, sanitized and capped at 140 characters",
    )
    exclude_exercises: List[str] = Field(
        default_factory=list,
        alias="excludeExercises",
        description="Exercise names to avoid when regenerating",
    )

    @field_validator("muscle_focus", mode="after")
    @classmethod
    def validate_muscle_focus(cls, v: List[str]) -> List[str]:
        """Normalize muscle IDs and drop duplicates while keeping order."""
        cleaned: List[str] = []
        for muscle in v:
            muscle_id = sanitize_user_input(muscle).lower()
            if muscle_id and muscle_id not in cleaned:
                cleaned.append(muscle_id)
        if not cleaned:
            raise ValueError("At least one muscle group must be selected")
        return cleaned

    @field_validator("workout_focus", mode="after")
    @classmethod
    def validate_workout_focus(cls, v: List[str]) -> List[str]:
        """Normalize focus types; order matters, so duplicates keep first position."""
        cleaned: List[str] = []
        for focus in v:
            focus_id = sanitize_user_input(focus).lower()
            if focus_id and focus_id not in cleaned:
                cleaned.append(focus_id)
        if not cleaned:
            raise ValueError("At least one workout focus must be selected")
        return cleaned

    @field_validator("special_instructions", mode="before")
    @classmethod
    def validate_special_instructions(cls, v: Any) -> Optional[str]:
        """Sanitize special instructions to prevent prompt injection."""
        if v is None or not isinstance(v, str):
            return None
        return sanitize_special_instructions(v)

    @field_validator("exclude_exercises", mode="before")
    @classmethod
    def validate_exclude_exercises(cls, v: Any) -> List[str]:
        """
        Validate and sanitize excluded exercise names.

        - Limits the number of names
        - Removes control characters and truncates each name
        - Filters out empty strings and non-strings
        """
        if not v or not isinstance(v, list):
            return []

        if len(v) > MAX_EXCLUDED_EXERCISES:
            raise ValueError(
                f"Too many excluded exercises. Maximum allowed: {MAX_EXCLUDED_EXERCISES}"
            )

        sanitized = []
        for name in v:
            if not isinstance(name, str):
                continue
            clean = sanitize_user_input(name)
            if clean:
                sanitized.append(clean)
        return sanitized

    @property
    def primary_focus(self) -> str:
        """The focus type that drives coaching instructions."""
        return self.workout_focus[0]


class GenerateWorkoutResponse(BaseModel):
    """Response model for a generation attempt."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    workout_id: Optional[str] = Field(None, alias="workoutId")
    workout: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class QuotaStatusResponse(BaseModel):
    """Remaining generation quota for the caller."""

    model_config = ConfigDict(populate_by_name=True)

    limit: int
    remaining: int
    reset_at: Optional[str] = Field(None, alias="resetAt")
    unlimited: bool = False
