"""
LLM response schemas for workout generation.

Pydantic models for the structured workout the model returns, and the
validator that turns raw model text into a ValidatedWorkout.
"""

import json
import logging
import re
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from application.exceptions import ModelOutputError
from core.constants import EXERCISE_COUNT_TOLERANCE
from models.workout import MovementType

logger = logging.getLogger(__name__)

PositiveInt = Annotated[int, Field(strict=True, ge=1)]
NonNegativeInt = Annotated[int, Field(strict=True, ge=0)]
NonEmptyStr = Annotated[str, Field(strict=True, min_length=1)]

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class ProposedExercise(BaseModel):
    """A single exercise proposed by the model."""

    name: NonEmptyStr = Field(description="Exercise name, e.g. 'Barbell Bench Press'")
    sets: PositiveInt = Field(description="Number of sets")
    reps: Union[PositiveInt, NonEmptyStr] = Field(
        description="Rep count or scheme (e.g., 10, '8-12', '30 seconds')"
    )
    rest_time_seconds: NonNegativeInt = Field(description="Rest between sets in seconds")
    rationale: str = Field("", description="Form guidance and coaching notes")
    primary_muscles: Optional[List[str]] = None
    secondary_muscles: Optional[List[str]] = None
    equipment: Optional[str] = None
    movement_type: Optional[MovementType] = None
    order_index: Optional[int] = None
    variant: Literal["minimal", "enhanced"] = "minimal"

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("reps", mode="before")
    @classmethod
    def strip_reps(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("rationale", mode="before")
    @classmethod
    def default_rationale(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("primary_muscles", "secondary_muscles", mode="before")
    @classmethod
    def clean_muscles(cls, v: Any) -> Any:
        """Lowercase muscle IDs; a bare string is treated as a single ID."""
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return v
        return [m.strip().lower() for m in v if isinstance(m, str) and m.strip()]

    @field_validator("equipment", mode="before")
    @classmethod
    def clean_equipment(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @field_validator("movement_type", mode="before")
    @classmethod
    def clean_movement_type(cls, v: Any) -> Any:
        """Unknown movement types are dropped rather than failing the workout."""
        if not isinstance(v, str):
            return None
        value = v.strip().lower()
        return value if value in {m.value for m in MovementType} else None

    @model_validator(mode="after")
    def tag_variant(self) -> "ProposedExercise":
        enhanced = any(
            [
                self.primary_muscles,
                self.secondary_muscles,
                self.equipment,
                self.movement_type,
            ]
        )
        self.variant = "enhanced" if enhanced else "minimal"
        return self

    @property
    def is_enhanced(self) -> bool:
        return self.variant == "enhanced"


class ValidatedWorkout(BaseModel):
    """A workout that passed schema validation."""

    name: Optional[str] = None
    exercises: List[ProposedExercise] = Field(min_length=1)
    total_duration_minutes: Optional[int] = None
    muscle_groups_targeted: Optional[str] = None
    joint_groups_affected: Optional[str] = None
    equipment_needed: Optional[str] = None

    @field_validator(
        "muscle_groups_targeted", "joint_groups_affected", "equipment_needed", mode="before"
    )
    @classmethod
    def join_lists(cls, v: Any) -> Any:
        if isinstance(v, list):
            return ", ".join(str(item) for item in v if item)
        return v

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return None
        return v.strip() or None

    @field_validator("total_duration_minutes", mode="before")
    @classmethod
    def clean_duration(cls, v: Any) -> Any:
        """Model-authored duration is advisory; drop anything unusable."""
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v < 0:
            return None
        return int(v)


def _strip_code_fences(raw: str) -> str:
    return _CODE_FENCE.sub("", raw.strip())


def validate_workout_response(
    raw: str,
    expected_count: Optional[int] = None,
) -> ValidatedWorkout:
    """
    Parse and validate raw model text.

    Accepts {"workout": {"exercises": [...]}} as well as an object with a
    top-level "exercises" list.

    Args:
        raw: Raw text returned by the model
        expected_count: Requested number of exercises, used for a soft check

    Returns:
        ValidatedWorkout

    Raises:
        ModelOutputError: If the text is not JSON or fails schema validation
    """
    if not raw or not raw.strip():
        raise ModelOutputError("Empty response from model", raw_responses=[raw or ""])

    try:
        data = json.loads(_strip_code_fences(raw))
    except json.JSONDecodeError as e:
        raise ModelOutputError(f"Model response is not valid JSON: {e}", raw_responses=[raw]) from e

    if not isinstance(data, dict):
        raise ModelOutputError(
            f"Model response must be a JSON object, got {type(data).__name__}",
            raw_responses=[raw],
        )

    payload = data.get("workout")
    if not isinstance(payload, dict):
        if "exercises" not in data:
            raise ModelOutputError("Model response has no workout or exercises", raw_responses=[raw])
        payload = data

    try:
        workout = ValidatedWorkout.model_validate(payload)
    except ValidationError as e:
        raise ModelOutputError(
            f"Model response failed validation: {e.error_count()} error(s): {e.errors()[:3]}",
            raw_responses=[raw],
        ) from e

    if expected_count is not None:
        actual = len(workout.exercises)
        if abs(actual - expected_count) > EXERCISE_COUNT_TOLERANCE:
            logger.warning(
                f"Model returned {actual} exercises, requested {expected_count}"
            )

    return workout
