"""
Domain models for generated workouts.

These models correspond to the exercises, workouts and workout_exercises
tables in supabase/migrations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class WorkoutStatus(str, Enum):
    """Lifecycle status of a workout."""

    NEW = "new"
    TARGET = "target"
    MISSED = "missed"
    COMPLETED = "completed"


class FocusType(str, Enum):
    """Training objectives with dedicated coaching guidance."""

    CARDIO = "cardio"
    HYPERTROPHY = "hypertrophy"
    ISOLATION = "isolation"
    ISOMETRIC = "isometric"
    PLYOMETRIC = "plyometric"
    STABILITY = "stability"
    STRENGTH = "strength"
    MOBILITY = "mobility"


class MovementType(str, Enum):
    """Exercise movement classification."""

    COMPOUND = "compound"
    ISOLATION = "isolation"


class CatalogExercise(BaseModel):
    """A canonical exercise in the shared catalog."""

    id: Optional[str] = Field(
        None, description="Catalog row ID; None for a non-persisted placeholder"
    )
    name: str
    search_key: str
    primary_muscles: List[str] = Field(default_factory=list)
    secondary_muscles: List[str] = Field(default_factory=list)
    equipment: str = "bodyweight"
    movement_type: Optional[MovementType] = None
    is_placeholder: bool = False


@dataclass(frozen=True)
class Principal:
    """
    The caller a generation runs on behalf of.

    Supplied by the auth layer and passed explicitly into the pipeline.
    """

    user_id: str
    is_admin: bool = False
