"""
Port interfaces (Protocols) for the workout generation service.

This package defines the interface contracts that the infrastructure
layer must implement. Using Protocols enables:
- Clean separation of concerns
- Easy testing with in-memory fakes
- Dependency inversion (depend on abstractions, not concretions)
"""

from application.ports.exercise_repository import ExerciseRepository
from application.ports.model_client import ModelCompletion, TokenUsage, WorkoutModelClient
from application.ports.profile_repository import ProfileRepository
from application.ports.rate_limit_repository import RateLimitRepository
from application.ports.workout_repository import WorkoutRepository

__all__ = [
    "ExerciseRepository",
    "ModelCompletion",
    "ProfileRepository",
    "RateLimitRepository",
    "TokenUsage",
    "WorkoutModelClient",
    "WorkoutRepository",
]
