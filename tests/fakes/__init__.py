"""
Fake implementations for testing.

This package provides in-memory fake implementations of repository
interfaces and the model client for fast, isolated testing without
database or OpenAI dependencies.
"""

from tests.fakes.exercise_repository import FakeExerciseRepository
from tests.fakes.model_client import FakeModelClient, workout_json
from tests.fakes.profile_repository import FakeProfileRepository
from tests.fakes.rate_limit_repository import FakeRateLimitRepository
from tests.fakes.workout_repository import FakeWorkoutRepository

__all__ = [
    "FakeExerciseRepository",
    "FakeModelClient",
    "FakeProfileRepository",
    "FakeRateLimitRepository",
    "FakeWorkoutRepository",
    "workout_json",
]
