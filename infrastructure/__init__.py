"""
Infrastructure Layer for the workout generation service.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

from infrastructure.db import (
    SupabaseExerciseRepository,
    SupabaseProfileRepository,
    SupabaseRateLimitRepository,
    SupabaseWorkoutRepository,
)

__all__ = [
    "SupabaseExerciseRepository",
    "SupabaseProfileRepository",
    "SupabaseRateLimitRepository",
    "SupabaseWorkoutRepository",
]
