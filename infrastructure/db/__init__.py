"""
Infrastructure Database Layer.

Supabase-backed implementations of the repository interfaces defined in
application.ports.

Usage:
    from supabase import create_client
    from infrastructure.db import SupabaseExerciseRepository, SupabaseWorkoutRepository

    client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    exercise_repo = SupabaseExerciseRepository(client)
    workout_repo = SupabaseWorkoutRepository(client)
"""

from infrastructure.db.exercise_repository import SupabaseExerciseRepository
from infrastructure.db.profile_repository import SupabaseProfileRepository
from infrastructure.db.rate_limit_repository import SupabaseRateLimitRepository
from infrastructure.db.workout_repository import SupabaseWorkoutRepository

__all__ = [
    "SupabaseExerciseRepository",
    "SupabaseProfileRepository",
    "SupabaseRateLimitRepository",
    "SupabaseWorkoutRepository",
]
