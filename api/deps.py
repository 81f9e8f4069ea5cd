"""
FastAPI Dependency Providers for the workout generation API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings, Supabase client, model client and thread pool are cached per-process (lru_cache)
- Repository and service providers create new instances per-request
- Auth providers extract the principal from headers

Usage in routers:
    from api.deps import get_generation_pipeline, get_principal

    @router.post("/workouts/generate")
    async def generate(
        principal: Principal = Depends(get_principal),
        pipeline: WorkoutGenerationPipeline = Depends(get_generation_pipeline),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_workout_repo] = lambda: FakeWorkoutRepository()
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from supabase import Client, create_client

from application.ports import (
    ExerciseRepository,
    ProfileRepository,
    RateLimitRepository,
    WorkoutModelClient,
    WorkoutRepository,
)
from backend.auth import get_current_user
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.db import (
    SupabaseExerciseRepository,
    SupabaseProfileRepository,
    SupabaseRateLimitRepository,
    SupabaseWorkoutRepository,
)
from models.workout import Principal
from services.exercise_resolver import ExerciseResolver
from services.generation_pipeline import WorkoutGenerationPipeline
from services.llm.client import OpenAIWorkoutModel
from services.quota_gate import QuotaGate
from services.workout_generator import WorkoutGenerator
from services.workout_persistence import WorkoutPersistence

logger = logging.getLogger(__name__)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_exercise_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ExerciseRepository:
    """Get the exercise catalog repository."""
    return SupabaseExerciseRepository(client)


def get_workout_repo(
    client: Client = Depends(get_supabase_client_required),
) -> WorkoutRepository:
    """Get the workout repository."""
    return SupabaseWorkoutRepository(client)


def get_rate_limit_repo(
    client: Client = Depends(get_supabase_client_required),
) -> RateLimitRepository:
    """Get the rate limit store."""
    return SupabaseRateLimitRepository(client)


def get_profile_repo(
    client: Client = Depends(get_supabase_client_required),
) -> ProfileRepository:
    """Get the profile repository."""
    return SupabaseProfileRepository(client)


# =============================================================================
# Model Client Provider
# =============================================================================


@lru_cache
def _build_model_client() -> Optional[OpenAIWorkoutModel]:
    settings = _get_settings()
    if not settings.openai_api_key:
        return None
    return OpenAIWorkoutModel(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.model_timeout_seconds,
    )


def get_model_client() -> WorkoutModelClient:
    """
    Get the generative model client (cached).

    Raises:
        HTTPException: 503 if no OpenAI API key is configured
    """
    client = _build_model_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Workout generator not available. OpenAI API key not configured.",
        )
    return client


@lru_cache
def get_executor() -> ThreadPoolExecutor:
    """Thread pool for blocking Supabase calls made from async code."""
    return ThreadPoolExecutor(max_workers=8, thread_name_prefix="workout_gen_")


# =============================================================================
# Authentication Providers
# =============================================================================


def get_principal(
    user_id: str = Depends(get_current_user),
    profile_repo: ProfileRepository = Depends(get_profile_repo),
) -> Principal:
    """
    Get the authenticated principal with its admin flag.

    A failed profile lookup means "not admin"; the quota still applies.
    """
    try:
        is_admin = profile_repo.is_admin(user_id)
    except Exception as e:
        logger.warning(f"Admin lookup failed for user {user_id}: {e}")
        is_admin = False
    return Principal(user_id=user_id, is_admin=is_admin)


# =============================================================================
# Service Providers
# =============================================================================


def get_quota_gate(
    settings: Settings = Depends(get_settings),
    rate_limit_repo: RateLimitRepository = Depends(get_rate_limit_repo),
) -> QuotaGate:
    """Get the generation quota gate."""
    return QuotaGate(
        rate_limit_repo,
        limit=settings.generation_quota_limit,
        window_seconds=settings.generation_quota_window_seconds,
    )


def get_generation_pipeline(
    settings: Settings = Depends(get_settings),
    model_client: WorkoutModelClient = Depends(get_model_client),
    exercise_repo: ExerciseRepository = Depends(get_exercise_repo),
    workout_repo: WorkoutRepository = Depends(get_workout_repo),
    quota_gate: QuotaGate = Depends(get_quota_gate),
    executor: ThreadPoolExecutor = Depends(get_executor),
) -> WorkoutGenerationPipeline:
    """Create the end-to-end generation pipeline for a request."""
    return WorkoutGenerationPipeline(
        generator=WorkoutGenerator(
            model_client,
            temperature=settings.generation_temperature,
            timeout_seconds=settings.model_timeout_seconds,
        ),
        resolver=ExerciseResolver(
            exercise_repo,
            strict=settings.strict_catalog,
            executor=executor,
        ),
        persistence=WorkoutPersistence(workout_repo),
        quota_gate=quota_gate,
        environment=settings.environment,
        executor=executor,
    )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_exercise_repo",
    "get_workout_repo",
    "get_rate_limit_repo",
    "get_profile_repo",
    # Model
    "get_model_client",
    "get_executor",
    # Authentication
    "get_current_user",
    "get_principal",
    # Services
    "get_quota_gate",
    "get_generation_pipeline",
]
