"""
Pytest fixtures for the workout generation service tests.
"""

from typing import Any, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient

from api.deps import (
    get_current_user,
    get_exercise_repo,
    get_model_client,
    get_profile_repo,
    get_rate_limit_repo,
    get_settings,
    get_workout_repo,
)
from backend.main import create_app
from backend.settings import Settings
from models.generation import GenerateWorkoutRequest
from tests.fakes import (
    FakeExerciseRepository,
    FakeModelClient,
    FakeProfileRepository,
    FakeRateLimitRepository,
    FakeWorkoutRepository,
    workout_json,
)


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------

TEST_USER_ID = "test-user-123"
ADMIN_USER_ID = "admin-user-789"


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


# ---------------------------------------------------------------------------
# Mock Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_generation_payload() -> Dict[str, Any]:
    """Valid camelCase payload for workout generation."""
    return {
        "muscleFocus": ["chest", "triceps"],
        "workoutFocus": ["hypertrophy"],
        "exerciseCount": 3,
        "specialInstructions": "Keep it under 45 minutes",
    }


@pytest.fixture
def sample_request(sample_generation_payload) -> GenerateWorkoutRequest:
    """Validated generation request."""
    return GenerateWorkoutRequest.model_validate(sample_generation_payload)


@pytest.fixture
def sample_exercises() -> List[Dict[str, Any]]:
    """Three exercises as the model returns them."""
    return [
        {
            "name": "Barbell Bench Press",
            "sets": 4,
            "reps": 8,
            "rest_time_seconds": 90,
            "rationale": "Keep shoulder blades retracted and feet planted.",
            "primary_muscles": ["mid_chest", "triceps"],
            "secondary_muscles": ["front_delts"],
            "equipment": "barbell",
            "movement_type": "compound",
        },
        {
            "name": "Incline Dumbbell Press",
            "sets": 3,
            "reps": "8-12",
            "rest_time_seconds": 75,
            "rationale": "Control the descent and avoid flaring elbows.",
            "primary_muscles": ["upper_chest"],
            "secondary_muscles": ["triceps"],
            "equipment": "dumbbell",
            "movement_type": "compound",
        },
        {
            "name": "Cable Triceps Pushdown",
            "sets": 3,
            "reps": 12,
            "rest_time_seconds": 60,
            "rationale": "Pin the elbows to your sides.",
        },
    ]


@pytest.fixture
def valid_model_response(sample_exercises) -> str:
    """Raw model text for a valid three-exercise workout."""
    return workout_json(
        sample_exercises,
        name="Chest & Triceps Builder",
        total_duration_minutes=40,
        muscle_groups_targeted="Chest, Triceps",
        joint_groups_affected="Shoulders, Elbows",
        equipment_needed="Barbell, Dumbbells, Cable",
    )


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def exercise_repo() -> FakeExerciseRepository:
    return FakeExerciseRepository()


@pytest.fixture
def workout_repo() -> FakeWorkoutRepository:
    return FakeWorkoutRepository()


@pytest.fixture
def rate_limit_repo() -> FakeRateLimitRepository:
    return FakeRateLimitRepository()


@pytest.fixture
def profile_repo() -> FakeProfileRepository:
    return FakeProfileRepository(admin_ids={ADMIN_USER_ID})


@pytest.fixture
def model_client(valid_model_response) -> FakeModelClient:
    return FakeModelClient(responses=[valid_model_response])


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        supabase_jwt_secret="test-jwt-secret",
        openai_api_key="test-openai-key",
        generation_quota_limit=3,
        _env_file=None,
    )


@pytest.fixture(scope="session")
def app(test_settings):
    """Create test application instance."""
    return create_app(settings=test_settings)


@pytest.fixture
def client(
    app,
    test_settings,
    exercise_repo,
    workout_repo,
    rate_limit_repo,
    profile_repo,
    model_client,
) -> Generator[TestClient, None, None]:
    """
    Per-test FastAPI TestClient wired to in-memory fakes.
    Properly cleans up dependency overrides after each test.
    """
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_exercise_repo] = lambda: exercise_repo
    app.dependency_overrides[get_workout_repo] = lambda: workout_repo
    app.dependency_overrides[get_rate_limit_repo] = lambda: rate_limit_repo
    app.dependency_overrides[get_profile_repo] = lambda: profile_repo
    app.dependency_overrides[get_model_client] = lambda: model_client
    yield TestClient(app)
    app.dependency_overrides.clear()
