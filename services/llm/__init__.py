"""
LLM integration for workout generation.

Provides the OpenAI model client, prompt templates, and the response
validator.
"""

from services.llm.client import OpenAIWorkoutModel
from services.llm.prompts import AttemptKind, build_workout_prompt, max_tokens_for
from services.llm.schemas import ProposedExercise, ValidatedWorkout, validate_workout_response

__all__ = [
    "AttemptKind",
    "OpenAIWorkoutModel",
    "ProposedExercise",
    "ValidatedWorkout",
    "build_workout_prompt",
    "max_tokens_for",
    "validate_workout_response",
]
