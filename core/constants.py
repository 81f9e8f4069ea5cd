"""
Shared constants.

This module has no dependencies on models or services to avoid circular imports.
"""

# Maximum length for the free-text special instructions field
MAX_SPECIAL_INSTRUCTIONS_LENGTH = 140

# Maximum length for a single excluded exercise name
MAX_EXCLUDED_NAME_LENGTH = 80

# Maximum number of exercises a regeneration may exclude
MAX_EXCLUDED_EXERCISES = 20

# Generation request bounds
MIN_EXERCISE_COUNT = 1
MAX_EXERCISE_COUNT = 10
MAX_MUSCLE_FOCUS = 4
MAX_WORKOUT_FOCUS = 3

# Model output bounds
MAX_RATIONALE_LENGTH = 1000
MAX_WORKOUT_NAME_LENGTH = 100
EXERCISE_COUNT_TOLERANCE = 2

# Summary estimation
AVERAGE_SET_SECONDS = 30

# Quota key suffix, prefixed with the user id
GENERATION_QUOTA_KEY = "workout_generation"
