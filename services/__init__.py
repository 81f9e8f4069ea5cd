"""
Services for AI workout generation.

- workout_generator: model orchestration with a single stricter retry
- exercise_resolver: catalog deduplication by search key
- workout_persistence: all-or-nothing workout writes and summary recompute
- quota_gate: per-user generation quota
- generation_pipeline: the end-to-end entry point used by the API
"""
