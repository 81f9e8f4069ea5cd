"""
API package for the workout generation service.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""
