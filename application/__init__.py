"""
Application layer for the workout generation service.

This package contains:
- exceptions: Error taxonomy shared by services, infrastructure and API
- ports/: Abstract repository interfaces (what the services need)
"""
