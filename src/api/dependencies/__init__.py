"""
FastAPI dependencies for request processing.

Dependencies hand the process-wide pinning manager to the endpoints so tests
can swap it out through ``app.dependency_overrides``.
"""
