"""
Pydantic models for API request/response schemas.

These models define the shape of data exchanged with clients. They are kept
separate from the pinning layer types to maintain clear API boundaries.
"""
