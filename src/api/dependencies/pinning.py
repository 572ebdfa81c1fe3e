"""
Access to the process-wide pinning manager.

The manager (and the provider client it owns) is built once in the
application lifespan and only read afterwards, so every request task can
share it.
"""

from src.pinning.manager import PinningManager


def get_pinning_manager() -> PinningManager:
    """FastAPI dependency to get the pinning manager from app state."""
    from ..main import app_state
    return app_state["pinning_manager"]
