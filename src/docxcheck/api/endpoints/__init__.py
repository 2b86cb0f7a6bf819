"""API endpoint modules."""

from .analysis import router as analysis_router
from .auth import router as auth_router
from .history import router as history_router

__all__ = ["analysis_router", "auth_router", "history_router"]
