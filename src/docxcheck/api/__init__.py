"""HTTP API routers."""

from .endpoints import analysis_router, auth_router, history_router

__all__ = ["analysis_router", "auth_router", "history_router"]
