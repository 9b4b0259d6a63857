"""FastAPI integration for emojitar."""

from emojitar.api.routes import create_router

__all__ = ["create_router"]
