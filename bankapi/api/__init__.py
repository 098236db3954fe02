"""HTTP API for the Bank API service."""
from bankapi.api.routes import router

__all__ = ["router"]
