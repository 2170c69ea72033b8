"""REST API for Catalogo."""

from catalogo.api.app import create_app, run
from catalogo.api.models import APIResponse

__all__ = [
    "APIResponse",
    "create_app",
    "run",
]
