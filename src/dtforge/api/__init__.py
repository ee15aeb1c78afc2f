"""FastAPI integration for dtforge."""

from dtforge.api.dependencies import get_request_context
from dtforge.api.routes import DatatableOps

__all__ = ["DatatableOps", "get_request_context"]
