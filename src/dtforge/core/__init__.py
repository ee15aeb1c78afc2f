"""Core request handling and query building for dtforge."""

from dtforge.core.config import DatatableConfig
from dtforge.core.errors import DatatableError, InvalidSourceError
from dtforge.core.logging import Logger, log, color_palette
from dtforge.core.request import RequestContext

__all__ = [
    "DatatableConfig",
    "DatatableError",
    "InvalidSourceError",
    "Logger",
    "log",
    "color_palette",
    "RequestContext",
]
