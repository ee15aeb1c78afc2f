# src/dtforge/core/errors.py
"""Exceptions raised by dtforge."""


class DatatableError(Exception):
    """Base class for every error raised by dtforge itself."""


class InvalidSourceError(DatatableError, TypeError):
    """The value given as a data source is not a table, model or query."""

    def __init__(self, source: object, reason: str = ""):
        self.source = source
        message = f"Invalid query passed to Datatable: {type(source).__name__}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
