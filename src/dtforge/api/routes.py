# src/dtforge/api/routes.py
"""DataTables endpoints for FastAPI routers."""

from typing import Any, Callable, Iterable, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dtforge.api.dependencies import get_request_context
from dtforge.core.config import DatatableConfig
from dtforge.core.logging import color_palette, log
from dtforge.core.request import RequestContext
from dtforge.core.response import DatatableResponse
from dtforge.datatable import Datatable


def default_path(source: Any) -> str:
    """`/users` for the table `users` or a model mapped to it."""
    if isinstance(source, str):
        return f"/{source.rsplit('.', 1)[-1].lower()}"
    table_name = getattr(source, "__tablename__", None)
    if table_name is None:
        raise ValueError(f"Cannot derive a route path for {source!r}; pass `path`")
    return f"/{table_name.lower()}"


class DatatableOps:
    """Class to register a DataTables server-side endpoint on a router."""

    def __init__(
        self,
        source: Any,
        router: APIRouter,
        db_dependency: Callable[..., Session],
        path: Optional[str] = None,
        columns: Optional[Iterable[str]] = None,
        configure: Optional[Callable[[Datatable], Any]] = None,
        config: Optional[DatatableConfig] = None,
    ):
        """Initialize the endpoint with its source and per-request configuration hook."""
        self.source = source
        self.router = router
        self.db_dependency = db_dependency
        self.path = path or default_path(source)
        self.columns = list(columns) if columns is not None else None
        self.configure = configure
        self.config = config or DatatableConfig()

    def build(self, context: RequestContext, db: Session) -> Datatable:
        """Create the Datatable for one request and apply the configure hook."""
        datatable = Datatable(
            self.source, context, db, columns=self.columns, config=self.config
        )
        if self.configure is not None:
            self.configure(datatable)
        return datatable

    def generate_route(self) -> None:
        """Add GET and POST routes answering DataTables requests."""

        @self.router.api_route(
            self.path,
            methods=["GET", "POST"],
            response_model=DatatableResponse,
            summary=f"DataTables data for {self.path.strip('/')}",
            description="Server-side processing endpoint for a DataTables grid",
        )
        def datatable_endpoint(
            context: RequestContext = Depends(get_request_context),
            db: Session = Depends(self.db_dependency),
        ) -> DatatableResponse:
            return self.build(context, db).payload()

        log.success(f"Generated datatable route: {color_palette['table'](self.path)}")
