# src/dtforge/datatable.py
"""Server side processing for DataTables grids backed by SQLAlchemy."""

from typing import Any, Dict, Iterable, List, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from dtforge.core.config import DatatableConfig
from dtforge.core.logging import color_palette, log
from dtforge.core.params import RequestParameterResolver, RequestParameters
from dtforge.core.query.builder import QueryComposer
from dtforge.core.render import RenderCallback, RowRenderer
from dtforge.core.request import RequestContext
from dtforge.core.response import DatatableResponse, ResponseAssembler
from dtforge.db.executor import QueryRunner
from dtforge.db.sources import DataSource


class Datatable:
    """
    Turns a DataTables request into a filtered, sorted and paginated query
    and formats the result as the widget expects it.

    Example:
        Datatable.from_source(User, context, session) \\
            .column("name", lambda value, row, dt: value.title()) \\
            .on_search("company", "companies.name") \\
            .response()

    The request parameters and the data source are resolved at construction.
    The query runs on the first call to `process`, `response`, `json` or
    `response_data`, and the payload is cached from then on.
    """

    def __init__(
        self,
        source: Any,
        request: RequestContext,
        session: Session,
        columns: Optional[Iterable[str]] = None,
        config: Optional[DatatableConfig] = None,
    ):
        self.request = request
        self.session = session
        self.config = config or DatatableConfig()
        self.runner = QueryRunner(session)

        self.columns: List[str] = []
        self.renders: Dict[str, RenderCallback] = {}
        self.search_columns: Dict[str, Any] = {}
        self.data: List[Dict[str, Any]] = []
        self.rows: Optional[List[Any]] = None
        self.response_payload: Optional[DatatableResponse] = None

        self.query_already_built = False
        self.total_records: Optional[int] = None
        self.records_filtered: Optional[int] = None

        if columns is not None:
            self.add_column(list(columns))

        self.retrieve_request_params()
        self.retrieve_query_and_columns(source)

    @classmethod
    def from_source(
        cls,
        source: Any,
        request: RequestContext,
        session: Session,
        columns: Optional[Iterable[str]] = None,
        config: Optional[DatatableConfig] = None,
    ) -> "Datatable":
        return cls(source, request, session, columns=columns, config=config)

    @property
    def is_search_request(self) -> bool:
        return self.request.is_search_request

    def retrieve_request_params(self) -> None:
        self.params = RequestParameterResolver(self.request, self.config).resolve()

        self.offset = self.params.offset
        self.limit = self.params.limit
        self.search_value = self.params.search_value
        self.order_by = self.params.order_by
        self.order = self.params.order_direction

    def retrieve_query_and_columns(self, source: Any) -> None:
        self.source = DataSource.coerce(source)
        resolved = self.source.resolve(self.session)

        self.original_query = resolved.base_query
        self.table_name = resolved.table_name
        self.mapper = resolved.mapper

        if not self.columns:
            self.add_column(resolved.default_columns)

        # Queries are generative, so sharing the object is a clone
        self.query = self.original_query

        log.debug(
            f"Datatable on {color_palette['table'](self.table_name)} "
            f"from {color_palette['source'](type(self.source).__name__)} "
            f"with columns {', '.join(color_palette['column'](c) for c in self.columns)}"
        )

    # ===== Execution =====

    def current_params(self) -> RequestParameters:
        """Request parameters with any setter overrides applied."""
        return self.params.model_copy(
            update={
                "offset": self.offset,
                "limit": self.limit,
                "search_value": self.search_value,
                "order_by": self.order_by,
                "order_direction": self.order,
            }
        )

    def get_query(self) -> Any:
        """The query with search, ordering and pagination applied. Built only once."""
        if self.query_already_built:
            return self.query

        composer = QueryComposer(
            self.current_params(),
            self.runner,
            self.table_name,
            self.columns,
            search_overrides=self.search_columns,
            datatable=self,
            mapper=self.mapper,
        )
        composed = composer.build(self.original_query, self.query)

        self.query = composed.query
        self.total_records = composed.total_records
        self.records_filtered = composed.records_filtered
        self.query_already_built = True

        return self.query

    def process(self) -> "Datatable":
        """Run the query and prepare the response payload, once."""
        if self.response_payload is not None:
            return self

        with log.timed(f"Datatable on {color_palette['table'](self.table_name)}"):
            query = self.get_query()
            self.rows = self.runner.fetch(query)
            self.data = RowRenderer(self.renders, self).render(self.rows, self.columns)
            self.prepare_response_data()

        return self

    def prepare_response_data(self) -> "Datatable":
        self.response_payload = ResponseAssembler(self.request).assemble(
            self.total_records, self.records_filtered, self.data
        )
        return self

    def payload(self) -> DatatableResponse:
        self.process()
        return self.response_payload

    def response_data(self) -> Dict[str, Any]:
        return self.payload().model_dump()

    def response(self, status_code: int = 200) -> JSONResponse:
        return JSONResponse(content=jsonable_encoder(self.payload()), status_code=status_code)

    def json(self) -> str:
        return self.payload().model_dump_json()

    def get_total_records(self) -> int:
        """Fresh count of the unfiltered source."""
        return self.runner.count(self.original_query)

    # ===== Column configuration =====

    def column(self, name: str, render: RenderCallback) -> "Datatable":
        """
        Add a column, or change how an existing one is displayed.

        `render` receives `(value, row, datatable)` and returns the display value.
        """
        if name not in self.columns:
            self.columns.append(name)

        self.renders[name] = render
        return self

    def on_search_column(self, column: str, column_to_use: Any) -> "Datatable":
        """
        Specify what to match when searching `column`.

        `column_to_use` may be a column name (`"companies.name"`), a SQLAlchemy
        column expression, or a callable `(group, search_value, datatable)`. A
        callable either returns the target to match, or adds its own conditions
        to the `SearchGroup` and returns None.
        """
        self.search_columns[column] = column_to_use
        return self

    def on_search(self, column: str, column_to_use: Any) -> "Datatable":
        return self.on_search_column(column, column_to_use)

    def add_column(self, column: Union[str, Iterable[str]], index: Optional[int] = None) -> "Datatable":
        """Add one or more columns, at the end or at `index`. Known columns are skipped."""
        names = [column] if isinstance(column, str) else list(column)
        new_columns = [name for name in dict.fromkeys(names) if name not in self.columns]

        if index is None:
            self.columns.extend(new_columns)
        else:
            self.columns[index:index] = new_columns
        return self

    def add_columns(self, columns: Iterable[str], index: Optional[int] = None) -> "Datatable":
        return self.add_column(list(columns), index)

    def get_columns(self) -> List[str]:
        return self.columns

    def set_columns(self, columns: Iterable[str]) -> "Datatable":
        self.columns = list(dict.fromkeys(columns))
        return self

    # ===== Accessors =====

    def get_data(self) -> List[Dict[str, Any]]:
        return self.data

    def get_rows(self) -> Optional[List[Any]]:
        return self.rows

    def get_original_query(self) -> Any:
        return self.original_query

    def set_original_query(self, query: Any) -> "Datatable":
        self.original_query = query
        return self

    def get_offset(self) -> int:
        return self.offset

    def set_offset(self, offset: int) -> "Datatable":
        self.offset = offset
        return self

    def get_limit(self) -> int:
        return self.limit

    def set_limit(self, limit: int) -> "Datatable":
        self.limit = limit
        return self

    def get_order(self) -> str:
        return self.order

    def set_order(self, order: str) -> "Datatable":
        self.order = order
        return self

    def get_order_by(self) -> Optional[str]:
        return self.order_by

    def set_order_by(self, order_by: Optional[str]) -> "Datatable":
        self.order_by = order_by
        return self

    def get_search_value(self) -> Optional[str]:
        return self.search_value

    def set_search_value(self, search_value: str) -> "Datatable":
        self.search_value = search_value
        return self
