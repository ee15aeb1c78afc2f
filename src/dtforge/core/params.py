# src/dtforge/core/params.py
"""Interpretation of the pagination, search and ordering parameters of a request."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from dtforge.core.config import DatatableConfig
from dtforge.core.request import RequestContext


class RequestParameters(BaseModel):
    """Validated view of a DataTables request."""

    offset: int = 0
    limit: int = 10
    search_value: Optional[str] = None
    order_by: Optional[str] = None
    order_direction: str = "desc"
    # None when the request declares no columns at all
    columns: Optional[List[str]] = None
    is_search_request: bool = False


def to_int(value: Any, default: int) -> int:
    """Coerce a request value to int, falling back to `default`."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        pass
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return default


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value).strip())
    except ValueError:
        return False
    return True


def descriptor_name(descriptor: Any) -> Optional[str]:
    """Column name of a descriptor: `data` wins over `name`."""
    if not isinstance(descriptor, dict):
        return None
    for key in ("data", "name"):
        if descriptor.get(key) is not None:
            return str(descriptor[key])
    return None


class RequestParameterResolver:
    """Reads raw request fields and produces `RequestParameters`."""

    def __init__(self, context: RequestContext, config: Optional[DatatableConfig] = None):
        self.context = context
        self.config = config or DatatableConfig()

    def resolve(self) -> RequestParameters:
        descriptors = self._column_descriptors()
        columns = self.resolve_columns(descriptors)

        return RequestParameters(
            offset=to_int(self.context.input("start"), self.config.default_offset),
            limit=to_int(self.context.input("length"), self.config.default_limit),
            search_value=self.resolve_search_value(),
            order_by=self.resolve_order_by(descriptors, columns, self.context.input("order.0.column")),
            order_direction=self.resolve_order_direction(),
            columns=columns if descriptors else None,
            is_search_request=self.context.is_search_request,
        )

    def _column_descriptors(self) -> Dict[int, Any]:
        """Descriptors by their request index; sparse indices are kept as sent."""
        raw = self.context.input("columns")
        if isinstance(raw, dict):
            return {int(key): value for key, value in raw.items() if str(key).isdigit()}
        if isinstance(raw, (list, tuple)):
            return dict(enumerate(raw))
        return {}

    def resolve_search_value(self) -> Optional[str]:
        value = self.context.input("search.value", self.config.default_search_value)
        return value if value is None else str(value)

    def resolve_columns(self, descriptors: Dict[int, Any]) -> List[str]:
        """Request-scoped column list; only searchable ones on a search request."""
        ordered = [descriptors[index] for index in sorted(descriptors)]
        if self.context.is_search_request:
            # DataTables sends the flag as the string "true"
            ordered = [
                d for d in ordered
                if isinstance(d, dict) and d.get("searchable") == "true"
            ]

        names = [descriptor_name(d) for d in ordered]
        return [name for name in names if name is not None]

    def resolve_order_by(
        self, descriptors: Dict[int, Any], columns: List[str], order_column: Any
    ) -> Optional[str]:
        default = self.config.default_order_by

        if is_numeric(order_column):
            number = float(order_column)
            if not number.is_integer() or int(number) not in descriptors:
                return default
            name = descriptor_name(descriptors[int(number)])
            return name if name is not None else default

        if order_column is not None and order_column in (columns or []):
            return order_column

        return default

    def resolve_order_direction(self) -> str:
        direction = self.context.input("order.0.dir", self.config.default_order)
        if direction not in self.config.supported_orders:
            return self.config.default_order
        return direction
