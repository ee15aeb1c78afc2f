# src/dtforge/core/response.py
"""Response envelope expected by the DataTables widget."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from dtforge.core.params import to_int
from dtforge.core.request import RequestContext


class DatatableResponse(BaseModel):
    """Payload returned to the client widget."""

    draw: int = 0
    recordsTotal: int = 0
    recordsFiltered: int = 0
    data: List[Dict[str, Any]] = Field(default_factory=list)


class ResponseAssembler:
    """Packs the draw token, counts and rendered rows into a `DatatableResponse`."""

    def __init__(self, context: RequestContext):
        self.context = context

    def draw(self) -> int:
        return to_int(self.context.input("draw"), 0)

    def assemble(
        self, records_total: int, records_filtered: int, data: List[Dict[str, Any]]
    ) -> DatatableResponse:
        return DatatableResponse(
            draw=self.draw(),
            recordsTotal=records_total,
            recordsFiltered=records_filtered,
            data=data,
        )
