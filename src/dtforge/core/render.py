# src/dtforge/core/render.py
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional

# (raw_value, row, datatable) -> display value
RenderCallback = Callable[[Any, Any, Any], Any]


def raw_value(row: Any, column_name: str) -> Any:
    """Value of `column_name` on a result row, None when the row has no such field."""
    if isinstance(row, Mapping):
        return row.get(column_name)
    return getattr(row, column_name, None)


class RowRenderer:
    """Builds display rows, running each column through its render callback if it has one."""

    def __init__(self, renders: Optional[Dict[str, RenderCallback]] = None, datatable: Any = None):
        self.renders = renders if renders is not None else {}
        self.datatable = datatable

    def render_cell(self, row: Any, column_name: str) -> Any:
        value = raw_value(row, column_name)
        render = self.renders.get(column_name)
        if render is not None:
            return render(value, row, self.datatable)
        return value

    def render_row(self, row: Any, columns: Iterable[str]) -> Dict[str, Any]:
        return {name: self.render_cell(row, name) for name in columns}

    def render(self, rows: Iterable[Any], columns: List[str]) -> List[Dict[str, Any]]:
        return [self.render_row(row, columns) for row in rows]
