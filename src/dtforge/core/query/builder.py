# src/dtforge/core/query/builder.py
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Mapper
from sqlalchemy.sql.elements import ClauseElement

from dtforge.core.logging import color_palette, log
from dtforge.core.params import RequestParameters
from dtforge.core.query.operators import (
    SearchGroup,
    SearchTarget,
    mapped_target,
    order_clause,
)
from dtforge.db.executor import QueryRunner

# (group, search_value, datatable) -> search target, or None if the callback
# added its own conditions to the group
SearchCallback = Callable[[SearchGroup, str, Any], Optional[SearchTarget]]


@dataclass
class ComposedQuery:
    """Final query plus the counts taken while building it."""

    query: Any
    total_records: int
    records_filtered: int


def is_literal_target(target: Any) -> bool:
    return (
        isinstance(target, str)
        or isinstance(target, ClauseElement)
        or hasattr(target, "__clause_element__")
    )


class QueryComposer:
    """
    Applies the global search, ordering and pagination of a request to a query.

    The search is a single OR group AND-ed onto the base query, one LIKE per
    search-eligible column. Each column is matched on `table.column` unless a
    search override names another target (a string, a column expression or a
    callback). With a `mapper`, ColumnSet names are attribute keys and are
    matched and ordered on the mapped table column instead.
    """

    def __init__(
        self,
        params: RequestParameters,
        runner: QueryRunner,
        table_name: str,
        columns: List[str],
        search_overrides: Optional[Dict[str, Any]] = None,
        datatable: Any = None,
        mapper: Optional[Mapper] = None,
    ):
        self.params = params
        self.runner = runner
        self.table_name = table_name
        self.columns = columns
        self.search_overrides = search_overrides or {}
        self.datatable = datatable
        self.mapper = mapper

    def build(self, original_query: Any, query: Any) -> ComposedQuery:
        """
        Build the paginated query from `query`, counting along the way.

        `original_query` is only counted, giving `recordsTotal`. The filtered
        count is taken after search and ordering but before pagination.
        """
        if self.params.is_search_request:
            query = self.apply_search(query)

        if self.params.order_by is not None:
            query = query.order_by(
                order_clause(
                    self.params.order_by, self.params.order_direction, self.mapper
                )
            )

        total_records = self.runner.count(original_query)
        if self.params.is_search_request:
            records_filtered = self.runner.count(query)
        else:
            records_filtered = total_records

        query = self.apply_pagination(query)

        log.debug(
            f"Built query for {color_palette['table'](self.table_name)}: "
            f"{color_palette['value'](total_records)} total, "
            f"{color_palette['value'](records_filtered)} filtered"
        )
        return ComposedQuery(query, total_records, records_filtered)

    # ===== Search =====

    def search_columns(self) -> List[str]:
        """
        Columns taking part in the search, in ColumnSet order.

        Falls back to the whole ColumnSet when the request declares no
        searchable column that is also in ColumnSet.
        """
        if not self.params.columns:
            return list(self.columns)
        requested = set(self.params.columns)
        selected = [name for name in self.columns if name in requested]
        return selected or list(self.columns)

    def apply_search(self, query: Any) -> Any:
        group = SearchGroup(query, self.params.search_value or "")
        for column_name in self.search_columns():
            self.search_in_column(column_name, group)

        if not group:
            return group.query
        return group.query.filter(group.clause())

    def search_in_column(self, column_name: str, group: SearchGroup) -> None:
        if column_name not in self.search_overrides:
            mapped = mapped_target(self.mapper, column_name)
            group.or_like(
                mapped if mapped is not None else f"{self.table_name}.{column_name}"
            )
            return

        target = self.search_overrides[column_name]
        if is_literal_target(target):
            group.or_like(target)
            return

        resolved = target(group, group.search_value, self.datatable)
        if resolved is not None:
            group.or_like(resolved)

    # ===== Pagination =====

    def apply_pagination(self, query: Any) -> Any:
        query = query.offset(max(self.params.offset, 0))
        # A negative length ("-1" from DataTables) means every row
        if self.params.limit >= 0:
            query = query.limit(self.params.limit)
        return query
