# src/dtforge/core/query/operators.py
"""SQL building blocks for the global search and the ordering clause."""

from typing import Any, List, Optional, Union

from sqlalchemy import column, literal_column, or_
from sqlalchemy.orm import Mapper
from sqlalchemy.sql.elements import ColumnElement

# A search target is a column name or any SQLAlchemy column expression,
# e.g. `User.name` or `func.lower(User.name)`.
SearchTarget = Union[str, ColumnElement, Any]


def like_pattern(search_value: str) -> str:
    """Wrap the term for a substring LIKE. `%` and `_` in the term stay wildcards."""
    return f"%{search_value}%"


def search_target(target: SearchTarget) -> ColumnElement:
    """
    Convert a configured search target into a column expression.

    Strings are emitted as written, so `"users.name"` keeps its table
    qualification. They come from configuration, never from the request.
    """
    if isinstance(target, str):
        return literal_column(target)
    if hasattr(target, "__clause_element__"):
        return target.__clause_element__()
    return target


def mapped_target(mapper: Optional[Mapper], key: str) -> Optional[ColumnElement]:
    """Table column behind the mapped attribute `key`, None if `key` is not mapped."""
    if mapper is None or key not in mapper.column_attrs:
        return None
    return mapper.column_attrs[key].columns[0]


def order_target(name: str, mapper: Optional[Mapper] = None) -> ColumnElement:
    """Column to order by. The name comes from the request, so it is quoted as an identifier."""
    mapped = mapped_target(mapper, name)
    return mapped if mapped is not None else column(name)


def order_clause(name: str, direction: str, mapper: Optional[Mapper] = None) -> ColumnElement:
    target = order_target(name, mapper)
    return target.asc() if direction == "asc" else target.desc()


class SearchGroup:
    """
    Collects the OR-ed predicates of the global search.

    Search callbacks receive the group. They can add their own conditions with
    `or_where`/`or_like`, or replace `query` (e.g. to add a join) before the
    group is applied.
    """

    def __init__(self, query: Any, search_value: str):
        self.query = query
        self.search_value = search_value
        self.conditions: List[ColumnElement] = []

    def or_where(self, condition: ColumnElement) -> "SearchGroup":
        self.conditions.append(condition)
        return self

    def or_like(self, target: SearchTarget, search_value: Any = None) -> "SearchGroup":
        value = self.search_value if search_value is None else search_value
        return self.or_where(search_target(target).like(like_pattern(value)))

    def clause(self) -> ColumnElement:
        return or_(*self.conditions)

    def __bool__(self) -> bool:
        return bool(self.conditions)

    def __len__(self) -> int:
        return len(self.conditions)
