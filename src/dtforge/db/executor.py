# src/dtforge/db/executor.py
"""Executes the queries built by dtforge through a SQLAlchemy session."""

from typing import Any, List

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session
from sqlalchemy.sql import Select


def is_single_entity(statement: Select) -> bool:
    """True for `select(Model)`, whose rows should come back as model instances."""
    descriptions = statement.column_descriptions
    if len(descriptions) != 1:
        return False
    entity = descriptions[0].get("entity")
    return entity is not None and descriptions[0].get("expr") is entity


class QueryRunner:
    """Counts and fetches rows for ORM `Query` objects and `Select` statements."""

    def __init__(self, session: Session):
        self.session = session

    def count(self, query: Any) -> int:
        if isinstance(query, Query):
            return query.count()
        count_stmt = select(func.count()).select_from(query.order_by(None).subquery())
        return self.session.execute(count_stmt).scalar_one()

    def fetch(self, query: Any) -> List[Any]:
        if isinstance(query, Query):
            return query.all()

        result = self.session.execute(query)
        if is_single_entity(query):
            return list(result.scalars().all())
        return list(result.mappings().all())
