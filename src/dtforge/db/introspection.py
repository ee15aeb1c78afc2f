# src/dtforge/db/introspection.py
from typing import List, Optional, Tuple

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session


def split_table_name(table_name: str) -> Tuple[Optional[str], str]:
    """`"public.users"` -> `("public", "users")`; `"users"` -> `(None, "users")`."""
    schema, _, name = table_name.rpartition(".")
    return (schema or None), name


class SchemaIntrospector:
    """Reads column listings from the database behind a session."""

    def __init__(self, bind: Engine | Connection):
        self.bind = bind

    @classmethod
    def for_session(cls, session: Session) -> "SchemaIntrospector":
        return cls(session.get_bind())

    def get_column_listing(self, table_name: str) -> List[str]:
        schema, name = split_table_name(table_name)
        # New inspector each call, no reflection cache
        inspector = inspect(self.bind)
        return [col["name"] for col in inspector.get_columns(name, schema=schema)]
