# src/dtforge/db/sources.py
"""
Data sources a Datatable can be built from.

Whatever the caller passes is coerced once into one of four variants, each of
which knows how to produce the base query, the table name and the default
column list.
"""

import importlib
from dataclasses import dataclass, field
from typing import Any, List, Optional, Type

from sqlalchemy import column, inspect, select, table
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import InstanceState, Mapper, Query, Session
from sqlalchemy.sql import Select
from sqlalchemy.sql.selectable import Join

from dtforge.core.errors import InvalidSourceError
from dtforge.db.introspection import SchemaIntrospector, split_table_name


@dataclass
class ResolvedSource:
    """Base query, table name and default columns of a data source."""

    base_query: Any
    table_name: str
    default_columns: List[str] = field(default_factory=list)
    # Set when default_columns are mapped attribute keys
    mapper: Optional[Mapper] = None


# ===== Helper Functions =====


def mapper_for(value: Any) -> Optional[Mapper]:
    """The mapper of a mapped class or instance, None for anything else."""
    try:
        info = inspect(value)
    except NoInspectionAvailable:
        return None
    if isinstance(info, Mapper):
        return info
    if isinstance(info, InstanceState):
        return info.mapper
    return None


def is_model_class(value: Any) -> bool:
    return isinstance(value, type) and mapper_for(value) is not None


def is_model_instance(value: Any) -> bool:
    return not isinstance(value, type) and mapper_for(value) is not None


def attribute_keys(mapper: Mapper) -> List[str]:
    return [attr.key for attr in mapper.column_attrs]


def table_name_for(mapper: Mapper) -> str:
    local_table = mapper.local_table
    if local_table.schema:
        return f"{local_table.schema}.{local_table.name}"
    return local_table.name


def import_model(path: str) -> Optional[Type[Any]]:
    """Import `"pkg.module.Model"` or `"pkg.module:Model"`; None if it is not a model."""
    if ":" in path:
        module_name, _, attr = path.partition(":")
    elif "." in path:
        module_name, _, attr = path.rpartition(".")
    else:
        return None
    if not module_name or not attr:
        return None

    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None

    candidate = getattr(module, attr, None)
    return candidate if is_model_class(candidate) else None


# ===== Source Variants =====


class DataSource:
    """Common contract of the source variants."""

    def resolve(self, session: Session) -> ResolvedSource:
        raise NotImplementedError

    @staticmethod
    def coerce(value: Any) -> "DataSource":
        """Classify a user supplied source; raises InvalidSourceError if it is none of the known shapes."""
        if isinstance(value, DataSource):
            return value
        if isinstance(value, str):
            model = import_model(value)
            return ModelType(model) if model is not None else TableName(value)
        if isinstance(value, (Query, Select)):
            return PrebuiltQuery(value)
        if is_model_class(value):
            return ModelType(value)
        if is_model_instance(value):
            return ModelInstance(value)
        raise InvalidSourceError(value)


@dataclass
class TableName(DataSource):
    name: str

    def resolve(self, session: Session) -> ResolvedSource:
        columns = SchemaIntrospector.for_session(session).get_column_listing(self.name)
        schema, name = split_table_name(self.name)
        base = table(name, *[column(col) for col in columns], schema=schema)
        return ResolvedSource(select(base), self.name, columns)


@dataclass
class ModelType(DataSource):
    model: Type[Any]

    def resolve(self, session: Session) -> ResolvedSource:
        mapper = inspect(self.model)
        return ResolvedSource(
            session.query(self.model),
            table_name_for(mapper),
            attribute_keys(mapper),
            mapper=mapper,
        )


@dataclass
class ModelInstance(DataSource):
    instance: Any

    def resolve(self, session: Session) -> ResolvedSource:
        mapper = inspect(self.instance).mapper
        return ResolvedSource(
            session.query(mapper.class_),
            table_name_for(mapper),
            attribute_keys(mapper),
            mapper=mapper,
        )


@dataclass
class PrebuiltQuery(DataSource):
    query: Any

    def resolve(self, session: Session) -> ResolvedSource:
        table_name = self.table_name()
        columns = SchemaIntrospector.for_session(session).get_column_listing(table_name)
        return ResolvedSource(self.query, table_name, columns)

    def table_name(self) -> str:
        if isinstance(self.query, Query):
            return self._orm_table_name()
        return self._from_table_name()

    def _orm_table_name(self) -> str:
        descriptions = self.query.column_descriptions
        entity = descriptions[0].get("entity") if descriptions else None
        if entity is None:
            raise InvalidSourceError(self.query, "query selects no mapped entity")
        return table_name_for(inspect(entity).mapper)

    def _from_table_name(self) -> str:
        froms = self.query.get_final_froms()
        if not froms:
            raise InvalidSourceError(self.query, "statement has no FROM clause")

        target = froms[0]
        while isinstance(target, Join):
            target = target.left
        name = getattr(target, "name", None)
        if not name:
            raise InvalidSourceError(self.query, "FROM target has no name")

        schema = getattr(target, "schema", None)
        return f"{schema}.{name}" if schema else name
