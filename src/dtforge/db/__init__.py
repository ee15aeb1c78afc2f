"""Database side of dtforge: data sources, introspection and execution."""

from dtforge.db.executor import QueryRunner
from dtforge.db.introspection import SchemaIntrospector
from dtforge.db.sources import (
    DataSource,
    ModelInstance,
    ModelType,
    PrebuiltQuery,
    ResolvedSource,
    TableName,
)

__all__ = [
    "DataSource",
    "ModelInstance",
    "ModelType",
    "PrebuiltQuery",
    "QueryRunner",
    "ResolvedSource",
    "SchemaIntrospector",
    "TableName",
]
