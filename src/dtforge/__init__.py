"""
dtforge: server-side processing for DataTables grids on top of SQLAlchemy.
"""

from dtforge.core import DatatableConfig, DatatableError, InvalidSourceError, RequestContext
from dtforge.core.response import DatatableResponse
from dtforge.datatable import Datatable
from dtforge.db import DataSource, ModelInstance, ModelType, PrebuiltQuery, TableName

__version__ = "0.1.0"

__all__ = [
    "Datatable",
    "DatatableConfig",
    "DatatableError",
    "DatatableResponse",
    "DataSource",
    "InvalidSourceError",
    "ModelInstance",
    "ModelType",
    "PrebuiltQuery",
    "RequestContext",
    "TableName",
]
