# src/dtforge/core/config.py
"""Datatable configuration."""

from typing import Optional, Tuple

from pydantic import BaseModel, Field


class DatatableConfig(BaseModel):
    """Defaults applied when a request omits or garbles a parameter."""

    default_offset: int = Field(default=0, ge=0)
    default_limit: int = 10
    default_order_by: Optional[str] = None
    default_order: str = "desc"
    supported_orders: Tuple[str, ...] = ("asc", "desc")
    default_search_value: Optional[str] = None
