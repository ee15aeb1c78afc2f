from dtforge.core.query.builder import ComposedQuery, QueryComposer
from dtforge.core.query.operators import SearchGroup

__all__ = ["ComposedQuery", "QueryComposer", "SearchGroup"]
