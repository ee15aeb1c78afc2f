# src/dtforge/core/request.py
"""Per-request holder for the raw DataTables input."""

import re
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterable, Optional, Tuple

# `columns[0][data]` -> ("columns", "[0][data]")
_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list:
    match = _KEY_PATTERN.match(key)
    if not match:
        return [key]
    head, rest = match.groups()
    return [head] + _SEGMENT_PATTERN.findall(rest)


def _assign(target: Dict[str, Any], segments: list, value: Any) -> None:
    node = target
    for position, segment in enumerate(segments):
        last = position == len(segments) - 1
        if segment == "":
            # `key[]` appends; stored under the next free numeric key
            segment = str(len(node))
        if last:
            node[segment] = value
            return
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child


def _listify(node: Any) -> Any:
    """
    Turn dicts keyed by the indices `0..n-1` into lists.

    Sparse indices (`columns[0]`, `columns[2]`) stay a dict, so positions
    keep pointing at the same entries.
    """
    if not isinstance(node, dict):
        return node
    converted = {key: _listify(value) for key, value in node.items()}
    if converted and set(converted) == {str(index) for index in range(len(converted))}:
        return [converted[str(index)] for index in range(len(converted))]
    return converted


class RequestContext:
    """
    Raw input of a single inbound request.

    The "is this a search request" flag is memoized here, so it lives exactly as
    long as the request does. Build a new context for every request, or call
    `reset()` before re-using one.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})
        self._is_search_request: Optional[bool] = None

    @classmethod
    def from_query_params(cls, items: Iterable[Tuple[str, Any]]) -> "RequestContext":
        """Build a context from flat `(key, value)` pairs using bracket notation."""
        nested: Dict[str, Any] = {}
        for key, value in items:
            _assign(nested, _split_key(key), value)
        return cls(_listify(nested))

    def input(self, key: str, default: Any = None) -> Any:
        """Look up a dot-separated path such as `search.value` or `order.0.dir`."""
        node: Any = self.data
        for segment in key.split("."):
            if isinstance(node, Mapping):
                if segment not in node:
                    return default
                node = node[segment]
            elif isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
                if not segment.isdigit() or int(segment) >= len(node):
                    return default
                node = node[int(segment)]
            else:
                return default
        return node

    @property
    def is_search_request(self) -> bool:
        if self._is_search_request is None:
            self._is_search_request = self.input("search.value") is not None
        return self._is_search_request

    def reset(self) -> None:
        self._is_search_request = None

    def __repr__(self) -> str:
        return f"RequestContext({self.data!r})"
