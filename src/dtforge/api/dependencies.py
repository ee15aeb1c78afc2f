# src/dtforge/api/dependencies.py
from fastapi import Request
from rich.markup import escape

from dtforge.core.logging import color_palette, log
from dtforge.core.request import RequestContext


async def get_request_context(request: Request) -> RequestContext:
    """
    Build a fresh `RequestContext` for the current request.

    GET requests are read from the query string. POST requests are read from
    the JSON body when sent as `application/json`, otherwise from the form.
    A body that is not valid JSON is treated as an empty request.
    """
    if request.method == "POST":
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            try:
                body = await request.json()
            except ValueError as exc:
                path = color_palette["query"](request.url.path)
                log.warn(f"Ignoring malformed JSON body on {path}: {escape(str(exc))}")
                return RequestContext()
            return RequestContext(body if isinstance(body, dict) else {})
        form = await request.form()
        return RequestContext.from_query_params(form.multi_items())

    return RequestContext.from_query_params(request.query_params.multi_items())
