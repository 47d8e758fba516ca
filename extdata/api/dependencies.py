"""FastAPI dependencies shared by the grid and tree routes."""

from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import Request

from extdata.context import RequestContext


def request_context(request: Request) -> RequestContext:
    """Wrap the inbound request for the engines."""

    def url_for(endpoint: str, id: Optional[Any] = None) -> str:
        url = str(request.url_for(endpoint))
        if id is not None:
            url += "?" + urlencode({"id": id})
        return url

    return RequestContext(
        params=dict(request.query_params),
        url_for=url_for,
        request=request,
    )
