"""Request context handed to source factories and computed accessors.

The engines never touch the web framework directly. Whatever serves the
request wraps its query parameters and URL builder in a RequestContext,
which computed columns, tree accessors and scope factories receive as an
explicit argument.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

UrlBuilder = Callable[[str, Optional[Any]], str]


def _relative_url(endpoint: str, id: Optional[Any] = None) -> str:
    url = f"/{endpoint}"
    if id is not None:
        url += f"?id={id}"
    return url


@dataclass(frozen=True)
class RequestContext:
    """Per-request view of the inbound call.

    Attributes:
        params: Query parameters (sort, dir, start, limit, node, ...)
        url_for: Builds the URL of a named endpoint, optionally with an id
        request: The framework request object, when there is one
        state: Free-form values for accessors (current user, tenant, ...)
    """

    params: Mapping[str, Any] = field(default_factory=dict)
    url_for: UrlBuilder = _relative_url
    request: Any = None
    state: Mapping[str, Any] = field(default_factory=dict)

    def param(self, name: str, default: Any = None) -> Any:
        """Get a request parameter, treating empty strings as absent."""
        value = self.params.get(name)
        if value is None or value == "":
            return default
        return value
