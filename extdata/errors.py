"""Errors raised by the grid and tree engines."""


class ConfigurationError(ValueError):
    """A grid or tree was declared with invalid options.

    Raised while the engine is being built, never while serving a request.
    """


class NodeIdError(ValueError):
    """A tree node id from the client could not be decoded."""

    def __init__(self, node_id: str, reason: str):
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"Malformed node id {node_id!r}: {reason}")
