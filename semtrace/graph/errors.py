"""Graph query exceptions."""


class NodeNotFoundError(LookupError):
    """Raised when a lineage query names a node that is not in the graph."""

    def __init__(self, message: str, name: str | None = None):
        self.name = name
        super().__init__(message)
