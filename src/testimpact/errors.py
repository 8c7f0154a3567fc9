class GraphInvariantError(AssertionError):
    """Raised when the dependency graph's adjacency maps stop being mutual inverses.

    This always indicates a defect in the code mutating the graph, never bad input.
    """


class GraphStoreError(ValueError):
    """Raised when a persisted graph document cannot be restored."""


class ChangeDetectionError(RuntimeError):
    """Raised when changed files cannot be determined from version control."""
