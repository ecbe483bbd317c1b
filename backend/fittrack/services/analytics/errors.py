"""
Analytics error kinds.

An empty history is not an error: computations return zero-filled
results for it. Unrecognized progress ranges are not an error either;
they fall back to the default range.
"""


class RetrievalError(Exception):
    """The event store was unreachable or a query against it failed."""
    
    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation
