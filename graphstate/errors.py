"""
=============================================================================
Error Taxonomy
=============================================================================

All errors are raised synchronously to the immediate caller (the executor).
Nothing in this package retries internally or swallows an error.

Failures raised by a node's compute function are NOT wrapped: the original
exception propagates to the caller and no cache entry is stored.
=============================================================================
"""


class GraphStateError(Exception):
    """Base class for errors raised by graphstate."""


class UnknownChannelError(GraphStateError, KeyError):
    """A partial update referenced a channel the schema does not define."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Unknown channel(s) in update: {', '.join(names)}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class MissingValueError(GraphStateError, KeyError):
    """Read of a channel that has no default and was never written."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Channel '{name}' has no value (no default and never written)")

    def __str__(self) -> str:
        return self.args[0]


class SchemaConflictError(GraphStateError, ValueError):
    """Incompatible channel definitions on schema construction or strict union."""
