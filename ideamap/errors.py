"""Error kinds raised by the ideamap engine."""


class IdeamapError(Exception):
    """Base class for engine errors.

    Raised only before any mutation has happened, so catching one never
    leaves the tree or the history half-updated.
    """
    kind = "Error"


class NotFoundError(IdeamapError):
    """A referenced node id does not resolve against the current tree."""
    kind = "NotFound"


class InvalidOperationError(IdeamapError):
    """A structurally disallowed action (root delete, self-reference)."""
    kind = "InvalidOperation"


class InvalidArgumentError(IdeamapError):
    """A malformed input value, e.g. a bad font size or load payload."""
    kind = "InvalidArgument"
