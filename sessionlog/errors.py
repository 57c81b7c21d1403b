"""errors.py - Error taxonomy for the session log engine.

Only argument validation ever raises. Serialization problems are downgraded
to a sentinel string inside ``serialize()`` and persistence problems are
reported as ``(False, message)`` results, so neither has an exception type
that escapes the package.
"""


class SessionLogError(Exception):
    """Base class for all errors raised by sessionlog."""


class InvalidArgument(SessionLogError, ValueError):
    """A caller passed an argument of the wrong type or an empty required string.

    Subclasses ``ValueError`` so generic callers that already guard against
    bad input keep working.
    """
