"""context.py - Re-entrancy guard for operations that log about themselves.

Several SessionLog operations (stats, display, flush, export) record their
own invocation through the leveled logging gate. The gate has no recursion
protection of its own, so each of those operations wraps its self-logging
call in ``ReentrancyGuard.hold()``; a nested attempt for the same operation
on the same owner is skipped instead of recursing.

The set of active operations lives in a ``contextvars.ContextVar``, which
gives each thread and asyncio Task its own view without explicit locking,
and ``hold()`` restores the previous value on every exit path, including
exceptions.
"""

import contextvars
from contextlib import contextmanager
from typing import FrozenSet, Hashable, Iterator, Tuple

_active: contextvars.ContextVar[FrozenSet[Tuple[int, Hashable]]] = (
    contextvars.ContextVar("sessionlog_active_operations", default=frozenset())
)


class ReentrancyGuard:
    """Tracks which self-logging operations of one owner are in progress.

    Example:
        >>> guard = ReentrancyGuard()
        >>> with guard.hold("export") as acquired:
        ...     with guard.hold("export") as nested:
        ...         (acquired, nested)
        (True, False)
        >>> guard.is_active("export")
        False
    """

    __slots__ = ("_owner",)

    def __init__(self) -> None:
        self._owner = id(self)

    def is_active(self, operation: Hashable) -> bool:
        """Return True if ``operation`` is currently held in this context."""
        return (self._owner, operation) in _active.get()

    @contextmanager
    def hold(self, operation: Hashable) -> Iterator[bool]:
        """Mark ``operation`` as in progress for the duration of the block.

        Yields:
            True if the caller acquired the guard and should proceed, False if
            the operation was already in progress further up the stack.
        """
        key = (self._owner, operation)
        current = _active.get()
        if key in current:
            yield False
            return
        token = _active.set(current | {key})
        try:
            yield True
        finally:
            _active.reset(token)
