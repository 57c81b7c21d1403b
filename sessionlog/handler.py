"""handler.py - Feed standard ``logging`` records into a SessionLog.

SessionLogHandler lets an application keep its existing ``logging`` calls
and still get a bounded, queryable session log:

    import logging
    from sessionlog import SessionLog, SessionLogHandler

    session = SessionLog(settings={"enabled": True})
    session.start_session()
    logging.getLogger().addHandler(SessionLogHandler(session))

    log = logging.getLogger("myapp.loot")
    log.warning("Roll tie", extra={"data": {"players": ["Ana", "Bo"]}})

Mapping rules:
    - ``record.levelno`` -> DEBUG / INFO / WARN / ERROR (CRITICAL maps to ERROR).
    - ``record.name`` -> category.
    - ``record.getMessage()`` -> message.
    - ``record.data`` (set through ``extra={"data": ...}``) -> data.

Records produced by the sessionlog package itself are skipped, so engine
diagnostics about a failing flush can never loop back into the store.
"""

import logging

from .buffer import DEBUG, ERROR, INFO, WARN
from .session import SessionLog

_PACKAGE_LOGGER = __name__.rpartition(".")[0]


def level_for(levelno: int) -> str:
    """Map a ``logging`` level number onto one of the session log levels."""
    if levelno >= logging.ERROR:
        return ERROR
    if levelno >= logging.WARNING:
        return WARN
    if levelno >= logging.INFO:
        return INFO
    return DEBUG


class SessionLogHandler(logging.Handler):
    """A logging.Handler that records every accepted record in a SessionLog.

    Thread-safety:
        ``logging.Handler`` already serialises ``emit()`` with its own lock,
        and SessionLog guards its store with an RLock, so records arriving
        from several threads are appended in the order they are emitted.

    Example:
        >>> import logging
        >>> session = SessionLog(settings={"enabled": True})
        >>> logging.getLogger("demo").addHandler(SessionLogHandler(session))
        >>> logging.getLogger("demo").error("boom")
        >>> session.get_session_logs()[0].category
        'demo'
    """

    def __init__(self, session: SessionLog, level: int = logging.NOTSET) -> None:
        """Initialise the handler.

        Args:
            session: The SessionLog that receives the records.
            level: Minimum ``logging`` level passed through. Defaults to NOTSET.
        """
        super().__init__(level)
        self._session = session

    def emit(self, record: logging.LogRecord) -> None:
        """Append ``record`` to the session log.

        Any failure is delegated to ``handleError`` so that a problem in the
        session log never silences the application's own logging.
        """
        if record.name == _PACKAGE_LOGGER or record.name.startswith(_PACKAGE_LOGGER + "."):
            return
        try:
            self._session.log(
                level_for(record.levelno),
                record.name or "root",
                record.getMessage() or "(empty message)",
                getattr(record, "data", None),
            )
        except Exception:
            self.handleError(record)
