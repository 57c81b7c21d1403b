"""exporter.py - Pluggable persistence targets for flushed session logs.

The engine never writes anything durable itself. ``SessionLog.flush()``
builds a payload and hands it to a BlobWriter under a name; the writer
decides where it goes and reports back whether that worked.

    MemoryBlobWriter  - keeps payloads in a dict (default; also handy in tests).
    StreamBlobWriter  - prints the formatted lines to a stream (default: stderr).
    FileBlobWriter    - writes each payload as JSON to ``<directory>/<name>.json``.

Payload shape::

    {
        "session_start": 1705322096,
        "last_flush": 1705322161,
        "version_info": {"build": "...", "version": "...", "addon_version": "..."},
        "log_count": 2,
        "logs": ["[2024-01-15 12:34:56] +0s INFO/Session: ...", ...],
    }

Typical usage::

    from sessionlog import SessionLog
    from sessionlog.exporter import FileBlobWriter

    log = SessionLog(writer=FileBlobWriter("/var/lib/myapp/logs"))
"""

import contextlib
import json
import os
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

WriteResult = Tuple[bool, Optional[str]]


class BlobWriter(ABC):
    """Abstract base class for every flush destination.

    Subclasses implement ``write()`` and must report failure through the
    return value rather than by raising. The engine still treats a raised
    exception as a failed write, but a well-behaved writer should not need
    that.

    Example:
        >>> class ListWriter(BlobWriter):
        ...     def __init__(self):
        ...         self.seen = []
        ...     def write(self, name, payload):
        ...         self.seen.append((name, payload))
        ...         return True, None
    """

    @abstractmethod
    def write(self, name: str, payload: Dict[str, Any]) -> WriteResult:
        """Persist ``payload`` under ``name``, replacing any previous blob.

        Returns:
            ``(True, None)`` on success, ``(False, description)`` otherwise.
        """


class MemoryBlobWriter(BlobWriter):
    """Keep the most recent payload per name in memory.

    Attributes:
        blobs: Mapping of blob name to the last payload written under it.
    """

    def __init__(self) -> None:
        self.blobs: Dict[str, Dict[str, Any]] = {}

    def write(self, name: str, payload: Dict[str, Any]) -> WriteResult:
        self.blobs[name] = payload
        return True, None


class StreamBlobWriter(BlobWriter):
    """Print flushed log lines to a writable stream.

    Output format::

        === [sessionlog] session_log (2 entries) ===
        [2024-01-15 12:34:56] +0s INFO/Session: New session started | Data: {...}
        [2024-01-15 12:35:01] +5s WARN/Net: Retrying request
        === END ===
    """

    def __init__(self, stream=None) -> None:
        """Initialise the stream writer.

        Args:
            stream: A writable file-like object. Defaults to ``sys.stderr``.
        """
        self._stream = stream or sys.stderr

    def write(self, name: str, payload: Dict[str, Any]) -> WriteResult:
        stream = self._stream
        try:
            print(
                f"\n=== [sessionlog] {name} ({payload['log_count']} entries) ===",
                file=stream,
            )
            for line in payload["logs"]:
                print(line, file=stream)
            print("=== END ===\n", file=stream)
        except (OSError, ValueError) as exc:
            return False, str(exc)
        return True, None


class FileBlobWriter(BlobWriter):
    """Write each payload as a JSON document in a directory.

    The directory is created on first write. A blob is written to a temporary
    sibling first and then moved into place, so a failed write never leaves a
    half-written file behind.

    Attributes:
        _directory (str): Directory that holds the blob files.
        _encoding (str): File encoding. Defaults to ``"utf-8"``.
    """

    def __init__(self, directory: str, encoding: str = "utf-8") -> None:
        self._directory = directory
        self._encoding = encoding

    def path_for(self, name: str) -> str:
        """Return the file path a blob called ``name`` is written to."""
        return os.path.join(self._directory, f"{name}.json")

    def write(self, name: str, payload: Dict[str, Any]) -> WriteResult:
        path = self.path_for(name)
        tmp_path = path + ".tmp"
        try:
            os.makedirs(self._directory, exist_ok=True)
            with open(tmp_path, "w", encoding=self._encoding) as f:
                json.dump(payload, f, ensure_ascii=False, indent=2, default=str)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as exc:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
            return False, f"{type(exc).__name__}: {exc}"
        return True, None
