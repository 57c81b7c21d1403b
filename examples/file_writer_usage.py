"""examples/file_writer_usage.py - Persist flushed logs as JSON files.

Run:
    python examples/file_writer_usage.py
    cat /tmp/sessionlog_demo/session_log.json
"""

from sessionlog import FileBlobWriter, SessionLog

LOG_DIR = "/tmp/sessionlog_demo"

if __name__ == "__main__":
    writer = FileBlobWriter(LOG_DIR)
    log = SessionLog(writer=writer, settings={"enabled": True})
    log.start_session()

    for n in range(5):
        log.log_info("Import", f"Batch {n} imported", {"batch": n, "rows": 250})
    log.log_warn("Import", "Slow batch", {"batch": 3, "ms": 1840})

    ok, message = log.flush()
    print(message if ok else f"flush failed: {message}")
    print(f"written to {writer.path_for('session_log')}")
