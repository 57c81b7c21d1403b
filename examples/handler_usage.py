"""examples/handler_usage.py - Capture stdlib logging into a SessionLog.

Existing ``logging`` calls keep working unchanged; attaching one
SessionLogHandler makes every record queryable for the current session.
Structured context goes through ``extra={"data": ...}``.

Run:
    python examples/handler_usage.py
"""

import logging
import threading

from sessionlog import SessionLog, SessionLogHandler

session = SessionLog(settings={"enabled": True})
session.start_session()

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
logging.getLogger().addHandler(SessionLogHandler(session))

logger = logging.getLogger("raid.sync")


def worker(peer: str) -> None:
    logger.debug("Handshake with %s", peer)
    logger.info("Synced", extra={"data": {"peer": peer, "entries": 12}})


if __name__ == "__main__":
    threads = [threading.Thread(target=worker, args=(p,)) for p in ("Ana", "Bo", "Cy")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    logger.error("Peer dropped", extra={"data": {"peer": "Cy"}})

    print()
    for line in session.display_logs(count=20):
        print(line)
    print("stats consistent:", session.verify_stats())
