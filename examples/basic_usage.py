"""examples/basic_usage.py - sessionlog end-to-end demo.

Walks through one session: enable logging, record a few entries, look at
them, print the statistics and the bug report, then flush to stderr.

Run:
    python examples/basic_usage.py
"""

from sessionlog import SessionLog, StreamBlobWriter, SystemHost

# ---------------------------------------------------------------------------
# Setup: one SessionLog per process, flushes printed to stderr
# ---------------------------------------------------------------------------
log = SessionLog(
    max_entries=200,
    host=SystemHost(addon_version="0.4.1"),
    writer=StreamBlobWriter(),
)


def run_session() -> None:
    log.set_enabled(True)
    log.start_session()

    log.log_info("Loot", "Roll started", {"item": "Sword of Ages", "ilvl": 639})
    log.log_debug("Loot", "Roll received", {"player": "Ana", "value": 87})
    log.log_debug("Loot", "Roll received", {"player": "Bo", "value": 87})
    log.log_warn("Loot", "Roll tie", {"players": ["Ana", "Bo"], "value": 87})
    log.log_error("Sync", "Peer timed out", {"peer": "Cy", "after_s": 30})

    print("--- display_logs(count=3) ---")
    for line in log.display_logs(count=3):
        print(line)

    print()
    print("--- errors only ---")
    for entry in log.get_session_logs(level="error"):
        print(entry.category, entry.message, entry.data)

    stats = log.get_stats()
    print()
    print(
        f"{stats['total_entries']} entries, "
        f"{stats['estimated_memory_formatted']}, "
        f"{stats['buffer_utilization']:.1%} of buffer"
    )

    print()
    print(log.export_report())

    ok, message = log.flush()
    print(f"flush: ok={ok} ({message})")


if __name__ == "__main__":
    run_session()
