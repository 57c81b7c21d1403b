"""test_exporter.py - Unit tests for the BlobWriter implementations.

Covers:
    - MemoryBlobWriter keeps the latest payload per name
    - StreamBlobWriter prints header, lines and footer; reports stream errors
    - FileBlobWriter writes JSON, creates directories, leaves no temp file,
      and reports OS errors as (False, description)
    - SessionLog.flush() end-to-end through FileBlobWriter
"""

import io
import json
import os

from sessionlog.exporter import FileBlobWriter, MemoryBlobWriter, StreamBlobWriter


def _payload(lines=("line one", "line two")):
    return {
        "session_start": 100,
        "last_flush": 160,
        "version_info": {"build": "1", "version": "2", "addon_version": None},
        "log_count": len(lines),
        "logs": list(lines),
    }


# ---------------------------------------------------------------------------
# MemoryBlobWriter
# ---------------------------------------------------------------------------


class TestMemoryBlobWriter:
    def test_memory_writer_replaces_previous_blob(self):
        writer = MemoryBlobWriter()
        first, second = _payload(["a"]), _payload(["b"])

        assert writer.write("log", first) == (True, None)
        writer.write("log", second)

        assert writer.blobs == {"log": second}


# ---------------------------------------------------------------------------
# StreamBlobWriter
# ---------------------------------------------------------------------------


class TestStreamBlobWriter:
    def test_stream_writer_prints_block(self):
        stream = io.StringIO()
        assert StreamBlobWriter(stream).write("session_log", _payload()) == (True, None)

        output = stream.getvalue()
        assert "=== [sessionlog] session_log (2 entries) ===" in output
        assert "line one\nline two\n" in output
        assert output.rstrip().endswith("=== END ===")

    def test_stream_writer_reports_closed_stream(self):
        stream = io.StringIO()
        stream.close()
        ok, error = StreamBlobWriter(stream).write("session_log", _payload())
        assert ok is False
        assert error


# ---------------------------------------------------------------------------
# FileBlobWriter
# ---------------------------------------------------------------------------


class TestFileBlobWriter:
    def test_file_writer_writes_json(self, tmp_path):
        directory = tmp_path / "nested" / "logs"
        writer = FileBlobWriter(str(directory))
        payload = _payload()

        assert writer.write("session_log", payload) == (True, None)

        path = writer.path_for("session_log")
        assert path == os.path.join(str(directory), "session_log.json")
        with open(path, encoding="utf-8") as f:
            assert json.load(f) == payload
        assert not os.path.exists(path + ".tmp")

    def test_file_writer_overwrites(self, tmp_path):
        writer = FileBlobWriter(str(tmp_path))
        writer.write("log", _payload(["old"]))
        writer.write("log", _payload(["new"]))
        with open(writer.path_for("log"), encoding="utf-8") as f:
            assert json.load(f)["logs"] == ["new"]

    def test_file_writer_reports_os_error(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("occupied")

        ok, error = FileBlobWriter(str(blocker)).write("log", _payload())

        assert ok is False
        assert error.startswith("FileExistsError")

    def test_file_writer_removes_partial_file_on_failure(self, tmp_path):
        """A payload that fails halfway through encoding leaves no file behind."""
        writer = FileBlobWriter(str(tmp_path))

        ok, error = writer.write("log", {"log_count": 1, (1, 2): "bad key"})

        assert ok is False
        assert error.startswith("TypeError")
        assert os.listdir(tmp_path) == []

    def test_flush_through_file_writer(self, make_log, tmp_path):
        writer = FileBlobWriter(str(tmp_path))
        log = make_log(writer=writer)
        log.log_info("Core", "persist me", {"n": 1})

        assert log.flush()[0] is True

        with open(writer.path_for("session_log"), encoding="utf-8") as f:
            stored = json.load(f)
        assert stored["log_count"] == 1
        assert stored["logs"][0].endswith("INFO/Core: persist me | Data: {n=1}")
