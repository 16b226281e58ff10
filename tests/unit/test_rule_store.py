"""Unit tests for rule record storage."""

import json
import threading
import time

import pytest

from docx_format_checker.exceptions import SchemaError
from docx_format_checker.rules import ReadWriteLock, RuleStore


class TestRuleStore:
    """Tests for RuleStore."""

    def test_missing_file_reads_none(self, tmp_path):
        store = RuleStore(tmp_path / "rules.json")

        assert store.read() is None

    def test_write_then_read(self, tmp_path):
        store = RuleStore(tmp_path / "nested" / "rules.json")
        record = {"bodyFont": "Times New Roman", "language": "ru"}

        store.write(record)

        assert store.read() == record
        assert json.loads(store.path.read_text(encoding="utf-8")) == record

    def test_write_replaces_previous_record(self, tmp_path):
        store = RuleStore(tmp_path / "rules.json")
        store.write({"bodyFont": "Arial"})

        store.write({"bodyFontSize": 12})

        assert store.read() == {"bodyFontSize": 12}
        assert [p.name for p in tmp_path.iterdir()] == ["rules.json"]

    def test_empty_file_reads_none(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("", encoding="utf-8")

        assert RuleStore(path).read() is None

    def test_empty_object_reads_none(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{}", encoding="utf-8")

        assert RuleStore(path).read() is None

    @pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
    def test_invalid_content(self, tmp_path, content):
        path = tmp_path / "rules.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(SchemaError):
            RuleStore(path).read()


class TestReadWriteLock:
    """Tests for ReadWriteLock."""

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = []

        def read():
            with lock.read_locked():
                inside.append(True)

        with lock.read_locked():
            thread = threading.Thread(target=read)
            thread.start()
            thread.join(timeout=1)
            assert inside == [True]

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        events = []

        def write():
            with lock.write_locked():
                events.append("write")

        with lock.read_locked():
            thread = threading.Thread(target=write)
            thread.start()
            time.sleep(0.05)
            events.append("read done")

        thread.join(timeout=1)
        assert events == ["read done", "write"]
