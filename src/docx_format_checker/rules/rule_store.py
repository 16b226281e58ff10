"""Durable storage for the configured rule record.

The rule record is the only state shared between checking passes. Reads
and writes go through a reader-writer lock so a reader never observes a
half-written file, and writes replace the file atomically.
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from ..exceptions import SchemaError


logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Many concurrent readers or a single writer.

    Waiting writers block new readers, so a steady stream of reads cannot
    starve a write.
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()


class RuleStore:
    """
    JSON file holding the configured rule record.

    The store does not interpret the record; callers parse it with
    ``parse_rule_schema`` for every pass.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = ReadWriteLock()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[Dict[str, Any]]:
        """
        Read the stored rule record.

        Returns:
            The record, or None when no non-empty record is stored.

        Raises:
            SchemaError: If the stored file is not a JSON object.
        """
        with self._lock.read_locked():
            if not self._path.exists():
                return None
            text = self._path.read_text(encoding="utf-8")

        if not text.strip():
            return None
        try:
            record = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaError(
                message=f"Stored rule record is not valid JSON: {e.msg}",
                location=str(self._path),
            ) from None
        if not isinstance(record, dict):
            raise SchemaError(
                message="Stored rule record must be a JSON object",
                location=str(self._path),
            )
        return record or None

    def write(self, record: Dict[str, Any]) -> None:
        """Replace the stored rule record."""
        payload = json.dumps(record, indent=2, ensure_ascii=False)
        self._path.parent.mkdir(parents=True, exist_ok=True)

        with self._lock.write_locked():
            fd, temp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(temp_path, self._path)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise

        logger.info(f"Saved rule record to: {self._path}")
