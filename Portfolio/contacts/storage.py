"""
Persistence for contact records.

Two backends share the ``append(record) -> stored id`` contract:

- ``JsonFileStorage`` keeps every record in a single JSON array on disk and
  rewrites the whole file on each submission.
- ``DatabaseStorage`` inserts one ``ContactSubmission`` row per record; the
  database assigns the id and the timestamp.

Both raise ``StorageError`` on failure and never retry.
"""
import json
import logging
import os
import stat
import tempfile
import threading
from pathlib import Path

from django.db import DatabaseError

from .exceptions import StorageError
from .models import ContactSubmission

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Append-only JSON array on the local filesystem.

    With ``lock=True`` the read-modify-write cycle is serialised inside this
    process. Separate processes writing the same file can still lose updates.
    """

    def __init__(self, path, lock=True):
        self.path = Path(path)
        self._lock = threading.Lock() if lock else None

    def append(self, record):
        if self._lock is None:
            return self._append(record)
        with self._lock:
            return self._append(record)

    def _append(self, record):
        records = self.load()
        record_id = self._next_id(records, record)
        records.append(record.with_id(record_id).to_json())
        self._dump(records)
        logger.debug("Wrote %d contact records to %s", len(records), self.path)
        return record_id

    def load(self):
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StorageError(f"{self.path} does not hold a JSON array")
        return data

    def _dump(self, records):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".contacts-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(records, fh, ensure_ascii=False, indent=2)
                os.chmod(tmp_name, self._file_mode())
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def _file_mode(self):
        # mkstemp creates 0600; keep the existing mode or use the umask default
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    @staticmethod
    def _next_id(records, record):
        # millisecond timestamp, bumped past the last stored id
        candidate = int(record.received_at.timestamp() * 1000)
        if records:
            last = records[-1].get("id")
            if isinstance(last, int) and candidate <= last:
                candidate = last + 1
        return candidate


class DatabaseStorage:
    """One insert per record into the ``ContactSubmission`` table."""

    def append(self, record):
        try:
            submission = ContactSubmission.objects.create(
                name=record.name,
                email=record.email,
                message=record.message,
            )
        except DatabaseError as e:
            raise StorageError(f"Could not insert contact submission: {e}") from e
        return submission.pk
