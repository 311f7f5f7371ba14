"""
JSON File Store
===============

Keeps an ordered list of records (projects, case studies, subscribers) in a
single JSON file per entity type.

- Missing file reads as an empty list.
- Invalid JSON, or anything other than a top-level list, raises StoreError.
- Writes go to a temp file in the same directory and are swapped in with
  os.replace, so readers never see a half-written file.
- transaction() holds an exclusive flock on a sidecar .lock file for the whole
  read-modify-write cycle.
"""

import fcntl
import json
import logging
import os
import stat
import tempfile
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Backing file could not be read, parsed or written."""


class JSONStore:
    """File-backed list of dict records."""

    def __init__(self, path):
        self.path = path
        self.lock_path = f"{path}.lock"

    def __repr__(self):
        return f"JSONStore({self.path!r})"

    def _ensure_dir(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def read_entities(self):
        """Parse the backing file into a list of records."""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {self.path}: {e}")
            raise StoreError(f"Could not parse {os.path.basename(self.path)}") from e
        except OSError as e:
            logger.error(f"Error reading {self.path}: {e}")
            raise StoreError(f"Could not read {os.path.basename(self.path)}") from e

        if not isinstance(data, list):
            raise StoreError(f"{os.path.basename(self.path)} does not contain a list")
        if not all(isinstance(record, dict) for record in data):
            raise StoreError(f"{os.path.basename(self.path)} contains non-object records")
        return data

    def write_entities(self, records):
        """Serialize the full list back to disk atomically."""
        self._ensure_dir()
        tmp_fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(self.path) or '.', suffix='.tmp')
        try:
            with os.fdopen(tmp_fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
                f.write('\n')
            if os.path.exists(self.path):
                os.chmod(tmp_path, stat.S_IMODE(os.stat(self.path).st_mode))
            else:
                os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f"Error writing {self.path}: {e}")
            raise StoreError(f"Could not write {os.path.basename(self.path)}") from e

    @contextmanager
    def _lock(self):
        self._ensure_dir()
        lock_fd = open(self.lock_path, 'w')
        try:
            fcntl.flock(lock_fd, fcntl.LOCK_EX)
            yield
        finally:
            fcntl.flock(lock_fd, fcntl.LOCK_UN)
            lock_fd.close()

    @contextmanager
    def transaction(self):
        """Locked read-modify-write.

        Yields the current record list; it is written back only if the block
        finishes without raising.
        """
        with self._lock():
            records = self.read_entities()
            yield records
            self.write_entities(records)
