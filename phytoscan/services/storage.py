"""
Key-value persistence for string blobs.

The history log is stored as one named JSON blob. Backends implement the
KeyValueStore interface so the history code never depends on where the blob
lives (a directory of files, a SQL table or process memory).
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from phytoscan.config import settings
from phytoscan.models.kv_entry import KVEntry

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """
    Abstract string blob storage.

    Implementations raise StorageError for any backend failure so callers
    can degrade without knowing backend-specific exception types.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored blob, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the blob for key in a single step."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Removing an absent key is not an error."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """Process-local storage, lost on exit."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileKeyValueStore(KeyValueStore):
    """One file per key inside a directory."""

    def __init__(self, directory: str = ".phytoscan"):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write a sibling temp file then swap it in, so readers see
            # either the old blob or the new one
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {path}") from e

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not remove {path}") from e


class SqlKeyValueStore(KeyValueStore):
    """Rows in the kv_entries table, one transaction per call."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            entry = db.get(KVEntry, key)
            return entry.value if entry else None
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read key {key}") from e
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            entry = db.get(KVEntry, key)
            if entry:
                entry.value = value
            else:
                db.add(KVEntry(key=key, value=value))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Could not write key {key}") from e
        finally:
            db.close()

    def remove(self, key: str) -> None:
        db = self.session_factory()
        try:
            db.query(KVEntry).filter(KVEntry.key == key).delete()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Could not remove key {key}") from e
        finally:
            db.close()


def create_store(backend: Optional[str] = None) -> KeyValueStore:
    """
    Build the configured storage backend.

    Args:
        backend: "file", "sql" or "memory" (defaults to settings.storage_backend)

    Raises:
        ValueError: unknown backend name
    """
    backend = backend or settings.storage_backend
    logger.info("Using %s storage backend", backend)

    if backend == "memory":
        return MemoryKeyValueStore()
    if backend == "file":
        return FileKeyValueStore(settings.storage_dir)
    if backend == "sql":
        from phytoscan.database import Base, SessionLocal, engine

        Base.metadata.create_all(engine)
        return SqlKeyValueStore(SessionLocal)

    raise ValueError(f"Unknown storage backend: {backend}")


class StorageError(Exception):
    """Backend could not read, write or remove a blob."""

    pass
