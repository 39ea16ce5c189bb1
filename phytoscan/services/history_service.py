"""
Persisted, capacity-bounded history of diagnoses.

The log is newest-first and capped at settings.history_max_entries. Every
mutation builds a complete new list, writes it as one blob and only then
swaps it in, so the stored blob is always either the previous list or the
new one. Storage failures never reach the caller: history keeps working in
memory for the rest of the session.
"""

import logging
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from phytoscan.config import settings
from phytoscan.models.history import HistoryItem, UserFeedback
from phytoscan.services.storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

_history_adapter = TypeAdapter(list[HistoryItem])


def serialize_history(items) -> str:
    """JSON array of items with camelCase field names, absent fields omitted."""
    return _history_adapter.dump_json(
        list(items), by_alias=True, exclude_none=True, indent=2
    ).decode("utf-8")


def deserialize_history(blob: str) -> list[HistoryItem]:
    """
    Raises:
        ValidationError: blob is not JSON or does not match HistoryItem
    """
    return _history_adapter.validate_json(blob)


class HistoryStore:
    """Newest-first diagnosis log backed by a KeyValueStore."""

    def __init__(
        self,
        storage: KeyValueStore,
        key: Optional[str] = None,
        max_entries: Optional[int] = None,
    ):
        self.storage = storage
        self.key = settings.history_storage_key if key is None else key
        self.max_entries = (
            settings.history_max_entries if max_entries is None else max_entries
        )
        self.persistence_available = True
        self._items: tuple[HistoryItem, ...] = ()

    @property
    def items(self) -> tuple[HistoryItem, ...]:
        """Current log snapshot. A new tuple is created on every change."""
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, record_id: str) -> Optional[HistoryItem]:
        for item in self._items:
            if item.id == record_id:
                return item
        return None

    def load(self) -> tuple[HistoryItem, ...]:
        """
        Replace the in-memory log with the persisted one.

        Missing, unreadable or malformed data all yield an empty log.
        """
        try:
            blob = self.storage.get(self.key)
        except StorageError as e:
            logger.warning("Failed to read history, starting empty: %s", e)
            self._items = ()
            return self._items

        if blob is None:
            self._items = ()
            return self._items

        try:
            loaded = deserialize_history(blob)
        except ValidationError as e:
            logger.warning(
                "Failed to load history, starting empty (%d errors): %s",
                e.error_count(),
                e,
            )
            self._items = ()
            return self._items

        self._items = tuple(loaded[: self.max_entries])
        logger.info("Loaded %d history entries", len(self._items))
        return self._items

    def append(self, item: HistoryItem) -> None:
        """Prepend item and drop the oldest entries beyond max_entries."""
        updated = (item, *self._items)[: self.max_entries]
        self._commit(updated)

    def attach_feedback(self, record_id: str, feedback: UserFeedback) -> bool:
        """
        Set (or overwrite) the feedback on the entry with record_id.

        Returns:
            True if the entry was found. An unknown id changes nothing and
            writes nothing.
        """
        for index, item in enumerate(self._items):
            if item.id == record_id:
                break
        else:
            logger.debug("No history entry %s for feedback", record_id)
            return False

        updated = list(self._items)
        updated[index] = item.model_copy(update={"user_feedback": feedback})
        self._commit(tuple(updated))
        return True

    def clear(self) -> None:
        """Empty the log and delete the persisted blob."""
        self._items = ()
        try:
            self.storage.remove(self.key)
        except StorageError as e:
            self.persistence_available = False
            logger.warning("Failed to remove persisted history: %s", e)

    def _commit(self, updated: tuple[HistoryItem, ...]) -> None:
        try:
            self.storage.set(self.key, serialize_history(updated))
            self.persistence_available = True
        except StorageError as e:
            if self.persistence_available:
                logger.warning(
                    "Failed to persist history, keeping it in memory only: %s", e
                )
            self.persistence_available = False
        self._items = updated
