"""
Unit tests for HistoryStore.

Tests the persisted diagnosis log:
- Newest-first ordering and the 50 entry bound
- Feedback attachment (overwrite, idempotence, unknown ids)
- Load/persist round trip and corrupt data handling
- Degrading to memory-only history on storage failure
"""
import json

import pytest

from phytoscan.models import DiseaseStage
from phytoscan.services.history_service import (
    HistoryStore,
    deserialize_history,
    serialize_history,
)
from phytoscan.services.storage import FileKeyValueStore, MemoryKeyValueStore
from tests.factories import create_feedback, create_history, create_history_item
from tests.fixtures.mocks import FailingKeyValueStore


class TestAppend:
    """Tests for appending entries."""

    def test_append_prepends(self, history_store):
        """Newest entry is first."""
        first = create_history_item(id="first")
        second = create_history_item(id="second")

        history_store.append(first)
        history_store.append(second)

        assert [item.id for item in history_store.items] == ["second", "first"]

    def test_append_persists_whole_log(self, history_store, storage):
        """Stored blob matches the in-memory log after every append."""
        for item in create_history(3):
            history_store.append(item)

        stored = deserialize_history(storage.get("test_history"))
        assert stored == list(history_store.items)

    @pytest.mark.parametrize("count", [1, 49, 50, 51, 120])
    def test_log_never_exceeds_bound(self, history_store, count):
        """Length is min(count, 50) and holds the most recent entries."""
        items = create_history(count)
        for item in items:
            history_store.append(item)

        expected = [item.id for item in reversed(items)][:50]
        assert len(history_store) == min(count, 50)
        assert [item.id for item in history_store.items] == expected

    def test_eviction_drops_oldest(self, history_store):
        """The 51st append evicts the very first entry only."""
        items = create_history(51)
        for item in items:
            history_store.append(item)

        ids = {item.id for item in history_store.items}
        assert "record-000" not in ids
        assert "record-001" in ids
        assert history_store.items[0].id == "record-050"

    def test_custom_bound(self, storage):
        store = HistoryStore(storage, key="small", max_entries=3)
        for item in create_history(5):
            store.append(item)

        assert [item.id for item in store.items] == [
            "record-004",
            "record-003",
            "record-002",
        ]

    def test_items_snapshot_is_replaced(self, history_store):
        """Each mutation produces a new snapshot object."""
        history_store.append(create_history_item())
        before = history_store.items

        history_store.append(create_history_item())

        assert history_store.items is not before
        assert len(before) == 1


class TestAttachFeedback:
    """Tests for attaching feedback to entries."""

    def test_attach_sets_feedback(self, history_store):
        item = create_history_item(id="target")
        history_store.append(item)
        feedback = create_feedback("target", is_correct=True)

        found = history_store.attach_feedback("target", feedback)

        assert found is True
        assert history_store.get("target").user_feedback == feedback

    def test_attach_overwrites_previous(self, history_store):
        history_store.append(create_history_item(id="target"))
        history_store.attach_feedback("target", create_feedback("target", True))
        correction = create_feedback(
            "target", is_correct=False, suggested_stage=DiseaseStage.EARLY
        )

        history_store.attach_feedback("target", correction)

        stored = history_store.get("target").user_feedback
        assert stored.is_correct is False
        assert stored.user_suggested_stage == DiseaseStage.EARLY

    def test_attach_is_idempotent(self, history_store, storage):
        """Applying the same feedback twice equals applying it once."""
        for item in create_history(4):
            history_store.append(item)
        feedback = create_feedback("record-002", is_correct=False)

        history_store.attach_feedback("record-002", feedback)
        once_items = history_store.items
        once_blob = storage.get("test_history")

        history_store.attach_feedback("record-002", feedback)

        assert history_store.items == once_items
        assert storage.get("test_history") == once_blob

    def test_attach_unknown_id_is_noop(self, history_store, storage):
        """Unknown id leaves the log and the stored blob byte-for-byte unchanged."""
        for item in create_history(3):
            history_store.append(item)
        before_items = history_store.items
        before_blob = storage.get("test_history")

        found = history_store.attach_feedback(
            "missing", create_feedback("missing", True)
        )

        assert found is False
        assert history_store.items is before_items
        assert storage.get("test_history") == before_blob

    def test_attach_unknown_id_does_not_write(self):
        storage = FailingKeyValueStore()
        store = HistoryStore(storage, key="h")
        store.append(create_history_item(id="a"))
        writes = storage.set_calls

        store.attach_feedback("b", create_feedback("b", True))

        assert storage.set_calls == writes

    def test_attach_keeps_other_entries(self, history_store):
        for item in create_history(3):
            history_store.append(item)

        history_store.attach_feedback(
            "record-001", create_feedback("record-001", True)
        )

        assert history_store.get("record-000").user_feedback is None
        assert history_store.get("record-002").user_feedback is None
        assert [item.id for item in history_store.items] == [
            "record-002",
            "record-001",
            "record-000",
        ]


class TestLoad:
    """Tests for loading persisted history."""

    def test_load_missing_key_is_empty(self, storage):
        store = HistoryStore(storage, key="absent")

        assert store.load() == ()

    def test_round_trip(self, storage):
        """Persist then load yields an equal log."""
        writer = HistoryStore(storage, key="h")
        items = create_history(10)
        items[3] = create_history_item(id=items[3].id, feedback_correct=False)
        for item in items:
            writer.append(item)
        writer.attach_feedback("record-007", create_feedback("record-007", True))

        reader = HistoryStore(storage, key="h")
        reader.load()

        assert reader.items == writer.items

    @pytest.mark.parametrize(
        "blob",
        [
            "not json",
            "{",
            '{"id": "x"}',
            '[{"id": "x"}]',
            '[{"id": "x", "timestamp": "t", "stage": "Z9", "diseaseName": "n", '
            '"confidence": 0.5, "severityScore": 10}]',
            "",
        ],
    )
    def test_malformed_blob_yields_empty(self, storage, blob, caplog):
        """Corrupt data is treated as no history and logged, never raised."""
        storage.set("h", blob)
        store = HistoryStore(storage, key="h")

        items = store.load()

        assert items == ()
        assert "Failed to load history" in caplog.text

    def test_load_replaces_existing_items(self, storage):
        store = HistoryStore(storage, key="h")
        store.append(create_history_item())
        storage.set("h", "garbage")

        store.load()

        assert len(store) == 0

    def test_load_truncates_oversized_log(self, storage):
        storage.set("h", serialize_history(create_history(60)))
        store = HistoryStore(storage, key="h", max_entries=50)

        store.load()

        assert len(store) == 50
        assert store.items[0].id == "record-000"

    def test_load_undecodable_file_yields_empty(self, tmp_path, caplog):
        """A history file that is not UTF-8 is treated as no history."""
        (tmp_path / "h.json").write_bytes(b"\xff\xfe[garbage\x80")
        store = HistoryStore(FileKeyValueStore(str(tmp_path)), key="h")

        assert store.load() == ()
        assert "Failed to read history" in caplog.text

    def test_load_storage_failure_yields_empty(self):
        store = HistoryStore(FailingKeyValueStore(fail_get=True), key="h")

        assert store.load() == ()

    def test_load_reads_camel_case_blob(self, storage):
        """Blobs written by earlier app versions use camelCase names."""
        blob = json.dumps(
            [
                {
                    "id": "abc",
                    "timestamp": "5/1/2026, 9:30:00 AM",
                    "stage": "S1",
                    "diseaseName": "Early Leaf Spot",
                    "confidence": 0.8,
                    "severityScore": 22,
                    "userFeedback": {
                        "id": "fb",
                        "analysisId": "abc",
                        "isCorrect": False,
                        "userSuggestedStage": "S2",
                        "timestamp": "2026-05-01T09:31:00.000Z",
                    },
                }
            ]
        )
        storage.set("h", blob)
        store = HistoryStore(storage, key="h")

        (item,) = store.load()

        assert item.stage == DiseaseStage.EARLY
        assert item.user_feedback.user_suggested_stage == DiseaseStage.SPREADING


class TestSerialization:
    def test_serialized_field_names(self):
        item = create_history_item(id="abc", feedback_correct=True)

        data = json.loads(serialize_history([item]))

        assert set(data[0]) == {
            "id",
            "timestamp",
            "stage",
            "diseaseName",
            "confidence",
            "severityScore",
            "userFeedback",
        }
        assert data[0]["userFeedback"]["isCorrect"] is True
        assert "userSuggestedStage" not in data[0]["userFeedback"]

    def test_absent_feedback_is_omitted(self):
        data = json.loads(serialize_history([create_history_item()]))

        assert "userFeedback" not in data[0]


class TestClear:
    def test_clear_empties_and_removes_key(self, history_store, storage):
        history_store.append(create_history_item())

        history_store.clear()

        assert len(history_store) == 0
        assert storage.get("test_history") is None

    def test_clear_survives_storage_failure(self):
        storage = FailingKeyValueStore(fail_remove=True)
        store = HistoryStore(storage, key="h")
        store.append(create_history_item())

        store.clear()

        assert len(store) == 0
        assert store.persistence_available is False


class TestPersistenceFailure:
    """Storage failures degrade to memory-only history."""

    def test_append_survives_write_failure(self, caplog):
        storage = FailingKeyValueStore(fail_set=True)
        store = HistoryStore(storage, key="h")

        store.append(create_history_item(id="a"))
        store.append(create_history_item(id="b"))

        assert [item.id for item in store.items] == ["b", "a"]
        assert store.persistence_available is False
        assert storage.get("h") is None
        assert caplog.text.count("Failed to persist history") == 1

    def test_attach_survives_write_failure(self):
        storage = FailingKeyValueStore()
        store = HistoryStore(storage, key="h")
        store.append(create_history_item(id="a"))
        storage.fail_set = True

        store.attach_feedback("a", create_feedback("a", True))

        assert store.get("a").user_feedback is not None
        # The stored blob still holds the last complete list
        assert deserialize_history(storage.get("h"))[0].user_feedback is None

    def test_persistence_recovers(self):
        storage = FailingKeyValueStore(fail_set=True)
        store = HistoryStore(storage, key="h")
        store.append(create_history_item(id="a"))
        storage.fail_set = False

        store.append(create_history_item(id="b"))

        assert store.persistence_available is True
        assert [i.id for i in deserialize_history(storage.get("h"))] == ["b", "a"]


def test_store_defaults_from_settings():
    store = HistoryStore(MemoryKeyValueStore())

    assert store.key == "phytoscan_analysis_history"
    assert store.max_entries == 50


def test_explicit_zero_bound_is_kept():
    store = HistoryStore(MemoryKeyValueStore(), key="", max_entries=0)

    store.append(create_history_item())

    assert store.key == ""
    assert store.max_entries == 0
    assert len(store) == 0
