from __future__ import annotations

import json

import pytest

from errors import LoadFailure, MissingData, SaveFailure
from storage import DEFAULT_STORAGE_KEY, FileStorage, MemoryStorage, Storage
from store import TaskStore


def _by_id(tasks):
    return sorted((t.to_dict() for t in tasks), key=lambda d: d["id"])


@pytest.fixture()
def populated(step_clock) -> TaskStore:
    store = TaskStore(clock=step_clock)
    for text in ("Buy milk", "a < b & c", "walk the dog"):
        store.add(store.create(text))
    store.toggle_completion(store.all_tasks()[0].id)
    return store


def test_save_then_load_round_trip(populated: TaskStore, backend: MemoryStorage, step_clock) -> None:
    storage = Storage(backend, clock=step_clock)
    storage.save(populated.all_tasks())
    assert _by_id(storage.load()) == _by_id(populated.all_tasks())


def test_round_trip_is_stable_across_repeated_loads(populated: TaskStore, backend: MemoryStorage) -> None:
    storage = Storage(backend)
    storage.save(populated.all_tasks())
    storage.save(storage.load())
    assert _by_id(storage.load()) == _by_id(populated.all_tasks())


def test_saved_layout_is_camel_case_array(populated: TaskStore, backend: MemoryStorage) -> None:
    Storage(backend).save(populated.all_tasks())
    data = json.loads(backend.items[DEFAULT_STORAGE_KEY])
    assert isinstance(data, list)
    assert set(data[0]) == {"id", "text", "completed", "createdAt", "updatedAt"}


def test_missing_slot_signals_missing_data(backend: MemoryStorage, tmp_path) -> None:
    with pytest.raises(MissingData):
        Storage(backend).load()
    with pytest.raises(LoadFailure):
        Storage(FileStorage(tmp_path), key="never_written").load()


@pytest.mark.parametrize("raw", ["{not json", '{"id": 1}', '"text"', "42"])
def test_corrupt_slot_raises_load_failure(raw: str) -> None:
    storage = Storage(MemoryStorage({DEFAULT_STORAGE_KEY: raw}))
    with pytest.raises(LoadFailure):
        storage.load()


def test_partial_records_are_rebuilt(step_clock) -> None:
    raw = json.dumps([{"text": "only text"}, {"id": "abc"}, 7, {"id": "x", "completed": 1}])
    storage = Storage(MemoryStorage({DEFAULT_STORAGE_KEY: raw}), clock=step_clock)
    tasks = storage.load()
    assert len(tasks) == 3
    first, second, third = tasks
    assert first.id and first.text == "only text" and first.completed is False
    assert first.created_at and first.updated_at
    assert second.id == "abc" and second.text == ""
    assert third.completed is True


def test_loaded_markup_is_neutralized() -> None:
    raw = json.dumps([{"id": "1", "text": "<script>x</script>"}])
    task = Storage(MemoryStorage({DEFAULT_STORAGE_KEY: raw})).load()[0]
    assert "<" not in task.text


def test_quota_exceeded_raises_save_failure(populated: TaskStore) -> None:
    backend = MemoryStorage({DEFAULT_STORAGE_KEY: "[]"}, quota_bytes=10)
    with pytest.raises(SaveFailure):
        Storage(backend).save(populated.all_tasks())
    assert backend.items[DEFAULT_STORAGE_KEY] == "[]"


def test_file_storage_round_trip(tmp_path, populated: TaskStore) -> None:
    backend = FileStorage(tmp_path / "data")
    storage = Storage(backend, key="tasks")
    storage.save(populated.all_tasks())
    assert (tmp_path / "data" / "tasks.json").exists()
    assert _by_id(Storage(FileStorage(tmp_path / "data"), key="tasks").load()) == _by_id(populated.all_tasks())


def test_file_storage_missing_file(tmp_path) -> None:
    assert FileStorage(tmp_path).get_item("nothing") is None
