from __future__ import annotations

from datetime import datetime, timezone

import pytest

from errors import InvalidInput
from models import parse_timestamp
from store import TaskStore


@pytest.fixture()
def store(step_clock) -> TaskStore:
    return TaskStore(clock=step_clock)


def _add(store: TaskStore, text: str):
    task = store.create(text)
    store.add(task)
    return task


def test_create_builds_fresh_task(store: TaskStore) -> None:
    task = store.create("  Buy <milk>  ")
    assert task.text == "Buy &lt;milk&gt;"
    assert task.completed is False
    assert task.created_at == task.updated_at
    assert store.count() == 0
    store.add(task)
    assert store.get(task.id) is task


def test_create_ids_are_unique(store: TaskStore) -> None:
    ids = {store.create(f"task {i}").id for i in range(50)}
    assert len(ids) == 50


def test_create_rejects_invalid_text(store: TaskStore) -> None:
    with pytest.raises(InvalidInput):
        store.create("   ")
    with pytest.raises(InvalidInput):
        store.create("x" * 501)


def test_add_existing_id_is_programmer_error(store: TaskStore) -> None:
    task = _add(store, "once")
    with pytest.raises(ValueError):
        store.add(task)


def test_toggle_is_its_own_inverse_and_advances_updated_at() -> None:
    frozen = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    store = TaskStore(clock=lambda: frozen)
    task = _add(store, "water plants")
    stamps = [parse_timestamp(task.updated_at)]
    store.toggle_completion(task.id)
    assert task.completed is True
    stamps.append(parse_timestamp(task.updated_at))
    store.toggle_completion(task.id)
    assert task.completed is False
    stamps.append(parse_timestamp(task.updated_at))
    assert stamps[0] < stamps[1] < stamps[2]
    assert task.created_at != task.updated_at


def test_toggle_unknown_id_is_noop(store: TaskStore) -> None:
    _add(store, "a")
    assert store.toggle_completion("missing") is None
    assert store.completed_count() == 0


def test_remove_selected_clears_selection(store: TaskStore) -> None:
    task = _add(store, "a")
    store.select(task.id)
    store.remove(task.id)
    assert store.selected_id is None


def test_remove_other_keeps_selection(store: TaskStore) -> None:
    keep = _add(store, "keep")
    drop = _add(store, "drop")
    store.select(keep.id)
    store.remove(drop.id)
    assert store.selected_id == keep.id
    assert store.remove("missing") is None


def test_update_replaces_text_and_refreshes_timestamp(store: TaskStore) -> None:
    task = _add(store, "old")
    before = task.updated_at
    store.update(task.id, " new & shiny ")
    assert task.text == "new &amp; shiny"
    assert parse_timestamp(task.updated_at) > parse_timestamp(before)
    assert task.created_at != task.updated_at


def test_update_invalid_leaves_task_alone(store: TaskStore) -> None:
    task = _add(store, "keep me")
    stamp = task.updated_at
    with pytest.raises(InvalidInput):
        store.update(task.id, "")
    assert task.text == "keep me"
    assert task.updated_at == stamp


def test_update_unknown_id_is_noop(store: TaskStore) -> None:
    assert store.update("missing", "text") is None


def test_is_duplicate_ignores_case_whitespace_and_excluded_id(store: TaskStore) -> None:
    task = _add(store, "Buy milk")
    assert store.is_duplicate("  buy MILK ")
    assert not store.is_duplicate("buy milk", exclude_id=task.id)
    assert not store.is_duplicate("buy bread")


def test_is_duplicate_compares_sanitized_text(store: TaskStore) -> None:
    _add(store, "Tom & Jerry")
    assert store.is_duplicate("tom & jerry")


def test_counts_and_clear(store: TaskStore) -> None:
    a = _add(store, "a")
    _add(store, "b")
    store.toggle_completion(a.id)
    store.select(a.id)
    assert (store.count(), store.completed_count()) == (2, 1)
    store.clear()
    assert store.count() == 0
    assert store.selected_id is None


def test_select_requires_existing_task(store: TaskStore) -> None:
    assert store.select("missing") is False
    assert store.selected_id is None
