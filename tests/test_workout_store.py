from __future__ import annotations

import json
from pathlib import Path

import pytest

from workout_timer.workout.store import (
    DEFAULT_WORKOUT,
    STORAGE_KEY_WORKOUTS,
    JsonFileStore,
    MemoryStore,
    WorkoutStore,
)


def _stored(backend: MemoryStore) -> dict[str, object]:
    return json.loads(backend.data[STORAGE_KEY_WORKOUTS])


def test_empty_storage_starts_with_default_workout() -> None:
    store = WorkoutStore(MemoryStore())

    assert store.workouts == [DEFAULT_WORKOUT]
    assert store.position_label == "1/1"
    assert not store.can_go_prev
    assert not store.can_go_next


def test_create_switch_and_persist() -> None:
    backend = MemoryStore()
    store = WorkoutStore(backend)

    assert store.create() == ""
    store.save_current_text("Plank | 30s")
    assert store.position_label == "2/2"
    assert _stored(backend) == {
        "workouts": [DEFAULT_WORKOUT, "Plank | 30s"],
        "currentIndex": 1,
    }

    assert store.switch_to(0) == DEFAULT_WORKOUT
    assert store.can_go_next
    with pytest.raises(IndexError):
        store.switch_to(5)


def test_delete_only_workout_clears_it() -> None:
    store = WorkoutStore(MemoryStore())

    assert store.delete_current() == ""
    assert store.workouts == [""]


def test_delete_moves_to_previous_draft() -> None:
    backend = MemoryStore(
        {STORAGE_KEY_WORKOUTS: json.dumps({"workouts": ["a", "b", "c"], "currentIndex": 1})}
    )
    store = WorkoutStore(backend)

    assert store.delete_current() == "a"
    assert store.workouts == ["a", "c"]
    assert store.current_index == 0

    assert store.delete_current() == "c"
    assert store.workouts == ["c"]
    assert _stored(backend)["currentIndex"] == 0


def test_load_clamps_index_and_ignores_garbage() -> None:
    clamped = WorkoutStore(
        MemoryStore({STORAGE_KEY_WORKOUTS: json.dumps({"workouts": ["a", "b"], "currentIndex": 9})})
    )
    broken = WorkoutStore(MemoryStore({STORAGE_KEY_WORKOUTS: "{not json"}))
    wrong_shape = WorkoutStore(MemoryStore({STORAGE_KEY_WORKOUTS: json.dumps({"workouts": [1]})}))

    assert clamped.current_index == 1
    assert broken.workouts == [DEFAULT_WORKOUT]
    assert wrong_shape.workouts == [DEFAULT_WORKOUT]


def test_json_file_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    store = WorkoutStore(JsonFileStore(path))
    store.create()
    store.save_current_text("Rest | 10s")

    reloaded = WorkoutStore(JsonFileStore(path))

    assert reloaded.workouts == [DEFAULT_WORKOUT, "Rest | 10s"]
    assert reloaded.current_index == 1


def test_json_file_store_tolerates_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("][", encoding="utf-8")

    backend = JsonFileStore(path)

    assert backend.get(STORAGE_KEY_WORKOUTS) is None
    backend.set("other", "value")
    assert backend.get("other") == "value"
