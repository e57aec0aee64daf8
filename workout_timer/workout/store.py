"""Saved workout drafts, persisted through a small key-value store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from loguru import logger


STORAGE_KEY_WORKOUTS = "workoutTexts"

DEFAULT_WORKOUT = """# My Workout
## Warm Up
Jumping Jacks | 30s
Rest | 10s

## Main Set
Push-ups | 45s // chest to floor
Rest | 30s
Squats | 1m | each side

## Cool Down
Stretching | 2m"""


def _default_storage_path() -> Path:
    return Path.home() / ".workout-timer" / "storage.json"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """All keys live in one JSON object on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _default_storage_path()

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=True, indent=2), encoding="utf-8")

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring unreadable storage file {}: {}", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}


class WorkoutStore:
    """Ordered workout texts plus the index of the one being edited."""

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend
        self.workouts, self.current_index = self._load()

    @property
    def current_text(self) -> str:
        return self.workouts[self.current_index]

    @property
    def total(self) -> int:
        return len(self.workouts)

    @property
    def position_label(self) -> str:
        return f"{self.current_index + 1}/{self.total}"

    @property
    def can_go_prev(self) -> bool:
        return self.current_index > 0

    @property
    def can_go_next(self) -> bool:
        return self.current_index < self.total - 1

    def save_current_text(self, text: str) -> None:
        self.workouts[self.current_index] = text
        self.persist()

    def switch_to(self, index: int) -> str:
        if not 0 <= index < self.total:
            raise IndexError(f"No workout at index {index}")
        self.current_index = index
        self.persist()
        return self.current_text

    def create(self) -> str:
        self.workouts.append("")
        self.current_index = self.total - 1
        self.persist()
        return self.current_text

    def delete_current(self) -> str:
        """Delete the current draft, or clear it when it is the only one."""
        if self.total <= 1:
            self.workouts[0] = ""
            self.current_index = 0
        else:
            del self.workouts[self.current_index]
            if self.current_index > 0:
                self.current_index -= 1
        self.persist()
        return self.current_text

    def persist(self) -> None:
        payload = {"workouts": self.workouts, "currentIndex": self.current_index}
        self._backend.set(STORAGE_KEY_WORKOUTS, json.dumps(payload, ensure_ascii=True))

    def _load(self) -> tuple[list[str], int]:
        raw = self._backend.get(STORAGE_KEY_WORKOUTS)
        if raw:
            try:
                payload = json.loads(raw)
            except json.JSONDecodeError as exc:
                logger.warning("Discarding unreadable workout store: {}", exc)
                payload = None
            if isinstance(payload, dict):
                workouts = payload.get("workouts")
                if (
                    isinstance(workouts, list)
                    and workouts
                    and all(isinstance(item, str) for item in workouts)
                ):
                    index = payload.get("currentIndex")
                    if not isinstance(index, int):
                        index = 0
                    return list(workouts), min(max(0, index), len(workouts) - 1)
        return [DEFAULT_WORKOUT], 0
