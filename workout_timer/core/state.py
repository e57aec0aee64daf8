"""Mutable runtime record of a workout session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from workout_timer.workout.model import Step, WorkoutData


class Status(str, Enum):
    EDITING = "editing"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    DONE = "done"


def _empty_workout() -> WorkoutData:
    return WorkoutData(title=None, steps=())


@dataclass
class SessionState:
    status: Status = Status.EDITING
    workout_data: WorkoutData = field(default_factory=_empty_workout)
    step_index: int = 0
    step_duration: int = 0
    step_elapsed_ms: int = 0
    step_resumed_at: int = 0
    step_announced: bool = False
    step_entry_time: int = 0
    workout_start_time: int = 0
    total_paused_ms: int = 0
    pause_start_time: int = 0
    last_announced_second: int = -1
    finish_time: int = 0
    title_announced: bool = False

    @property
    def steps(self) -> tuple[Step, ...]:
        return self.workout_data.steps

    @property
    def current_step(self) -> Step | None:
        if 0 <= self.step_index < len(self.steps):
            return self.steps[self.step_index]
        return None

    def reset_timing(self) -> None:
        self.step_index = 0
        self.step_duration = 0
        self.step_elapsed_ms = 0
        self.step_resumed_at = 0
        self.step_announced = False
        self.step_entry_time = 0
        self.workout_start_time = 0
        self.total_paused_ms = 0
        self.pause_start_time = 0
        self.last_announced_second = -1
        self.finish_time = 0
        self.title_announced = False


def live_step_elapsed_ms(state: SessionState, now_ms: int) -> int:
    """Frozen accumulator plus live time since the last resume."""
    if state.step_resumed_at == 0:
        return state.step_elapsed_ms
    return state.step_elapsed_ms + (now_ms - state.step_resumed_at)


def step_time_left_s(state: SessionState, now_ms: int) -> int:
    return max(0, state.step_duration - live_step_elapsed_ms(state, now_ms) // 1000)


def workout_elapsed_s(state: SessionState, now_ms: int) -> int:
    if state.workout_start_time == 0:
        return 0
    if state.status == Status.PAUSED:
        now = state.pause_start_time
    elif state.status == Status.DONE and state.finish_time:
        now = state.finish_time
    else:
        now = now_ms
    return max(0, (now - state.workout_start_time - state.total_paused_ms) // 1000)
