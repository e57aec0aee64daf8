"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union


VolumeUnit = Literal["seconds", "reps"]
Side = Literal["left", "right", "each"]
TransitionKind = Literal["changeExercises", "changeSides"]


@dataclass(frozen=True)
class Volume:
    value: int
    unit: VolumeUnit

    @property
    def is_timed(self) -> bool:
        return self.unit == "seconds"


@dataclass(frozen=True)
class Exercise:
    name: str
    volume: Volume
    side: Optional[Side] = None
    notes: str | None = None
    section: str | None = None


@dataclass(frozen=True)
class Rest:
    duration_sec: int
    notes: str | None = None
    section: str | None = None


@dataclass(frozen=True)
class Transition:
    kind: TransitionKind
    duration_sec: int
    section: str | None = None


Step = Union[Exercise, Rest, Transition]


@dataclass(frozen=True)
class WorkoutData:
    title: str | None
    steps: tuple[Step, ...]

    @property
    def exercise_count(self) -> int:
        return sum(1 for step in self.steps if isinstance(step, Exercise))


def step_duration_sec(step: Step) -> int:
    """Timer length of a step; rep-based exercises have no timer (0)."""
    if isinstance(step, Exercise):
        return step.volume.value if step.volume.is_timed else 0
    return step.duration_sec


def is_breakpoint(step: Step) -> bool:
    """Steps that skip navigation may land on."""
    if isinstance(step, Exercise):
        return not step.volume.is_timed
    return True


def upcoming_exercise_or_rest(workout: WorkoutData, index: int) -> Exercise | Rest | None:
    """First Exercise or Rest after ``index``; transitions are looked through."""
    for step in workout.steps[index + 1:]:
        if isinstance(step, (Exercise, Rest)):
            return step
    return None
