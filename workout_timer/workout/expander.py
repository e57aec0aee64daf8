"""Expansion of parsed exercise/rest lines into runtime steps."""

from __future__ import annotations

from typing import Optional, Union

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.workout.model import Exercise, Rest, Side, Step, Transition
from workout_timer.workout.parser import EACH_SIDE, ParsedExercise, ParsedRest


def expand_steps(
    parsed: Union[ParsedExercise, ParsedRest],
    section: str | None,
    config: TimerConfig = DEFAULT_CONFIG,
) -> list[Step]:
    if isinstance(parsed, ParsedRest):
        return [Rest(duration_sec=parsed.volume.value, notes=parsed.notes, section=section)]

    timed = parsed.volume.is_timed
    get_ready = Transition("changeExercises", config.change_exercise_sec, section)

    if parsed.modifier == EACH_SIDE and (timed or config.split_reps_each_side):
        return [
            get_ready,
            _exercise(parsed, "left", section),
            Transition("changeSides", config.change_sides_sec, section),
            _exercise(parsed, "right", section),
        ]

    side: Optional[Side] = "each" if parsed.modifier == EACH_SIDE else None
    steps: list[Step] = []
    if timed or config.transition_before_reps:
        steps.append(get_ready)
    steps.append(_exercise(parsed, side, section))
    return steps


def _exercise(
    parsed: ParsedExercise, side: Optional[Side], section: str | None
) -> Exercise:
    return Exercise(
        name=parsed.name,
        volume=parsed.volume,
        side=side,
        notes=parsed.notes,
        section=section,
    )
