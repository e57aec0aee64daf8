"""Whole-document compilation of workout text."""

from __future__ import annotations

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.workout.errors import LineDiagnostic, WorkoutCompileError
from workout_timer.workout.expander import expand_steps
from workout_timer.workout.model import Step, WorkoutData
from workout_timer.workout.parser import (
    ParsedEmpty,
    ParsedError,
    ParsedHeader,
    ParsedTitle,
    parse_line,
)


def compile_workout(text: str, config: TimerConfig = DEFAULT_CONFIG) -> WorkoutData:
    """Parse every line, raising one WorkoutCompileError listing all bad lines."""
    steps: list[Step] = []
    errors: list[LineDiagnostic] = []
    title: str | None = None
    section: str | None = None

    for index, line in enumerate(text.split("\n")):
        parsed = parse_line(line, index)

        if isinstance(parsed, ParsedEmpty):
            continue
        if isinstance(parsed, ParsedTitle):
            title = parsed.name
            continue
        if isinstance(parsed, ParsedHeader):
            section = parsed.name
            continue
        if isinstance(parsed, ParsedError):
            errors.append(parsed.at_line(index))
            continue

        steps.extend(expand_steps(parsed, section, config))

    if errors:
        raise WorkoutCompileError(errors)
    return WorkoutData(title=title, steps=tuple(steps))
