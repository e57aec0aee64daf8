"""Workout text line parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from workout_timer.workout.errors import (
    ErrorKind,
    InvalidDuration,
    LineDiagnostic,
    LineError,
    StepType,
    line_error_for,
)
from workout_timer.workout.model import Volume
from workout_timer.workout.volume import parse_volume


EACH_SIDE = "each side"
COMMENT_MARKER = "//"

_HASHES = re.compile(r"^(#+)\s*(.*)")


@dataclass(frozen=True)
class ParsedEmpty:
    pass


@dataclass(frozen=True)
class ParsedTitle:
    name: str


@dataclass(frozen=True)
class ParsedHeader:
    name: str


@dataclass(frozen=True)
class ParsedExercise:
    name: str
    volume: Volume
    modifier: str | None
    notes: str | None


@dataclass(frozen=True)
class ParsedRest:
    volume: Volume
    notes: str | None


@dataclass(frozen=True)
class ParsedError:
    msg: str
    kind: ErrorKind
    step_type: Optional[StepType] = None

    def to_exception(self) -> LineError:
        return line_error_for(self.kind, self.msg, self.step_type)

    def at_line(self, line_index: int) -> LineDiagnostic:
        return LineDiagnostic(
            line_number=line_index + 1,
            kind=self.kind,
            step_type=self.step_type,
            message=self.msg,
        )


ParsedLine = Union[
    ParsedEmpty, ParsedTitle, ParsedHeader, ParsedExercise, ParsedRest, ParsedError
]


def parse_line(line: str, line_index: int = 1) -> ParsedLine:
    """Classify one line; ``line_index`` is 0-based (titles only live on 0)."""
    trimmed = line.strip()
    if trimmed == "" or trimmed.startswith(COMMENT_MARKER):
        return ParsedEmpty()

    if trimmed.startswith("#"):
        return _parse_heading(trimmed, line_index)

    comment_index = line.find(COMMENT_MARKER)
    if comment_index >= 0:
        main_part = line[:comment_index]
        notes: str | None = line[comment_index + len(COMMENT_MARKER):].strip()
    else:
        main_part = line
        notes = None

    parts = [part.strip() for part in main_part.split("|")]
    if len(parts) < 2 or len(parts) > 3:
        return ParsedError(f"Expected 2-3 parts, got {len(parts)}", "lineFormat")

    name, duration = parts[0], parts[1]
    modifier = parts[2] if len(parts) == 3 else None
    step_type: StepType = "rest" if name.lower() == "rest" else "exercise"

    try:
        volume = parse_volume(duration)
    except InvalidDuration as exc:
        return ParsedError(str(exc), "duration", step_type)

    if step_type == "rest":
        if volume.unit == "reps":
            return ParsedError(
                "Rest cannot have reps as volume. Expected time format like "
                '"30s", "1m", "1m30s", or "1 minute, 30 seconds".',
                "duration",
                "rest",
            )
        if modifier is not None:
            return ParsedError(
                'Rest cannot have a modifier (like "each side")', "modifier", "rest"
            )
        return ParsedRest(volume=volume, notes=notes)

    if modifier and modifier != EACH_SIDE:
        return ParsedError(f'Invalid modifier: "{modifier}"', "modifier", "exercise")

    return ParsedExercise(
        name=name,
        volume=volume,
        modifier=modifier or None,
        notes=notes,
    )


def diagnose(text: str) -> list[LineDiagnostic]:
    """Every error line of a document, with 1-based line numbers."""
    out: list[LineDiagnostic] = []
    for index, line in enumerate(text.split("\n")):
        parsed = parse_line(line, index)
        if isinstance(parsed, ParsedError):
            out.append(parsed.at_line(index))
    return out


def _parse_heading(trimmed: str, line_index: int) -> ParsedLine:
    match = _HASHES.match(trimmed)
    if match is None:
        return ParsedEmpty()
    hashes, name = match.group(1), match.group(2).strip()

    if len(hashes) > 2:
        return ParsedError(
            "Too many # characters. Use # for title, ## for section", "lineFormat"
        )
    if not name:
        return ParsedError("Empty header", "lineFormat")
    if len(hashes) == 1:
        if line_index != 0:
            return ParsedError(
                "Title (#) must be on the first line. Use ## for sections",
                "lineFormat",
            )
        return ParsedTitle(name)
    return ParsedHeader(name)

