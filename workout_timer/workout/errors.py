"""Error taxonomy for workout text and workout sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


ErrorKind = Literal["lineFormat", "duration", "modifier"]
StepType = Literal["rest", "exercise"]


class WorkoutError(ValueError):
    """Base class for every user-facing workout error."""


class LineError(WorkoutError):
    kind: ErrorKind = "lineFormat"

    def __init__(self, message: str, step_type: Optional[StepType] = None) -> None:
        super().__init__(message)
        self.step_type = step_type


class LineFormatError(LineError):
    kind: ErrorKind = "lineFormat"


class DurationError(LineError):
    kind: ErrorKind = "duration"


class ModifierError(LineError):
    kind: ErrorKind = "modifier"


class InvalidDuration(DurationError):
    """Raised when a duration/reps token matches none of the accepted formats."""

    def __init__(
        self,
        message: str,
        *,
        token: str,
        accepted_formats: tuple[str, ...],
    ) -> None:
        super().__init__(message)
        self.token = token
        self.accepted_formats = accepted_formats


@dataclass(frozen=True)
class LineDiagnostic:
    line_number: int
    kind: ErrorKind
    step_type: Optional[StepType]
    message: str

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.message}"

    def to_exception(self) -> LineError:
        return line_error_for(self.kind, self.message, self.step_type)


class WorkoutCompileError(WorkoutError):
    """All line errors of a document, reported at once."""

    def __init__(self, diagnostics: list[LineDiagnostic]) -> None:
        super().__init__("\n".join(str(item) for item in diagnostics))
        self.diagnostics = tuple(diagnostics)


class NoStepsError(WorkoutError):
    pass


class TimerError(WorkoutError):
    pass


_ERROR_CLASSES: dict[ErrorKind, type[LineError]] = {
    "lineFormat": LineFormatError,
    "duration": DurationError,
    "modifier": ModifierError,
}


def line_error_for(kind: ErrorKind, message: str, step_type: Optional[StepType]) -> LineError:
    return _ERROR_CLASSES[kind](message, step_type)
