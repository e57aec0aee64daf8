"""View models pushed to whatever renders a workout session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.core.state import SessionState, Status, step_time_left_s, workout_elapsed_s
from workout_timer.workout.model import (
    Exercise,
    Rest,
    Transition,
    upcoming_exercise_or_rest,
)


StepKind = Literal["exercise", "rest", "transition"]

COMPLETE_TEXT = "Workout Complete!"


@dataclass(frozen=True)
class ButtonStates:
    play_pause_label: str
    play_pause_enabled: bool
    prev_enabled: bool
    next_enabled: bool
    stop_enabled: bool


@dataclass(frozen=True)
class SessionView:
    status: Status
    step_kind: Optional[StepKind]
    headline: str
    display_name: str
    side_label: str
    timer_text: str
    tappable: bool
    next_label: str
    banner: str
    elapsed_text: str
    progress_pct: float
    buttons: ButtonStates


def format_countdown(seconds: int) -> str:
    if seconds < 60:
        return str(seconds)
    minutes, rest = divmod(seconds, 60)
    return f"{minutes:02d}:{rest:02d}"


def format_elapsed(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def compute_progress_percent(state: SessionState) -> float:
    """Share of Exercise steps already behind the current one."""
    if state.status == Status.DONE:
        return 100.0
    total = state.workout_data.exercise_count
    if total == 0:
        return 0.0
    done = sum(1 for step in state.steps[: state.step_index] if isinstance(step, Exercise))
    return max(0.0, min(done / total * 100.0, 100.0))


def _side_label(step: Exercise) -> str:
    return f"({step.side} side)" if step.side is not None else ""


def format_next_label(state: SessionState) -> str:
    upcoming = upcoming_exercise_or_rest(state.workout_data, state.step_index)
    if upcoming is None:
        return "Next: Finish"
    if isinstance(upcoming, Rest):
        return "Next: Rest"
    if upcoming.side is not None:
        return f"Next: {upcoming.name} ({upcoming.side} side)"
    return f"Next: {upcoming.name}"


def format_banner(state: SessionState) -> str:
    step = state.current_step
    section = step.section if step is not None else None
    title = state.workout_data.title
    if title and section:
        return f"{title} — {section}"
    return title or section or ""


def project(
    state: SessionState,
    now_ms: int,
    config: TimerConfig = DEFAULT_CONFIG,
) -> SessionView:
    if state.status == Status.EDITING:
        return _editing_view()
    if state.status == Status.DONE:
        return _done_view(state, now_ms)

    step = state.current_step
    time_left = format_countdown(step_time_left_s(state, now_ms))
    kind: Optional[StepKind] = None
    headline = ""
    name = ""
    side = ""
    timer_text = time_left
    tappable = False
    next_label = ""

    if isinstance(step, Transition):
        kind = "transition"
        headline = "Switch sides" if step.kind == "changeSides" else "Get Ready"
        tappable = config.transitions_tappable
        upcoming = upcoming_exercise_or_rest(state.workout_data, state.step_index)
        if isinstance(upcoming, Exercise):
            name = upcoming.name
            side = _side_label(upcoming)
        elif isinstance(upcoming, Rest):
            name = "Rest"
    elif isinstance(step, Rest):
        kind = "rest"
        name = "Rest"
        next_label = format_next_label(state)
    elif isinstance(step, Exercise):
        kind = "exercise"
        name = step.name
        side = _side_label(step)
        next_label = format_next_label(state)
        if not step.volume.is_timed:
            timer_text = str(step.volume.value)
            tappable = True

    paused = state.status == Status.PAUSED
    return SessionView(
        status=state.status,
        step_kind=kind,
        headline=headline,
        display_name=name,
        side_label=side,
        timer_text=timer_text,
        tappable=tappable and not paused,
        next_label=next_label,
        banner=format_banner(state),
        elapsed_text=format_elapsed(workout_elapsed_s(state, now_ms)),
        progress_pct=compute_progress_percent(state),
        buttons=ButtonStates(
            play_pause_label="Resume" if paused else "Pause",
            play_pause_enabled=True,
            prev_enabled=True,
            next_enabled=True,
            stop_enabled=True,
        ),
    )


def _editing_view() -> SessionView:
    return SessionView(
        status=Status.EDITING,
        step_kind=None,
        headline="",
        display_name="",
        side_label="",
        timer_text="",
        tappable=False,
        next_label="",
        banner="",
        elapsed_text=format_elapsed(0),
        progress_pct=0.0,
        buttons=ButtonStates(
            play_pause_label="Pause",
            play_pause_enabled=False,
            prev_enabled=False,
            next_enabled=False,
            stop_enabled=False,
        ),
    )


def _done_view(state: SessionState, now_ms: int) -> SessionView:
    return SessionView(
        status=Status.DONE,
        step_kind=None,
        headline="",
        display_name=COMPLETE_TEXT,
        side_label="",
        timer_text="00",
        tappable=False,
        next_label="",
        banner=format_banner(state),
        elapsed_text=format_elapsed(workout_elapsed_s(state, now_ms)),
        progress_pct=100.0,
        buttons=ButtonStates(
            play_pause_label="Back",
            play_pause_enabled=True,
            prev_enabled=False,
            next_enabled=False,
            stop_enabled=False,
        ),
    )
