"""Timer and workout expansion settings."""

from __future__ import annotations

from dataclasses import dataclass


CHANGE_EXERCISE_TRANSITION_SEC = 10
CHANGE_SIDES_TRANSITION_SEC = 7
HALFWAY_ANNOUNCEMENT_MIN_DURATION_SEC = 20
STEP_JUST_STARTED_THRESHOLD_SEC = 2
TICK_INTERVAL_MS = 250
ERROR_BANNER_AUTO_HIDE_MS = 8000


@dataclass(frozen=True)
class TimerConfig:
    change_exercise_sec: int = CHANGE_EXERCISE_TRANSITION_SEC
    change_sides_sec: int = CHANGE_SIDES_TRANSITION_SEC
    halfway_min_duration_sec: int = HALFWAY_ANNOUNCEMENT_MIN_DURATION_SEC
    step_just_started_sec: int = STEP_JUST_STARTED_THRESHOLD_SEC
    tick_interval_ms: int = TICK_INTERVAL_MS
    error_banner_auto_hide_ms: int = ERROR_BANNER_AUTO_HIDE_MS
    # Alternate expansion variant: reps "each side" as left/switch/right.
    split_reps_each_side: bool = False
    # Alternate expansion variant: "get ready" countdown before reps exercises.
    transition_before_reps: bool = False
    transitions_tappable: bool = False

    def __post_init__(self) -> None:
        if self.change_exercise_sec < 1 or self.change_sides_sec < 1:
            raise ValueError("Transition durations must be >= 1 second")
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be > 0")


DEFAULT_CONFIG = TimerConfig()
