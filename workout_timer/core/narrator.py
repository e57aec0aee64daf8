"""Speech scripts for workout steps.

The narrator only builds phrases; the session decides when to speak them and
cancels them when the user moves on.
"""

from __future__ import annotations

from dataclasses import dataclass

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.workout.model import (
    Exercise,
    Rest,
    Step,
    Transition,
    WorkoutData,
    step_duration_sec,
    upcoming_exercise_or_rest,
)


COMPLETION_PHRASE = "Workout Complete"
COUNTDOWN_SECONDS = (1, 2, 3)
PHRASE_GAP_MS = 400
TAP_PROMPT_GAP_MS = 700
NOTES_GAP_MS = 1000


@dataclass(frozen=True)
class Announcement:
    text: str
    pause_before_ms: int | None = None


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_duration_for_speech(seconds: int) -> str:
    if seconds < 60:
        return _plural(seconds, "second")
    minutes, rest = divmod(seconds, 60)
    if rest == 0:
        return _plural(minutes, "minute")
    return f"{_plural(minutes, 'minute')} and {_plural(rest, 'second')}"


def step_announcements(
    workout: WorkoutData, index: int, with_title: bool = True
) -> list[Announcement]:
    """Title/section prefix, the step's own phrases, then its notes.

    The session passes ``with_title=False`` once the title has been spoken, so
    coming back to the first step does not repeat it.
    """
    step = workout.steps[index]
    prefix: list[Announcement] = []
    if with_title and index == 0 and workout.title:
        prefix.append(Announcement(workout.title))
    previous_section = workout.steps[index - 1].section if index > 0 else None
    if step.section and step.section != previous_section:
        prefix.append(Announcement(step.section, PHRASE_GAP_MS if prefix else None))

    body = _body_phrases(workout, index)
    if prefix and body and body[0].pause_before_ms is None:
        body[0] = Announcement(body[0].text, PHRASE_GAP_MS)

    out = prefix + body
    if isinstance(step, (Exercise, Rest)) and step.notes:
        out.append(Announcement(step.notes, NOTES_GAP_MS))
    return out


def _body_phrases(workout: WorkoutData, index: int) -> list[Announcement]:
    step = workout.steps[index]
    if isinstance(step, Transition):
        return _transition_phrases(step, upcoming_exercise_or_rest(workout, index))

    if isinstance(step, Rest):
        return [
            Announcement("Rest for"),
            Announcement(format_duration_for_speech(step.duration_sec), PHRASE_GAP_MS),
        ]

    if step.volume.is_timed:
        return [
            Announcement(format_duration_for_speech(step.volume.value)),
            Announcement("Go!", PHRASE_GAP_MS),
        ]
    reps = _plural(step.volume.value, "rep")
    if step.side == "each":
        reps += " on each side"
    return [
        Announcement(reps),
        Announcement("Go!", PHRASE_GAP_MS),
        Announcement("Tap when done", TAP_PROMPT_GAP_MS),
    ]


def _transition_phrases(step: Transition, upcoming: Exercise | Rest | None) -> list[Announcement]:
    if not isinstance(upcoming, Exercise):
        return []
    if step.kind == "changeSides":
        return [Announcement(f"Switch to the {upcoming.side} side")]
    if upcoming.side in ("left", "right"):
        return [Announcement(f"Get ready for {upcoming.name} on the {upcoming.side} side")]
    return [Announcement(f"Get ready for {upcoming.name}")]


def countdown_announcements(
    step: Step,
    time_left: int,
    config: TimerConfig = DEFAULT_CONFIG,
) -> list[Announcement]:
    """Cues due when the step's time left has just become ``time_left``."""
    out: list[Announcement] = []
    duration = step_duration_sec(step)
    if (
        not isinstance(step, Transition)
        and duration > 0
        and duration >= config.halfway_min_duration_sec
    ):
        halfway = duration // 2
        if time_left == halfway:
            out.append(Announcement("Halfway there"))
            out.append(
                Announcement(f"{format_duration_for_speech(halfway)} left", PHRASE_GAP_MS)
            )
    if time_left in COUNTDOWN_SECONDS:
        out.append(Announcement(str(time_left)))
    return out
