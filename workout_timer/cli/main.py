"""Terminal CLI entrypoint for the workout timer."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from pathlib import Path
from typing import Callable

from loguru import logger

from workout_timer.core.config import (
    CHANGE_EXERCISE_TRANSITION_SEC,
    CHANGE_SIDES_TRANSITION_SEC,
    TimerConfig,
)
from workout_timer.core.display import SessionView
from workout_timer.core.services import TerminalSpeech
from workout_timer.core.session import WorkoutSession
from workout_timer.core.state import Status
from workout_timer.workout.compiler import compile_workout
from workout_timer.workout.errors import WorkoutCompileError, WorkoutError
from workout_timer.workout.model import Exercise, Rest, Step, WorkoutData

COMMAND_POLL_SEC = 0.25

COMMAND_HELP = "[KEYS] Enter=tap/done  p=pause/resume  n=next  b=back  m=mute  q=stop"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Voice-guided workout timer")
    parser.add_argument("--check", metavar="FILE", default=None, help="Validate a workout file")
    parser.add_argument("--run", metavar="FILE", default=None, help="Run a workout in the terminal")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI) with editor and voice guidance",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8088,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--storage",
        type=Path,
        default=None,
        help="Storage file for saved workouts (default: ~/.workout-timer/storage.json)",
    )
    parser.add_argument(
        "--change-exercise-sec",
        type=int,
        default=CHANGE_EXERCISE_TRANSITION_SEC,
        help="Get-ready countdown before each timed exercise",
    )
    parser.add_argument(
        "--change-sides-sec",
        type=int,
        default=CHANGE_SIDES_TRANSITION_SEC,
        help="Countdown between the left and right side of an exercise",
    )
    parser.add_argument(
        "--split-reps-each-side",
        action="store_true",
        help="Expand 'each side' rep exercises into left, switch, right",
    )
    parser.add_argument(
        "--transition-before-reps",
        action="store_true",
        help="Add a get-ready countdown before rep exercises too",
    )
    parser.add_argument(
        "--tappable-transitions",
        action="store_true",
        help="Allow tapping to end a get-ready countdown early",
    )
    parser.add_argument("--mute", action="store_true", help="Start with voice cues muted")
    parser.add_argument("--debug", action="store_true", help="Verbose diagnostic logging")
    return parser


def config_from_args(args: argparse.Namespace) -> TimerConfig:
    return TimerConfig(
        change_exercise_sec=args.change_exercise_sec,
        change_sides_sec=args.change_sides_sec,
        split_reps_each_side=args.split_reps_each_side,
        transition_before_reps=args.transition_before_reps,
        transitions_tappable=args.tappable_transitions,
    )


def describe_step(step: Step) -> str:
    if isinstance(step, Exercise):
        amount = f"{step.volume.value}s" if step.volume.is_timed else f"{step.volume.value} reps"
        side = f" ({step.side} side)" if step.side else ""
        notes = f" // {step.notes}" if step.notes else ""
        return f"{step.name}{side} | {amount}{notes}"
    if isinstance(step, Rest):
        notes = f" // {step.notes}" if step.notes else ""
        return f"Rest | {step.duration_sec}s{notes}"
    label = "Switch sides" if step.kind == "changeSides" else "Get ready"
    return f"[{label}] {step.duration_sec}s"


def print_workout(workout: WorkoutData) -> None:
    print(f"[WORKOUT] {workout.title or '(untitled)'}: {len(workout.steps)} steps")
    section: str | None = None
    for number, step in enumerate(workout.steps, start=1):
        if step.section and step.section != section:
            section = step.section
            print(f"  ## {section}")
        print(f"  {number:>3}. {describe_step(step)}")


def run_check(path: Path, config: TimerConfig) -> int:
    try:
        workout = compile_workout(path.read_text(encoding="utf-8"), config)
    except WorkoutCompileError as exc:
        for diagnostic in exc.diagnostics:
            print(f"[ERROR] {diagnostic}")
        return 1
    if not workout.steps:
        print("[ERROR] No valid workout steps found")
        return 1
    print_workout(workout)
    return 0


class TerminalDisplay:
    """Prints a line whenever the visible step or status changes."""

    def __init__(self, echo: Callable[[str], None] = print) -> None:
        self._echo = echo
        self._last: tuple[object, ...] | None = None

    def __call__(self, view: SessionView) -> None:
        key = (view.status, view.step_kind, view.display_name, view.side_label, view.headline)
        if key == self._last:
            return
        self._last = key
        if view.status == Status.EDITING:
            self._echo("[STOP] Workout stopped")
            return
        if view.status == Status.DONE:
            self._echo(f"[DONE] {view.display_name} in {view.elapsed_text}")
            return
        if view.status == Status.PAUSED:
            self._echo(f"[PAUSE] {view.display_name} {view.timer_text}")
            return
        parts = [p for p in (view.headline, view.display_name, view.side_label) if p]
        timer = "tap when done" if view.tappable and view.step_kind == "exercise" else view.timer_text
        line = f"[STEP] {' '.join(parts)} | {timer}"
        if view.next_label:
            line += f" | {view.next_label}"
        self._echo(line)


def _dispatch(session: WorkoutSession, command: str) -> None:
    if command == "":
        if session.view().tappable:
            session.advance()
    elif command == "p":
        session.toggle_pause()
    elif command == "n":
        session.skip_forward()
    elif command == "b":
        session.skip_backward()
    elif command == "m":
        session.set_muted(not session.muted)
        print(f"[SPEECH] {'muted' if session.muted else 'unmuted'}")
    elif command == "q":
        session.stop()
    else:
        print(f"[KEYS] Unknown command {command!r}")


async def run_workout(path: Path, config: TimerConfig, muted: bool = False) -> int:
    errors: list[Exception] = []

    def on_error(error: Exception) -> None:
        errors.append(error)
        print(f"[ERROR] {error}")

    session = WorkoutSession(
        TerminalSpeech(),
        display=TerminalDisplay(),
        config=config,
        on_error=on_error,
    )
    session.set_muted(muted)
    try:
        session.start(path.read_text(encoding="utf-8"))
    except WorkoutCompileError as exc:
        for diagnostic in exc.diagnostics:
            print(f"[ERROR] {diagnostic}")
        return 1
    except WorkoutError as exc:
        print(f"[ERROR] {exc}")
        return 1

    print(COMMAND_HELP)
    loop = asyncio.get_running_loop()
    commands: asyncio.Queue[str] = asyncio.Queue()
    reading = True
    try:
        loop.add_reader(sys.stdin, lambda: commands.put_nowait(sys.stdin.readline()))
    except (NotImplementedError, ValueError) as exc:
        logger.warning("Terminal commands unavailable: {}", exc)
        reading = False

    try:
        while session.status in (Status.IN_PROGRESS, Status.PAUSED):
            try:
                line = await asyncio.wait_for(commands.get(), timeout=COMMAND_POLL_SEC)
            except asyncio.TimeoutError:
                continue
            if line == "":
                # stdin closed
                session.stop()
                break
            _dispatch(session, line.strip().lower())
    finally:
        if reading:
            with contextlib.suppress(ValueError):
                loop.remove_reader(sys.stdin)

    await session.drain()
    return 1 if errors else 0


def _configure_logging(debug: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "WARNING")


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    _configure_logging(args.debug)
    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    if args.ui_web:
        from workout_timer.ui.web_app import run_web_ui

        return run_web_ui(
            host=args.web_host,
            port=args.web_port,
            config=config,
            storage_path=args.storage,
        )

    if args.check:
        return run_check(Path(args.check), config)

    if args.run:
        try:
            return asyncio.run(run_workout(Path(args.run), config, muted=args.mute))
        except KeyboardInterrupt:
            print("[STOP] Interrupted")
            return 130

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
