"""Guided workout session: timer, narration and navigation."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Coroutine, Optional

from loguru import logger

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.core.display import SessionView, project
from workout_timer.core.narrator import (
    COMPLETION_PHRASE,
    Announcement,
    countdown_announcements,
    step_announcements,
)
from workout_timer.core.services import DisplaySink, NullWakeLock, SpeechService, WakeLock
from workout_timer.core.state import SessionState, Status, step_time_left_s
from workout_timer.workout.compiler import compile_workout
from workout_timer.workout.errors import NoStepsError, TimerError
from workout_timer.workout.model import (
    Transition,
    WorkoutData,
    is_breakpoint,
    step_duration_sec,
)


Clock = Callable[[], int]
ErrorCallback = Callable[[Exception], None]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class WorkoutSession:
    """Owns one SessionState and every transition applied to it.

    All handlers are synchronous and must run on the asyncio loop that also
    runs the tick timer and narration tasks. Narration tasks capture a token
    when they are scheduled; once the token changes (new step, pause, stop)
    their completions no longer touch the state.
    """

    def __init__(
        self,
        speech: SpeechService,
        wake_lock: WakeLock | None = None,
        *,
        display: Optional[DisplaySink] = None,
        config: TimerConfig = DEFAULT_CONFIG,
        clock: Clock = wall_clock_ms,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.state = SessionState()
        self.config = config
        self.muted = False
        self._speech = speech
        self._wake_lock = wake_lock or NullWakeLock()
        self._display = display
        self._clock = clock
        self._on_error = on_error
        self._tick_task: Optional[asyncio.Task[None]] = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._token = 0

    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def tick_timer_running(self) -> bool:
        return self._tick_task is not None

    def time_left_s(self) -> int:
        return step_time_left_s(self.state, self._clock())

    def view(self) -> SessionView:
        return project(self.state, self._clock(), self.config)

    # --- transitions ---

    def start(self, text: str) -> WorkoutData:
        if self.state.status != Status.EDITING:
            raise RuntimeError("Workout already running")

        workout = compile_workout(text, self.config)
        if not workout.steps:
            raise NoStepsError("No valid workout steps found. Please enter at least one step.")
        self._speech.unlock()

        state = self.state
        state.reset_timing()
        state.workout_data = workout
        state.status = Status.IN_PROGRESS
        state.workout_start_time = self._clock()
        state.step_duration = step_duration_sec(workout.steps[0])

        self._acquire_wake_lock()
        self._start_tick_timer()
        logger.info("Workout started: {!r}, {} steps", workout.title, len(workout.steps))
        self._enter_step()
        return workout

    def tick(self) -> None:
        try:
            self._tick()
        except Exception as exc:
            logger.exception("Timer error")
            error = TimerError(f"Timer error: {exc}")
            error.__cause__ = exc
            self._halt()
            self._report(error)

    def advance(self) -> None:
        if self.state.status != Status.IN_PROGRESS:
            return
        self._speech.cancel()
        self.state.step_index += 1
        self._enter_step()

    def toggle_pause(self) -> None:
        state = self.state
        now = self._clock()

        if state.status == Status.DONE:
            state.status = Status.EDITING
        elif state.status == Status.PAUSED:
            state.total_paused_ms += now - state.pause_start_time
            state.pause_start_time = 0
            state.status = Status.IN_PROGRESS
            if not state.step_announced:
                self._announce_current_step()
            else:
                state.step_resumed_at = now
            self._start_tick_timer()
            logger.debug("Resumed at step {}", state.step_index)
        elif state.status == Status.IN_PROGRESS:
            self._token += 1
            self._speech.cancel()
            if state.step_resumed_at > 0:
                raw_ms = state.step_elapsed_ms + (now - state.step_resumed_at)
                state.step_elapsed_ms = (raw_ms // 1000) * 1000
                state.step_resumed_at = 0
            state.pause_start_time = now
            state.status = Status.PAUSED
            self._stop_tick_timer()
            logger.debug("Paused at step {}", state.step_index)
        else:
            return

        self._push_view()

    def skip_forward(self) -> None:
        state = self.state
        if state.status not in (Status.IN_PROGRESS, Status.PAUSED):
            return
        self._speech.cancel()
        target = self._next_breakpoint()
        if target >= len(state.steps):
            self._finish()
            return
        state.step_index = target
        self._reenter_step()

    def skip_backward(self) -> None:
        state = self.state
        if state.status not in (Status.IN_PROGRESS, Status.PAUSED):
            return
        self._speech.cancel()
        since_entry_s = (self._clock() - state.step_entry_time) // 1000
        if since_entry_s < self.config.step_just_started_sec:
            state.step_index = self._prev_breakpoint()
        self._reenter_step()

    def stop(self) -> None:
        self._halt()
        logger.info("Workout stopped")
        self._push_view()

    def set_muted(self, muted: bool) -> None:
        self.muted = muted
        if muted:
            self._speech.cancel()

    async def drain(self) -> None:
        """Wait until every scheduled narration task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # --- internals ---

    def _tick(self) -> None:
        state = self.state
        if state.status != Status.IN_PROGRESS:
            return
        if state.step_resumed_at == 0:
            self._push_view()
            return

        time_left = self.time_left_s()
        if time_left != state.last_announced_second:
            state.last_announced_second = time_left
            step = state.current_step
            if step is not None:
                cues = countdown_announcements(step, time_left, self.config)
                if cues:
                    self._spawn(self._speak_all(self._token, cues))

        self._push_view()

        if state.step_duration > 0 and time_left <= 0:
            self.advance()

    def _halt(self) -> None:
        self._stop_tick_timer()
        self._token += 1
        self._speech.cancel()
        self._release_wake_lock()
        self.state.status = Status.EDITING
        self.state.reset_timing()

    def _enter_step(self) -> None:
        state = self.state
        if state.step_index >= len(state.steps):
            self._finish()
            return
        if state.status not in (Status.IN_PROGRESS, Status.PAUSED):
            return

        self._token += 1
        step = state.steps[state.step_index]
        state.step_entry_time = self._clock()
        state.step_resumed_at = 0
        state.step_elapsed_ms = 0
        state.step_announced = False
        state.last_announced_second = -1
        state.step_duration = step_duration_sec(step)
        logger.debug("Entering step {}: {}", state.step_index, step)
        self._push_view()

        if state.status == Status.IN_PROGRESS:
            self._announce_current_step()

    def _reenter_step(self) -> None:
        state = self.state
        if state.status == Status.IN_PROGRESS:
            self._enter_step()
            return

        # Paused: move the pointer only; speech and timer wait for resume.
        self._token += 1
        state.step_entry_time = self._clock()
        state.step_resumed_at = 0
        state.step_elapsed_ms = 0
        state.step_announced = False
        state.last_announced_second = -1
        state.step_duration = step_duration_sec(state.steps[state.step_index])
        self._push_view()

    def _announce_current_step(self) -> None:
        state = self.state
        token = self._token
        phrases = step_announcements(
            state.workout_data, state.step_index, with_title=not state.title_announced
        )
        state.title_announced = True
        if isinstance(state.current_step, Transition):
            self._spawn(self._announce_then_start(token, phrases))
        else:
            self._mark_announced()
            self._spawn(self._speak_all(token, phrases))

    async def _announce_then_start(self, token: int, phrases: list[Announcement]) -> None:
        await self._speak_all(token, phrases)
        if not self._is_current(token):
            return
        self._mark_announced()
        if self._tick_task is None:
            self._start_tick_timer()

    def _mark_announced(self) -> None:
        self.state.step_resumed_at = self._clock()
        self.state.step_announced = True

    def _finish(self) -> None:
        state = self.state
        if state.status not in (Status.IN_PROGRESS, Status.PAUSED):
            return
        if state.status == Status.PAUSED:
            state.total_paused_ms += self._clock() - state.pause_start_time
            state.pause_start_time = 0
        state.status = Status.DONE
        state.finish_time = self._clock()
        state.step_index = max(0, len(state.steps) - 1)
        self._stop_tick_timer()
        self._token += 1
        self._release_wake_lock()
        self._spawn(self._say(COMPLETION_PHRASE, None))
        logger.info("Workout complete")
        self._push_view()

    def _is_current(self, token: int) -> bool:
        return token == self._token and self.state.status == Status.IN_PROGRESS

    async def _speak_all(self, token: int, phrases: list[Announcement]) -> None:
        for phrase in phrases:
            if not self._is_current(token):
                return
            await self._say(
                phrase.text,
                phrase.pause_before_ms,
                cancel_on=lambda: not self._is_current(token),
            )

    async def _say(
        self,
        text: str,
        pause_before_ms: int | None,
        cancel_on: Optional[Callable[[], bool]] = None,
    ) -> None:
        if self.muted:
            return
        try:
            await self._speech.speak(text, pause_before_ms, cancel_on)
        except Exception as exc:  # pragma: no cover - speech backend variability
            logger.warning("Speech failed for {!r}: {}", text, exc)

    def _next_breakpoint(self) -> int:
        steps = self.state.steps
        for index in range(self.state.step_index + 1, len(steps)):
            if is_breakpoint(steps[index]):
                return index
        return len(steps)

    def _prev_breakpoint(self) -> int:
        steps = self.state.steps
        for index in range(self.state.step_index - 1, -1, -1):
            if is_breakpoint(steps[index]):
                return index
        return 0

    def _start_tick_timer(self) -> None:
        self._stop_tick_timer()
        self._tick_task = asyncio.create_task(self._tick_loop())

    def _stop_tick_timer(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    async def _tick_loop(self) -> None:
        interval_sec = self.config.tick_interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval_sec)
            self.tick()

    def _spawn(self, coro: Coroutine[None, None, None]) -> asyncio.Task[None]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _push_view(self) -> None:
        if self._display is not None:
            self._display(self.view())

    def _report(self, error: Exception) -> None:
        if self._on_error is not None:
            self._on_error(error)

    def _acquire_wake_lock(self) -> None:
        try:
            self._wake_lock.acquire()
        except Exception as exc:
            logger.warning("Wake lock ignored: {}", exc)

    def _release_wake_lock(self) -> None:
        try:
            self._wake_lock.release()
        except Exception as exc:
            logger.warning("Wake lock release failed: {}", exc)
