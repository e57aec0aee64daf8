"""Controller shared by the web UI and the terminal runner."""

from __future__ import annotations

from typing import Callable, Optional

from loguru import logger

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.core.display import SessionView
from workout_timer.core.services import DisplaySink, SpeechService, WakeLock
from workout_timer.core.session import Clock, WorkoutSession, wall_clock_ms
from workout_timer.core.state import Status
from workout_timer.workout.errors import LineDiagnostic, WorkoutError
from workout_timer.workout.parser import diagnose
from workout_timer.workout.store import MemoryStore, WorkoutStore


class UIController:
    def __init__(
        self,
        speech: SpeechService,
        wake_lock: WakeLock | None = None,
        *,
        store: WorkoutStore | None = None,
        config: TimerConfig = DEFAULT_CONFIG,
        clock: Clock = wall_clock_ms,
        display: Optional[DisplaySink] = None,
    ) -> None:
        self.config = config
        self.store = store or WorkoutStore(MemoryStore())
        self._clock = clock
        self._session = WorkoutSession(
            speech,
            wake_lock,
            display=display,
            config=config,
            clock=clock,
            on_error=self._on_session_error,
        )
        self._error_message: str | None = None
        self._error_expires_at = 0
        self._keys: dict[str, Callable[[], None]] = {
            "Space": self.toggle_pause,
            "ArrowRight": self.skip_forward,
            "ArrowLeft": self.skip_backward,
            "Escape": self.stop,
            "Enter": self.tap,
        }

    @property
    def session(self) -> WorkoutSession:
        return self._session

    @property
    def status(self) -> Status:
        return self._session.status

    @property
    def editing(self) -> bool:
        return self._session.status == Status.EDITING

    @property
    def muted(self) -> bool:
        return self._session.muted

    def view(self) -> SessionView:
        return self._session.view()

    # --- error banner ---

    @property
    def error_message(self) -> str | None:
        if self._error_message is not None and self._clock() >= self._error_expires_at:
            self._error_message = None
        return self._error_message

    def show_error(self, message: str) -> None:
        self._error_message = message
        self._error_expires_at = self._clock() + self.config.error_banner_auto_hide_ms

    def dismiss_error(self) -> None:
        self._error_message = None

    def _on_session_error(self, error: Exception) -> None:
        self.show_error(str(error))

    # --- editor and drafts ---

    def save_text(self, text: str) -> None:
        self.store.save_current_text(text)

    def diagnostics(self, text: str | None = None) -> list[LineDiagnostic]:
        return diagnose(self.store.current_text if text is None else text)

    @property
    def delete_label(self) -> str:
        return "Clear" if self.store.total <= 1 else "Delete"

    def prev_workout(self) -> str:
        if self.store.can_go_prev:
            return self.store.switch_to(self.store.current_index - 1)
        return self.store.current_text

    def next_workout(self) -> str:
        if self.store.can_go_next:
            return self.store.switch_to(self.store.current_index + 1)
        return self.store.current_text

    def new_workout(self) -> str:
        return self.store.create()

    def delete_workout(self) -> str:
        return self.store.delete_current()

    # --- session ---

    def start_workout(self, text: str | None = None) -> bool:
        if text is not None:
            self.store.save_current_text(text)
        try:
            self._session.start(self.store.current_text)
        except WorkoutError as exc:
            logger.info("Workout not started: {}", exc)
            self.show_error(str(exc))
            return False
        self.dismiss_error()
        return True

    def tap(self) -> None:
        if self.view().tappable:
            self._session.advance()

    def toggle_pause(self) -> None:
        self._session.toggle_pause()

    def skip_forward(self) -> None:
        self._session.skip_forward()

    def skip_backward(self) -> None:
        self._session.skip_backward()

    def stop(self) -> None:
        self._session.stop()

    def toggle_mute(self) -> bool:
        self._session.set_muted(not self._session.muted)
        return self._session.muted

    def handle_key(self, key: str) -> bool:
        """Dispatch a keyboard shortcut; returns False when it was ignored."""
        if self.editing:
            return False
        action = self._keys.get(key)
        if action is None:
            return False
        action()
        return True

    async def drain(self) -> None:
        await self._session.drain()
