"""NiceGUI web UI for the workout timer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

from loguru import logger
from nicegui import Client, ui
from nicegui.events import KeyEventArguments, ValueChangeEventArguments

from workout_timer.core.config import DEFAULT_CONFIG, TimerConfig
from workout_timer.core.services import PollingSpeech
from workout_timer.ui.controller import UIController
from workout_timer.workout.store import JsonFileStore, WorkoutStore

REFRESH_INTERVAL_SEC = 0.25
SPEECH_TIMEOUT_SEC = 30.0

_PREFERRED_VOICES_JS = """
const pickVoice = (synth) => {
  const voices = synth.getVoices();
  return voices.find((v) => v.name === 'Samantha')
    || voices.find((v) => v.name === 'Google US English')
    || voices.find((v) => v.lang === 'en-US')
    || voices.find((v) => v.lang.startsWith('en'))
    || voices[0]
    || null;
};
"""


def _speak_js(text: str) -> str:
    return (
        "new Promise((resolve) => {"
        + _PREFERRED_VOICES_JS
        + "const synth = window.speechSynthesis;"
        "if (!synth) { resolve(false); return; }"
        "if (synth.speaking) synth.cancel();"
        f"const utterance = new SpeechSynthesisUtterance({json.dumps(text)});"
        "const voice = pickVoice(synth);"
        "if (voice) utterance.voice = voice;"
        "utterance.onend = () => resolve(true);"
        "utterance.onerror = () => resolve(false);"
        "synth.speak(utterance);"
        "})"
    )


class BrowserSpeech(PollingSpeech):
    """Speech synthesis in the connected browser tab."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def unlock(self) -> None:
        # Browsers only allow speech after a user gesture; prime it with a blank utterance.
        self._client.run_javascript(
            "if (window.speechSynthesis && !window.speechSynthesis.speaking) {"
            "window.speechSynthesis.speak(new SpeechSynthesisUtterance(' '));"
            "}"
        )

    def cancel(self) -> None:
        self._client.run_javascript(
            "if (window.speechSynthesis && window.speechSynthesis.speaking) {"
            "window.speechSynthesis.cancel();"
            "}"
        )

    async def _utter(self, text: str) -> None:
        try:
            spoken = await self._client.run_javascript(_speak_js(text), timeout=SPEECH_TIMEOUT_SEC)
        except TimeoutError:
            logger.warning("Speech timed out: {!r}", text)
            return
        if spoken is False:
            logger.debug("Browser did not speak {!r}", text)


class BrowserWakeLock:
    def __init__(self, client: Client) -> None:
        self._client = client

    def acquire(self) -> None:
        self._client.run_javascript(
            "if ('wakeLock' in navigator) {"
            "navigator.wakeLock.request('screen')"
            ".then((lock) => { window.__workoutWakeLock = lock; })"
            ".catch((err) => console.warn('Wake Lock ignored:', err));"
            "}"
        )

    def release(self) -> None:
        self._client.run_javascript(
            "if (window.__workoutWakeLock) {"
            "window.__workoutWakeLock.release();"
            "window.__workoutWakeLock = null;"
            "}"
        )


_STYLE = """
<style>
  :root {
    --wt-bg: #0b1220;
    --wt-surface: #0f1b35;
    --wt-text: #e5e7eb;
    --wt-muted: #9caecf;
    --wt-exercise: #22c55e;
    --wt-rest: #38bdf8;
    --wt-transition: #f59e0b;
  }
  body {
    background: radial-gradient(circle at top, #17223f 0%, var(--wt-bg) 58%);
    color: var(--wt-text);
    font-family: Arial, "Segoe UI", sans-serif;
  }
  .wt-card {
    background: var(--wt-surface);
    border: 1px solid rgba(148, 163, 184, 0.22);
    border-radius: 14px;
  }
  .wt-muted { color: var(--wt-muted); }
  .wt-timer { font-size: 5rem; font-weight: 700; line-height: 1; }
  .wt-name { font-size: 2rem; font-weight: 700; }
  .wt-exercise { border-color: var(--wt-exercise); }
  .wt-rest { border-color: var(--wt-rest); }
  .wt-transition { border-color: var(--wt-transition); }
  .wt-tappable { cursor: pointer; }
  .wt-diagnostic { color: #ef4444; font-family: monospace; }
</style>
"""

_KIND_CLASSES = "wt-exercise wt-rest wt-transition"


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8088,
    config: TimerConfig = DEFAULT_CONFIG,
    storage_path: Path | None = None,
) -> int:
    store_backend = JsonFileStore(storage_path)

    @ui.page("/")
    def index(client: Client) -> None:
        controller = UIController(
            BrowserSpeech(client),
            BrowserWakeLock(client),
            store=WorkoutStore(store_backend),
            config=config,
        )
        ui.add_head_html(_STYLE)

        with ui.row().classes("w-full items-center justify-between"):
            ui.label("WORKOUT TIMER").classes("text-xl font-semibold tracking-wide")
            mute_btn = ui.button("Mute").props("outline")

        with ui.row().classes("w-full items-center bg-red-900 rounded p-2") as error_row:
            error_label = ui.label("").classes("text-white")
            dismiss_btn = ui.button("×").props("flat dense color=white")

        with ui.column().classes("w-full gap-2") as editor_view:
            with ui.row().classes("items-center gap-2"):
                prev_draft_btn = ui.button("<").props("outline dense")
                position_label = ui.label("1/1").classes("wt-muted")
                next_draft_btn = ui.button(">").props("outline dense")
                new_draft_btn = ui.button("New").props("outline dense")
                delete_draft_btn = ui.button("Delete").props("outline dense color=negative")
            editor = ui.textarea(value=controller.store.current_text).props(
                "outlined autogrow input-style='font-family: monospace'"
            ).classes("w-full")
            diagnostics_col = ui.column().classes("gap-0")
            start_btn = ui.button("Start").props("color=primary")

        with ui.column().classes("w-full gap-2") as workout_view:
            banner_label = ui.label("").classes("text-lg font-semibold")
            with ui.row().classes("w-full items-center justify-between"):
                elapsed_label = ui.label("00:00").classes("wt-muted")
            progress = ui.linear_progress(value=0.0, show_value=False)
            with ui.card().classes("wt-card w-full items-center") as display_card:
                headline_label = ui.label("").classes("text-lg wt-muted")
                name_label = ui.label("").classes("wt-name")
                side_label = ui.label("").classes("wt-muted")
                timer_label = ui.label("").classes("wt-timer")
                tap_hint = ui.label("Tap when done").classes("wt-muted")
                next_label = ui.label("").classes("wt-muted")
            with ui.row().classes("gap-2"):
                prev_btn = ui.button("Prev")
                play_pause_btn = ui.button("Pause")
                next_btn = ui.button("Next")
                stop_btn = ui.button("Stop").props("color=negative")

        def refresh_diagnostics() -> None:
            diagnostics_col.clear()
            with diagnostics_col:
                for diagnostic in controller.diagnostics(editor.value or ""):
                    ui.label(str(diagnostic)).classes("wt-diagnostic text-sm")

        def refresh_drafts() -> None:
            position_label.text = controller.store.position_label
            prev_draft_btn.set_enabled(controller.store.can_go_prev)
            next_draft_btn.set_enabled(controller.store.can_go_next)
            delete_draft_btn.text = controller.delete_label

        def refresh_ui() -> None:
            message = controller.error_message
            error_label.text = message or ""
            error_row.set_visibility(message is not None)

            editing = controller.editing
            editor_view.set_visibility(editing)
            workout_view.set_visibility(not editing)
            mute_btn.text = "Unmute" if controller.muted else "Mute"
            if editing:
                return

            view = controller.view()
            banner_label.text = view.banner
            elapsed_label.text = view.elapsed_text
            progress.value = view.progress_pct / 100.0
            headline_label.text = view.headline
            headline_label.set_visibility(bool(view.headline))
            name_label.text = view.display_name
            side_label.text = view.side_label
            timer_label.text = view.timer_text
            tap_hint.set_visibility(view.tappable)
            next_label.text = view.next_label

            display_card.classes(remove=_KIND_CLASSES)
            if view.step_kind is not None:
                display_card.classes(add=f"wt-{view.step_kind}")
            if view.tappable:
                display_card.classes(add="wt-tappable")
            else:
                display_card.classes(remove="wt-tappable")

            buttons = view.buttons
            play_pause_btn.text = buttons.play_pause_label
            play_pause_btn.set_enabled(buttons.play_pause_enabled)
            prev_btn.set_enabled(buttons.prev_enabled)
            next_btn.set_enabled(buttons.next_enabled)
            stop_btn.set_enabled(buttons.stop_enabled)

        def on_editor_change(e: ValueChangeEventArguments) -> None:
            controller.save_text(e.value or "")
            refresh_diagnostics()

        def load_draft(text: str) -> None:
            editor.value = text
            refresh_drafts()
            refresh_diagnostics()

        def on_start() -> None:
            if controller.start_workout(editor.value or ""):
                logger.info("Web session started")
            refresh_ui()

        def on_key(e: KeyEventArguments) -> None:
            if not e.action.keydown or e.action.repeat:
                return
            if controller.handle_key(e.key.code):
                refresh_ui()

        def run_action(action: Callable[[], object]) -> None:
            action()
            refresh_ui()

        editor.on_value_change(on_editor_change)
        prev_draft_btn.on_click(lambda: load_draft(controller.prev_workout()))
        next_draft_btn.on_click(lambda: load_draft(controller.next_workout()))
        new_draft_btn.on_click(lambda: load_draft(controller.new_workout()))
        delete_draft_btn.on_click(lambda: load_draft(controller.delete_workout()))
        start_btn.on_click(on_start)
        display_card.on("click", lambda: run_action(controller.tap))
        prev_btn.on_click(lambda: run_action(controller.skip_backward))
        play_pause_btn.on_click(lambda: run_action(controller.toggle_pause))
        next_btn.on_click(lambda: run_action(controller.skip_forward))
        stop_btn.on_click(lambda: run_action(controller.stop))
        mute_btn.on_click(lambda: run_action(controller.toggle_mute))
        dismiss_btn.on_click(lambda: run_action(controller.dismiss_error))
        ui.keyboard(on_key=on_key)
        client.on_disconnect(controller.stop)

        refresh_drafts()
        refresh_diagnostics()
        refresh_ui()
        ui.timer(REFRESH_INTERVAL_SEC, refresh_ui)

    ui.run(host=host, port=port, reload=False, title="Workout Timer")
    return 0
