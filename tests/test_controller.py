from __future__ import annotations

import asyncio

from workout_timer.core.display import SessionView
from workout_timer.core.state import Status
from workout_timer.ui.controller import UIController
from workout_timer.workout.store import MemoryStore, WorkoutStore

from conftest import MANUAL_TICKS, FakeClock, RecordingSpeech


def _controller(speech: RecordingSpeech, clock: FakeClock, **kwargs: object) -> UIController:
    return UIController(speech, config=MANUAL_TICKS, clock=clock, **kwargs)


def test_start_with_errors_shows_banner_that_expires(
    speech: RecordingSpeech, clock: FakeClock
) -> None:
    async def _run() -> None:
        controller = _controller(speech, clock)

        assert not controller.start_workout("Squats | lots\nRest | 10")

        assert controller.editing
        message = controller.error_message
        assert message is not None
        assert message.splitlines()[0].startswith("Line 1: Invalid duration or reps")
        assert message.splitlines()[1].startswith("Line 2: Rest cannot have reps")
        assert controller.store.current_text == "Squats | lots\nRest | 10"

        clock.advance(7_999)
        assert controller.error_message is not None
        clock.advance(1)
        assert controller.error_message is None

    asyncio.run(_run())


def test_empty_workout_reports_no_steps(speech: RecordingSpeech, clock: FakeClock) -> None:
    async def _run() -> None:
        controller = _controller(speech, clock)

        assert not controller.start_workout("## Nothing here")
        assert controller.error_message == (
            "No valid workout steps found. Please enter at least one step."
        )

    asyncio.run(_run())


def test_keyboard_shortcuts(speech: RecordingSpeech, clock: FakeClock) -> None:
    async def _run() -> None:
        controller = _controller(speech, clock)
        assert not controller.handle_key("Space")

        assert controller.start_workout("Plank | 30s\nPush-ups | 10")
        assert controller.handle_key("Space")
        assert controller.status == Status.PAUSED
        assert controller.handle_key("Space")
        assert controller.status == Status.IN_PROGRESS

        assert controller.handle_key("ArrowRight")
        assert controller.session.state.step_index == 2
        assert controller.handle_key("ArrowLeft")
        assert controller.session.state.step_index == 0
        assert not controller.handle_key("KeyX")

        assert controller.handle_key("Escape")
        assert controller.editing
        await controller.drain()

    asyncio.run(_run())


def test_tap_only_advances_tappable_steps(speech: RecordingSpeech, clock: FakeClock) -> None:
    async def _run() -> None:
        controller = _controller(speech, clock)
        controller.start_workout("Plank | 30s\nPush-ups | 10")

        controller.tap()
        assert controller.session.state.step_index == 0

        controller.skip_forward()
        controller.handle_key("Enter")
        assert controller.status == Status.DONE
        await controller.drain()

    asyncio.run(_run())


def test_draft_navigation(speech: RecordingSpeech, clock: FakeClock) -> None:
    controller = _controller(speech, clock, store=WorkoutStore(MemoryStore()))

    assert controller.delete_label == "Clear"
    assert controller.new_workout() == ""
    assert controller.delete_label == "Delete"
    controller.save_text("Rest | 5s")

    first = controller.prev_workout()
    assert controller.store.position_label == "1/2"
    assert controller.prev_workout() == first
    assert controller.next_workout() == "Rest | 5s"

    assert controller.delete_workout() == first
    assert controller.store.total == 1
    assert controller.diagnostics("Rest | 5") != []
    assert controller.diagnostics() == []


def test_mute_toggle(speech: RecordingSpeech, clock: FakeClock) -> None:
    async def _run() -> None:
        controller = _controller(speech, clock)

        assert controller.toggle_mute()
        controller.start_workout("Push-ups | 10")
        await controller.drain()
        assert speech.spoken == []

        assert not controller.toggle_mute()
        controller.stop()

    asyncio.run(_run())


def test_timer_error_surfaces_in_banner(speech: RecordingSpeech, clock: FakeClock) -> None:
    failing = {"on": False}

    def display(view: SessionView) -> None:
        if failing["on"]:
            raise RuntimeError("boom")

    async def _run() -> None:
        controller = _controller(speech, clock, display=display)
        controller.start_workout("Plank | 30s")

        failing["on"] = True
        controller.session.tick()

        assert controller.editing
        assert controller.error_message == "Timer error: boom"

    asyncio.run(_run())
