from __future__ import annotations

import asyncio
from typing import Callable, Optional

import pytest

from workout_timer.core.config import TimerConfig

# Ticks are driven by hand; the background timer never fires during a test.
MANUAL_TICKS = TimerConfig(tick_interval_ms=3_600_000)


class FakeClock:
    def __init__(self, start_ms: int = 1_000_000) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingSpeech:
    def __init__(self) -> None:
        self.spoken: list[str] = []
        self.pauses: list[Optional[int]] = []
        self.cancels = 0
        self.unlocked = False

    async def speak(
        self,
        text: str,
        pause_before_ms: int | None = None,
        cancel_on: Optional[Callable[[], bool]] = None,
    ) -> None:
        await asyncio.sleep(0)
        if cancel_on is not None and cancel_on():
            return
        self.spoken.append(text)
        self.pauses.append(pause_before_ms)

    def cancel(self) -> None:
        self.cancels += 1

    def unlock(self) -> None:
        self.unlocked = True


class RecordingWakeLock:
    def __init__(self) -> None:
        self.held = False
        self.acquired = 0

    def acquire(self) -> None:
        self.held = True
        self.acquired += 1

    def release(self) -> None:
        self.held = False


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def speech() -> RecordingSpeech:
    return RecordingSpeech()


@pytest.fixture
def wake_lock() -> RecordingWakeLock:
    return RecordingWakeLock()
