"""Narrow interfaces to speech output, screen wake lock and display sinks."""

from __future__ import annotations

import asyncio
import contextlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from loguru import logger

if TYPE_CHECKING:
    from workout_timer.core.display import SessionView


CancelPredicate = Callable[[], bool]
DisplaySink = Callable[["SessionView"], None]

CANCEL_POLL_SEC = 0.1


class SpeechService(Protocol):
    async def speak(
        self,
        text: str,
        pause_before_ms: int | None = None,
        cancel_on: Optional[CancelPredicate] = None,
    ) -> None: ...

    def cancel(self) -> None: ...

    def unlock(self) -> None: ...


class WakeLock(Protocol):
    def acquire(self) -> None: ...

    def release(self) -> None: ...


class PollingSpeech(ABC):
    """Shared speak() flow: optional pause, cancellation checks, one utterance.

    Subclasses implement ``_utter`` (resolve when speech ends) and ``cancel``.
    """

    async def speak(
        self,
        text: str,
        pause_before_ms: int | None = None,
        cancel_on: Optional[CancelPredicate] = None,
    ) -> None:
        if pause_before_ms is not None:
            await asyncio.sleep(pause_before_ms / 1000.0)
        if cancel_on is not None and cancel_on():
            logger.debug("Speech cancelled before start: {!r}", text)
            return

        watcher: asyncio.Task[None] | None = None
        if cancel_on is not None:
            watcher = asyncio.create_task(self._watch(cancel_on, text))
        try:
            await self._utter(text)
        finally:
            if watcher is not None:
                watcher.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await watcher

    def unlock(self) -> None:
        return None

    @abstractmethod
    def cancel(self) -> None: ...

    @abstractmethod
    async def _utter(self, text: str) -> None: ...

    async def _watch(self, cancel_on: CancelPredicate, text: str) -> None:
        while True:
            await asyncio.sleep(CANCEL_POLL_SEC)
            if cancel_on():
                logger.debug("Speech cancelled mid-playback: {!r}", text)
                self.cancel()
                return


class TerminalSpeech(PollingSpeech):
    """Prints phrases and holds for roughly the time a voice would need."""

    def __init__(self, words_per_sec: float = 2.5, echo: Callable[[str], None] = print) -> None:
        self._words_per_sec = words_per_sec
        self._echo = echo
        self._cancelled: asyncio.Event | None = None

    def cancel(self) -> None:
        if self._cancelled is not None:
            self._cancelled.set()

    async def _utter(self, text: str) -> None:
        self.cancel()
        cancelled = asyncio.Event()
        self._cancelled = cancelled
        self._echo(f"[SPEECH] {text}")
        hold_sec = max(0.3, len(text.split()) / self._words_per_sec)
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(cancelled.wait(), timeout=hold_sec)


class NullWakeLock:
    def acquire(self) -> None:
        return None

    def release(self) -> None:
        return None
