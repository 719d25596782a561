"""
Simulated "Watch an ad to export" Gate

State machine:

    IDLE --run()--> PLAYING --(playback)--> COMPLETED --(notice)--> IDLE

The user may dismiss the gate only while it is IDLE. Once playback has
started it runs to the end; cancel() is ignored from then on.
"""

import asyncio
from enum import Enum
from typing import Callable, Optional

import structlog

from microspend.config import get_settings


class AdState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    COMPLETED = "completed"


AdStateListener = Callable[[AdState], None]


class AdGate:
    """
    Serial two-phase delay in front of the CSV export.

    Durations come from ExportSettings unless given explicitly
    (tests pass 0).
    """

    def __init__(
        self,
        playback_seconds: Optional[float] = None,
        completed_seconds: Optional[float] = None,
    ):
        settings = get_settings().export
        self._playback_seconds = (
            settings.ad_playback_seconds if playback_seconds is None else playback_seconds
        )
        self._completed_seconds = (
            settings.ad_completed_seconds if completed_seconds is None else completed_seconds
        )
        self._state = AdState.IDLE
        self._cancelled = False
        self._listeners: list[AdStateListener] = []
        self._logger = structlog.get_logger(__name__)

    @property
    def state(self) -> AdState:
        return self._state

    @property
    def total_seconds(self) -> float:
        return self._playback_seconds + self._completed_seconds

    def add_listener(self, listener: AdStateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: AdStateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_state(self, state: AdState) -> None:
        self._state = state
        self._logger.debug("ad_gate_state", state=state.value)
        for listener in list(self._listeners):
            listener(state)

    def cancel(self) -> bool:
        """
        Dismiss the gate.

        Returns:
            True if dismissed, False if playback already started
        """
        if self._state != AdState.IDLE:
            return False
        self._cancelled = True
        return True

    async def run(self) -> bool:
        """
        Play the ad, show the completion notice, then return to IDLE.

        Returns:
            True if the gate completed, False if it was dismissed first
        """
        if self._cancelled:
            self._cancelled = False
            return False
        if self._state != AdState.IDLE:
            raise RuntimeError(f"Ad gate already running (state={self._state.value})")

        self._set_state(AdState.PLAYING)
        await asyncio.sleep(self._playback_seconds)

        self._set_state(AdState.COMPLETED)
        await asyncio.sleep(self._completed_seconds)

        self._set_state(AdState.IDLE)
        return True
