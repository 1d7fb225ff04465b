"""Cooperative scheduler driving a :class:`Session` on asyncio.

Two independent periodic timers feed the session: the fall timer raises
:attr:`Event.FALL_TICK` and the countdown timer raises
:attr:`Event.COUNTDOWN_TICK`.  Both are started when the session enters
``running`` and cancelled as soon as it leaves it, so no tick outlives the
session that scheduled it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .config import GameConfig
from .game_state import Command, Event, GameState, Phase, Session


LOGGER = logging.getLogger(__name__)


class PeriodicTimer:
    """Call ``callback`` every ``interval_ms`` until cancelled."""

    def __init__(self, name: str, interval_ms: float, callback: Callable[[], object]) -> None:
        self.name = name
        self.interval = interval_ms / 1000.0
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the timer on the running event loop.

        Raises:
            RuntimeError: If no event loop is running.
        """
        if self.active:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"{self.name}-timer")
        LOGGER.debug("%s timer started (%.3fs)", self.name, self.interval)

    def cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        LOGGER.debug("%s timer cancelled", self.name)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._callback()


class SessionRunner:
    """Manage a session's timers with start/submit/reset/stop controls."""

    def __init__(self, session: Optional[Session] = None, config: Optional[GameConfig] = None) -> None:
        self.session = session or Session(config)
        cfg = self.session.config
        self.fall_timer = PeriodicTimer("fall", cfg.fall_interval_ms, self._on_fall)
        self.countdown_timer = PeriodicTimer("countdown", cfg.countdown_interval_ms, self._on_countdown)
        self._ended: Optional[asyncio.Event] = None
        self.session.subscribe(self._on_transition)

    @property
    def state(self) -> GameState:
        return self.session.state

    def start(self) -> GameState:
        """Start a new session; must be called from a running event loop."""

        return self.session.start()

    def submit(self, command: Command) -> GameState:
        """Apply a player command immediately."""

        return self.session.dispatch(command)

    def reset(self) -> GameState:
        return self.session.reset()

    def stop(self) -> None:
        self.fall_timer.cancel()
        self.countdown_timer.cancel()

    async def wait_ended(self) -> GameState:
        """Block until the current session has ended."""

        await self._ended_event().wait()
        return self.state

    def _ended_event(self) -> asyncio.Event:
        # Built on first use so it belongs to the loop that awaits it.
        if self._ended is None:
            self._ended = asyncio.Event()
            self._sync_ended()
        return self._ended

    def _sync_ended(self) -> None:
        if self._ended is None:
            return
        if self.state.phase is Phase.ENDED:
            self._ended.set()
        else:
            self._ended.clear()

    def _on_fall(self) -> None:
        self.session.dispatch(Event.FALL_TICK)

    def _on_countdown(self) -> None:
        self.session.dispatch(Event.COUNTDOWN_TICK)

    def _on_transition(self, previous: GameState, current: GameState) -> None:
        if current.phase is previous.phase:
            return
        self._sync_ended()
        if current.running:
            self.fall_timer.start()
            self.countdown_timer.start()
        else:
            self.stop()
