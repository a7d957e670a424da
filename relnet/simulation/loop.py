"""Frame scheduling for the force simulation."""
from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Callable, Dict, Hashable, Optional

from typing_extensions import Protocol

from ..config import AppConfig, load_config
from .state import SimulationState, is_settled, tick

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """Host clock that runs one callback per display frame."""

    def request_frame(self, callback: FrameCallback) -> Hashable:
        """Schedule ``callback`` for the next frame and return a cancel handle."""

    def cancel_frame(self, handle: Hashable) -> None:
        """Cancel a frame scheduled by :meth:`request_frame`."""


class ManualFrameScheduler:
    """Scheduler driven explicitly by the caller, for tests and headless runs."""

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Hashable) -> None:
        self._pending.pop(handle, None)  # type: ignore[arg-type]

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def run_frames(self, count: int = 1) -> int:
        """Run up to ``count`` frames and return how many actually ran.

        Callbacks requested while a frame runs are deferred to the next frame.
        """

        ran = 0
        for _ in range(count):
            if not self._pending:
                break
            for handle in list(self._pending):
                callback = self._pending.pop(handle, None)
                if callback is not None:
                    callback()
            ran += 1
        return ran


class AsyncioFrameScheduler:
    """Scheduler backed by ``loop.call_later`` on a single asyncio event loop."""

    def __init__(self, interval_seconds: float, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._interval = interval_seconds
        self._loop = loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self._interval, callback)

    def cancel_frame(self, handle: Hashable) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()


class SimulationLoop:
    """Advance a :class:`SimulationState` once per scheduled frame.

    At most one frame is pending at any time, so replacing the state never
    leaves two loops integrating the same nodes.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        state: SimulationState,
        *,
        on_tick: Optional[Callable[[SimulationState], None]] = None,
        config: Optional[AppConfig] = None,
        dt: float = 1.0,
    ) -> None:
        self._scheduler = scheduler
        self._state = state
        self._on_tick = on_tick
        self._config = config or load_config()
        self._dt = dt
        self._handle: Optional[Hashable] = None
        self._mounted = False

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def running(self) -> bool:
        """Whether a frame is currently scheduled."""

        return self._handle is not None

    @property
    def mounted(self) -> bool:
        return self._mounted

    def start(self) -> None:
        """Begin ticking; a no-op when already started."""

        if self._mounted:
            return
        self._mounted = True
        LOGGER.info("Starting simulation loop (version=%d, nodes=%d)", self._state.version, len(self._state.nodes))
        self._schedule()

    def stop(self) -> None:
        """Cancel the pending frame and stop scheduling new ones."""

        self._mounted = False
        self._cancel()
        LOGGER.info("Stopped simulation loop after %d ticks", self._state.tick_count)

    def replace_state(self, state: SimulationState) -> None:
        """Swap in a new snapshot, restarting the frame chain if mounted."""

        self._cancel()
        self._state = state
        if self._mounted:
            self._schedule()

    def wake(self) -> None:
        """Resume ticking after the loop went idle."""

        if self._mounted:
            self._schedule()

    def _schedule(self) -> None:
        if self._handle is not None or not self._state.nodes:
            return
        self._handle = self._scheduler.request_frame(self._on_frame)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel_frame(self._handle)
            self._handle = None

    def _on_frame(self) -> None:
        self._handle = None
        self._state = tick(self._state, self._dt, self._config)
        if self._on_tick is not None:
            self._on_tick(self._state)
        if not self._mounted:
            return
        threshold = self._config.simulation.idle_speed_threshold
        if threshold is not None and is_settled(self._state, threshold):
            LOGGER.debug("Simulation settled after %d ticks; going idle", self._state.tick_count)
            return
        self._schedule()
