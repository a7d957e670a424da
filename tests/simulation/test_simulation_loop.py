"""Tests for frame scheduling of the force simulation."""

from __future__ import annotations

import asyncio
import random
from typing import List

from relnet.config import AppConfig, SimulationConfig
from relnet.contracts import Entity
from relnet.simulation import AsyncioFrameScheduler, ManualFrameScheduler, SimulationLoop, SimulationState


def _state(count: int = 3, seed: int = 5) -> SimulationState:
    entities = [Entity(id=f"e{index}", affinity_score=50 + index) for index in range(count)]
    return SimulationState.create(entities, 800, 500, rng=random.Random(seed))


def test_loop_ticks_once_per_frame_and_keeps_one_frame_pending() -> None:
    scheduler = ManualFrameScheduler()
    seen: List[int] = []
    loop = SimulationLoop(scheduler, _state(), on_tick=lambda state: seen.append(state.tick_count))

    loop.start()
    assert scheduler.pending_count == 1

    ran = scheduler.run_frames(3)

    assert ran == 3
    assert seen == [1, 2, 3]
    assert loop.state.tick_count == 3
    assert scheduler.pending_count == 1


def test_stop_cancels_pending_frame() -> None:
    scheduler = ManualFrameScheduler()
    loop = SimulationLoop(scheduler, _state())
    loop.start()

    loop.stop()

    assert not loop.running
    assert scheduler.pending_count == 0
    assert scheduler.run_frames(5) == 0


def test_replacing_state_never_runs_two_loops() -> None:
    scheduler = ManualFrameScheduler()
    loop = SimulationLoop(scheduler, _state())
    loop.start()
    scheduler.run_frames(2)

    replacement = loop.state.replace_entities([Entity(id="solo", affinity_score=90)], rng=random.Random(1))
    loop.replace_state(replacement)

    assert scheduler.pending_count == 1
    scheduler.run_frames(1)
    assert loop.state.version == 1
    assert loop.state.tick_count == 1


def test_replacing_state_from_tick_callback_keeps_single_frame() -> None:
    scheduler = ManualFrameScheduler()
    replacement = _state(count=2, seed=9)
    loop: SimulationLoop

    def _swap(state: SimulationState) -> None:
        if state.tick_count == 1 and state.version == 0:
            loop.replace_state(SimulationState(
                nodes=replacement.nodes,
                links=replacement.links,
                width=replacement.width,
                height=replacement.height,
                version=1,
            ))

    loop = SimulationLoop(scheduler, _state(), on_tick=_swap)
    loop.start()
    scheduler.run_frames(1)

    assert scheduler.pending_count == 1
    assert loop.state.version == 1


def test_empty_graph_does_not_schedule_frames() -> None:
    scheduler = ManualFrameScheduler()
    loop = SimulationLoop(scheduler, SimulationState.create([], 800, 500))

    loop.start()

    assert loop.mounted
    assert scheduler.pending_count == 0


def test_idle_detection_stops_scheduling_until_woken() -> None:
    config = AppConfig(simulation=SimulationConfig(idle_speed_threshold=1e9))
    scheduler = ManualFrameScheduler()
    loop = SimulationLoop(scheduler, _state(), config=config)
    loop.start()

    scheduler.run_frames(1)
    assert scheduler.pending_count == 0

    loop.wake()
    assert scheduler.pending_count == 1


def test_loop_runs_forever_without_idle_threshold() -> None:
    scheduler = ManualFrameScheduler()
    loop = SimulationLoop(scheduler, _state())
    loop.start()

    assert scheduler.run_frames(200) == 200
    assert loop.running


def test_asyncio_scheduler_drives_loop_until_stopped() -> None:
    async def _run() -> tuple:
        scheduler = AsyncioFrameScheduler(0.001)
        loop = SimulationLoop(scheduler, _state())
        loop.start()
        await asyncio.sleep(0.05)
        loop.stop()
        stopped_at = loop.state.tick_count
        await asyncio.sleep(0.02)
        return stopped_at, loop.state.tick_count

    stopped_at, final = asyncio.run(_run())

    assert stopped_at > 0
    assert final == stopped_at
