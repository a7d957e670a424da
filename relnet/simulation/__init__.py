"""Force simulation state, integrator and frame loop."""

from .loop import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler, SimulationLoop
from .state import SimulationState, is_settled, max_speed, tick

__all__ = [
    "AsyncioFrameScheduler",
    "FrameScheduler",
    "ManualFrameScheduler",
    "SimulationLoop",
    "SimulationState",
    "is_settled",
    "max_speed",
    "tick",
]
