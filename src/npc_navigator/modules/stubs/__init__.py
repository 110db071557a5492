"""Simulated collaborators for tests and the demo."""

from npc_navigator.modules.stubs.pathfinding import (
    StraightLinePathfindingService,
    StraightLinePathQuery,
)
from npc_navigator.modules.stubs.world import (
    InMemoryWorld,
    LocomotorCommand,
    RecordingMarkerSink,
    SimulatedActor,
    SimulatedBody,
    SimulatedLocomotor,
    SimulatedObject,
)

__all__ = [
    "InMemoryWorld",
    "LocomotorCommand",
    "RecordingMarkerSink",
    "SimulatedActor",
    "SimulatedBody",
    "SimulatedLocomotor",
    "SimulatedObject",
    "StraightLinePathfindingService",
    "StraightLinePathQuery",
]
