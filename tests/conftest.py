"""Configuration for pytest."""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from npc_navigator.core.interfaces import PathfindingService, PathQuery
from npc_navigator.modules.event_bus import EventBus
from npc_navigator.modules.stubs import (
    InMemoryWorld,
    RecordingMarkerSink,
    SimulatedActor,
    SimulatedBody,
    SimulatedLocomotor,
    StraightLinePathfindingService,
)
from npc_navigator.schemas import (
    AgentParameters,
    ComputationSettings,
    PathResult,
    Vector3,
    Waypoint,
    WaypointAction,
)


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "timing: marks tests that depend on wall-clock delays"
    )


# =============================================================================
# Scripted path service
# =============================================================================

class ScriptedPathQuery(PathQuery):
    """Path query that replays queued results.

    When the queue is empty ``default`` is returned. ``gate`` (if set)
    holds every compute call until the test sets it.
    """

    def __init__(self, default: PathResult | None = None) -> None:
        self.results: list[PathResult | Exception] = []
        self.default = default or PathResult.no_path()
        self.calls: list[tuple[Vector3, Vector3]] = []
        self.gate: asyncio.Event | None = None
        self.entered = 0
        self.closed = False

    async def compute(self, start: Vector3, end: Vector3) -> PathResult:
        self.calls.append((start, end))
        self.entered += 1
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if self.results else self.default
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


class ScriptedPathfindingService(PathfindingService):
    def __init__(self, query: ScriptedPathQuery | None = None) -> None:
        self.query = query or ScriptedPathQuery()
        self.params: AgentParameters | None = None

    def create_path(self, params: AgentParameters) -> ScriptedPathQuery:
        self.params = params
        return self.query


def make_path(*points: tuple[float, float, float], jumps: set[int] | None = None) -> PathResult:
    """Build a successful PathResult; ``jumps`` holds indices of jump waypoints."""
    jumps = jumps or set()
    return PathResult.success([
        Waypoint(
            position=Vector3.of(p),
            action=WaypointAction.jump if i in jumps else WaypointAction.walk,
        )
        for i, p in enumerate(points)
    ])


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def error_bus() -> EventBus:
    """Isolated error bus so tests never share the process-wide one."""
    return EventBus(name="test.errored")


@pytest.fixture
def errors(error_bus: EventBus) -> list:
    received: list = []
    error_bus.subscribe(received.append)
    return received


@pytest.fixture
def locomotor() -> SimulatedLocomotor:
    return SimulatedLocomotor(start=Vector3(x=0, y=0, z=0))


@pytest.fixture
def body(locomotor: SimulatedLocomotor) -> SimulatedBody:
    return SimulatedBody("npc", locomotor)


@pytest.fixture
def scripted_service() -> ScriptedPathfindingService:
    return ScriptedPathfindingService()


@pytest.fixture
def line_service() -> StraightLinePathfindingService:
    return StraightLinePathfindingService()


@pytest.fixture
def markers() -> RecordingMarkerSink:
    return RecordingMarkerSink()


@pytest.fixture
def fast_settings() -> ComputationSettings:
    return ComputationSettings(time_between_compute=0.01)


@pytest.fixture
def world() -> InMemoryWorld:
    return InMemoryWorld()


@pytest.fixture
def player(world: InMemoryWorld) -> SimulatedActor:
    actor = SimulatedActor("player")
    world.add_actor(actor)
    return actor


@pytest.fixture
def wait_until() -> Callable:
    """Poll ``predicate`` on the running loop until true or timeout."""

    async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.005)

    return _wait_until
