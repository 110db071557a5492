"""Straight-line pathfinding service for tests and the demo.

The route is the straight segment from start to end, split every
``waypoint_spacing`` units. The query reports ``no_path`` when the
segment crosses a blocked box or needs a jump the agent cannot make.
"""

from __future__ import annotations

import asyncio
import logging
import math

from npc_navigator.core.interfaces import PathfindingService, PathQuery
from npc_navigator.schemas import (
    AgentParameters,
    Box,
    PathResult,
    PathStatus,
    Vector3,
    Waypoint,
    WaypointAction,
)
from npc_navigator.utils.config import JUMP_HEIGHT_THRESHOLD

logger = logging.getLogger(__name__)

# Samples per waypoint interval when checking the segment against boxes
_SAMPLES_PER_STEP = 4


class StraightLinePathQuery(PathQuery):
    """Path handle over a set of blocked boxes.

    Records every query and the highest number of overlapping
    ``compute`` calls it has seen, so tests can check single-flight use.
    """

    def __init__(
        self,
        params: AgentParameters,
        blocked: list[Box] | None = None,
        latency: float = 0.0,
        jump_threshold: float = JUMP_HEIGHT_THRESHOLD,
    ) -> None:
        self._params = params
        self._blocked = blocked if blocked is not None else []
        self._latency = latency
        self._jump_threshold = jump_threshold
        self._closed = False

        self.queries: list[tuple[Vector3, Vector3]] = []
        self._in_flight = 0
        self.max_concurrency = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def params(self) -> AgentParameters:
        return self._params

    async def compute(self, start: Vector3, end: Vector3) -> PathResult:
        if self._closed:
            return PathResult(status=PathStatus.invalid, message="Path handle was closed")

        self.queries.append((start, end))
        self._in_flight += 1
        self.max_concurrency = max(self.max_concurrency, self._in_flight)
        try:
            if self._latency > 0:
                await asyncio.sleep(self._latency)
            return self._route(start, end)
        finally:
            self._in_flight -= 1

    def close(self) -> None:
        self._closed = True

    def _route(self, start: Vector3, end: Vector3) -> PathResult:
        distance = start.distance_to(end)
        steps = max(1, math.ceil(distance / self._params.waypoint_spacing))

        samples = steps * _SAMPLES_PER_STEP
        for i in range(samples + 1):
            probe = start.lerp(end, i / samples)
            if any(box.contains(probe) for box in self._blocked):
                logger.debug("Segment %s -> %s blocked at %s", start, end, probe)
                return PathResult.no_path()

        waypoints: list[Waypoint] = []
        previous = start
        for i in range(1, steps + 1):
            point = start.lerp(end, i / steps)
            action = WaypointAction.walk
            if point.y - previous.y > self._jump_threshold:
                if not self._params.agent_can_jump:
                    return PathResult.no_path("Route needs a jump the agent cannot make")
                action = WaypointAction.jump
            waypoints.append(Waypoint(position=point, action=action))
            previous = point
        return PathResult.success(waypoints)


class StraightLinePathfindingService(PathfindingService):
    """Creates one ``StraightLinePathQuery`` per agent."""

    def __init__(
        self,
        blocked: list[Box] | None = None,
        latency: float = 0.0,
    ) -> None:
        self.blocked: list[Box] = blocked if blocked is not None else []
        self._latency = latency
        self.created: list[StraightLinePathQuery] = []

    def block(self, box: Box) -> None:
        """Add an obstacle; affects existing and future handles."""
        self.blocked.append(box)

    def create_path(self, params: AgentParameters) -> StraightLinePathQuery:
        query = StraightLinePathQuery(params, blocked=self.blocked, latency=self._latency)
        self.created.append(query)
        return query
