"""One move cycle: query a path, walk it, report the outcome."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from npc_navigator.core.interfaces import Locomotor, PathQuery
from npc_navigator.core.walker import WaypointWalker
from npc_navigator.errors import NoPathFoundError
from npc_navigator.modules.event_bus import EventBus
from npc_navigator.schemas import (
    MoveSettings,
    NavigationError,
    PathResult,
    PathStatus,
    PlaceReached,
    Vector3,
    Waypoint,
)
from npc_navigator.utils.logging import LogLevel, StructuredLogger

if TYPE_CHECKING:
    from npc_navigator.core.agent import NavigationAgent
    from npc_navigator.core.follow import CancellationToken

logger = logging.getLogger(__name__)


async def compute_waypoints(
    path_query: PathQuery,
    start: Vector3,
    end: Vector3,
) -> list[Waypoint]:
    """Await a path query and return its waypoints.

    Useful when the caller wants the route without moving an agent.

    Raises:
        NoPathFoundError: If the query does not succeed.
    """
    result = await path_query.compute(start, end)
    if not result.status.walkable:
        raise NoPathFoundError(
            result.message or "No path found",
            details={"status": result.status.value, "start": start.to_tuple(), "end": end.to_tuple()},
        )
    return list(result.waypoints)


class MoveController:
    """Runs a single resolve-query-walk cycle for one agent.

    Holds the agent's single-flight lock across the query and the
    walk, so a follow loop and a direct ``move_to`` on the same agent
    never interleave.
    """

    def __init__(
        self,
        agent: NavigationAgent,
        path_query: PathQuery,
        locomotor: Locomotor,
        walker: WaypointWalker,
        error_bus: EventBus,
        place_reached: EventBus,
        slog: StructuredLogger | None = None,
    ) -> None:
        self._agent = agent
        self._path_query = path_query
        self._locomotor = locomotor
        self._walker = walker
        self._error_bus = error_bus
        self._place_reached = place_reached
        self._slog = slog
        self._lock = asyncio.Lock()

    async def move_to(
        self,
        point: Vector3,
        settings: MoveSettings,
        token: CancellationToken | None = None,
    ) -> bool:
        """Move the agent toward ``point``.

        Args:
            point: Destination in world space.
            settings: Error suppression and visualization options.
            token: Follow-loop token; a cancellation observed once the
                query returns skips the walk.

        Returns:
            True if a path was found and walked.
        """
        name = self._agent.name
        async with self._lock:
            start = self._locomotor.current_position()
            result = await self._query(start, point)

            if token is not None and token.cancelled:
                logger.debug("Agent %s: cancelled during path query, walk skipped", name)
                return False

            if not result.status.walkable:
                self._report(result, settings)
                return False

            self._agent._set_moving(True)
            issued = self._walker.walk(result.waypoints, settings)
            if self._slog is not None:
                self._slog.move(f"Walked {issued} waypoint(s) toward {point}", agent=name)

            arrived_at = self._locomotor.current_position()
            delivered = self._place_reached.emit(
                PlaceReached(agent=self._agent, agent_name=name, position=arrived_at)
            )
            if self._slog is not None:
                self._slog.event(f"PlaceReached at {arrived_at} -> {delivered} subscriber(s)", agent=name)
            if not self._agent.following:
                self._agent._set_moving(False)
            return True

    async def _query(self, start: Vector3, end: Vector3) -> PathResult:
        try:
            result = await self._path_query.compute(start, end)
        except Exception as e:
            logger.warning("Agent %s: path query raised %s", self._agent.name, e)
            return PathResult(status=PathStatus.invalid, message=str(e) or type(e).__name__)

        if self._slog is not None:
            self._slog.path(
                f"{start} -> {end}: {result.status.value} ({len(result.waypoints)} waypoints)",
                agent=self._agent.name,
            )
        return result

    def _report(self, result: PathResult, settings: MoveSettings) -> None:
        name = self._agent.name
        if settings.ignore_no_path_error:
            logger.debug("Agent %s: %s suppressed", name, result.status.value)
            return

        message = result.message or "No path found"
        logger.warning("Agent %s: %s (%s)", name, message, result.status.value)
        if self._slog is not None:
            self._slog.path(message, level=LogLevel.WARNING, agent=name, status=result.status.value)
        delivered = self._error_bus.emit(
            NavigationError(
                agent=self._agent,
                agent_name=name,
                status=result.status,
                message=message,
            )
        )
        if self._slog is not None:
            self._slog.event(f"NavigationError on {self._error_bus.name} -> {delivered} subscriber(s)", agent=name)
