"""Waypoint traversal: turns a computed path into locomotor commands."""

from __future__ import annotations

import logging
from typing import Sequence

from npc_navigator.core.interfaces import Locomotor, MarkerSink
from npc_navigator.schemas import MoveSettings, Waypoint, WaypointAction
from npc_navigator.utils.config import MARKER_LIFETIME, MARKER_SIZE

logger = logging.getLogger(__name__)


class WaypointWalker:
    """Issues one move command per waypoint, in path order.

    Commands go out back to back without waiting for arrival; the
    locomotor queues and times its own motion. A ``jump`` waypoint
    triggers ``jump()`` before the move to that waypoint.
    """

    def __init__(
        self,
        locomotor: Locomotor,
        marker_sink: MarkerSink | None = None,
    ) -> None:
        self._locomotor = locomotor
        self._marker_sink = marker_sink

    def walk(self, waypoints: Sequence[Waypoint], settings: MoveSettings) -> int:
        """Drive the locomotor through ``waypoints``.

        Args:
            waypoints: Path in traversal order. Empty is a no-op.
            settings: ``visualize_path`` spawns a marker per waypoint.

        Returns:
            Number of move commands issued.
        """
        issued = 0
        for waypoint in waypoints:
            if settings.visualize_path:
                self._mark(waypoint)
            if waypoint.action is WaypointAction.jump:
                self._locomotor.jump()
            self._locomotor.move_to(waypoint.position)
            issued += 1

        logger.debug("Issued %d move command(s)", issued)
        return issued

    def _mark(self, waypoint: Waypoint) -> None:
        if self._marker_sink is None:
            logger.debug("visualize_path set but no marker sink attached")
            return
        try:
            self._marker_sink.spawn_marker(waypoint.position, MARKER_SIZE, MARKER_LIFETIME)
        except Exception as e:
            logger.warning("Marker sink failed at %s: %s", waypoint.position, e)
