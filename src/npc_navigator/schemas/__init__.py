"""Data contracts for the navigation controller."""

from npc_navigator.schemas.geometry import ORIGIN, Box, Vector3
from npc_navigator.schemas.navigation import (
    DEFAULT_COMPUTATION_SETTINGS,
    DEFAULT_MOVE_SETTINGS,
    AgentParameters,
    ComputationSettings,
    MoveSettings,
    NavigationError,
    PathResult,
    PathStatus,
    PlaceReached,
    Waypoint,
    WaypointAction,
)

__all__ = [
    "AgentParameters",
    "Box",
    "ComputationSettings",
    "DEFAULT_COMPUTATION_SETTINGS",
    "DEFAULT_MOVE_SETTINGS",
    "MoveSettings",
    "NavigationError",
    "ORIGIN",
    "PathResult",
    "PathStatus",
    "PlaceReached",
    "Vector3",
    "Waypoint",
    "WaypointAction",
]
