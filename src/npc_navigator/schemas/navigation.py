"""Schemas for paths, per-call settings and navigation events.

Settings are validated pydantic models with frozen defaults so a
caller can share one instance across agents. Events carry the
agent that raised them; listeners on the process-wide error bus
filter by agent themselves.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from npc_navigator.schemas.geometry import Vector3
from npc_navigator.utils.config import (
    DEFAULT_AGENT_HEIGHT,
    DEFAULT_AGENT_RADIUS,
    DEFAULT_TIME_BETWEEN_COMPUTE,
    DEFAULT_WAYPOINT_SPACING,
)


# =============================================================================
# Waypoints
# =============================================================================

class WaypointAction(str, Enum):
    """What the locomotor must do to reach a waypoint."""

    walk = "walk"
    jump = "jump"


class Waypoint(BaseModel):
    """One stop on a computed path."""

    position: Vector3
    action: WaypointAction = WaypointAction.walk

    model_config = ConfigDict(frozen=True)


class PathStatus(str, Enum):
    """Outcome of a path query."""

    success = "success"
    no_path = "no_path"
    invalid = "invalid"
    closest_no_path = "closest_no_path"
    closest_out_of_range = "closest_out_of_range"

    @property
    def walkable(self) -> bool:
        return self is PathStatus.success


class PathResult(BaseModel):
    """Result of ``PathQuery.compute``.

    Only a ``success`` result carries waypoints.
    """

    status: PathStatus
    waypoints: list[Waypoint] = Field(default_factory=list)
    message: str = ""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _failures_have_no_waypoints(self) -> PathResult:
        if not self.status.walkable and self.waypoints:
            raise ValueError(f"{self.status.value} result must not carry waypoints")
        return self

    @classmethod
    def success(cls, waypoints: list[Waypoint]) -> PathResult:
        return cls(status=PathStatus.success, waypoints=list(waypoints))

    @classmethod
    def no_path(cls, message: str = "No path found") -> PathResult:
        return cls(status=PathStatus.no_path, message=message)


# =============================================================================
# Settings
# =============================================================================

class MoveSettings(BaseModel):
    """Per-call options for ``move_to`` and ``follow``."""

    ignore_no_path_error: bool = False
    visualize_path: bool = False

    model_config = ConfigDict(frozen=True)


class ComputationSettings(BaseModel):
    """Per-agent options for the follow loop."""

    time_between_compute: float = Field(default=DEFAULT_TIME_BETWEEN_COMPUTE, ge=0.0)

    model_config = ConfigDict(frozen=True)


class AgentParameters(BaseModel):
    """Agent footprint handed to the pathfinding service when the
    agent's path query is created."""

    agent_radius: float = Field(default=DEFAULT_AGENT_RADIUS, gt=0.0)
    agent_height: float = Field(default=DEFAULT_AGENT_HEIGHT, gt=0.0)
    agent_can_jump: bool = True
    waypoint_spacing: float = Field(default=DEFAULT_WAYPOINT_SPACING, gt=0.0)

    model_config = ConfigDict(frozen=True)


DEFAULT_MOVE_SETTINGS = MoveSettings()
DEFAULT_COMPUTATION_SETTINGS = ComputationSettings()


# =============================================================================
# Events
# =============================================================================

class NavigationError(BaseModel):
    """Published on the error bus when a path computation fails.

    ``agent`` is the ``NavigationAgent`` that raised it and is excluded
    from serialisation; ``agent_name`` identifies it in logs.
    """

    agent: Any = Field(exclude=True)
    agent_name: str
    status: PathStatus
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class PlaceReached(BaseModel):
    """Published on an agent's ``place_reached`` bus after a walk."""

    agent: Any = Field(exclude=True)
    agent_name: str
    position: Vector3
    timestamp: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
