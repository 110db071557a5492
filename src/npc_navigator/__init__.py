"""Navigation controller for agents that follow points, objects and moving actors."""

__version__ = "0.1.0"

from npc_navigator.core import (
    DynamicActorRef,
    FixedPoint,
    FollowLoop,
    FollowState,
    NavigationAgent,
    StaticObjectRef,
    compute_waypoints,
    get_nearest,
)
from npc_navigator.errors import (
    InvalidArgumentError,
    NavigatorError,
    NoPathFoundError,
    NotFollowingError,
    UseAfterDestroyError,
)
from npc_navigator.modules.event_bus import ERRORED, EventBus
from npc_navigator.schemas import (
    AgentParameters,
    ComputationSettings,
    MoveSettings,
    NavigationError,
    PathStatus,
    PlaceReached,
    Vector3,
    Waypoint,
    WaypointAction,
)

__all__ = [
    "__version__",
    "AgentParameters",
    "compute_waypoints",
    "ComputationSettings",
    "DynamicActorRef",
    "ERRORED",
    "EventBus",
    "FixedPoint",
    "FollowLoop",
    "FollowState",
    "get_nearest",
    "InvalidArgumentError",
    "MoveSettings",
    "NavigationAgent",
    "NavigationError",
    "NavigatorError",
    "NoPathFoundError",
    "NotFollowingError",
    "PathStatus",
    "PlaceReached",
    "StaticObjectRef",
    "UseAfterDestroyError",
    "Vector3",
    "Waypoint",
    "WaypointAction",
]
