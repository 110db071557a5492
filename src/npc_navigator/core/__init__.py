"""Core navigation: interfaces, targets, move cycle and follow loop."""

from npc_navigator.core.agent import AgentEvents, NavigationAgent
from npc_navigator.core.controller import MoveController, compute_waypoints
from npc_navigator.core.follow import (
    CancellationToken,
    FollowLoop,
    FollowState,
    OperationCancelled,
)
from npc_navigator.core.interfaces import (
    Actor,
    AgentBody,
    Locomotor,
    MarkerSink,
    PathfindingService,
    PathQuery,
    SceneObject,
    World,
)
from npc_navigator.core.nearest import candidate_position, get_nearest
from npc_navigator.core.targets import (
    DynamicActorRef,
    FixedPoint,
    StaticObjectRef,
    Target,
    TargetKind,
    as_target,
)
from npc_navigator.core.walker import WaypointWalker

__all__ = [
    "Actor",
    "AgentBody",
    "AgentEvents",
    "as_target",
    "CancellationToken",
    "candidate_position",
    "compute_waypoints",
    "DynamicActorRef",
    "FixedPoint",
    "FollowLoop",
    "FollowState",
    "get_nearest",
    "Locomotor",
    "MarkerSink",
    "MoveController",
    "NavigationAgent",
    "OperationCancelled",
    "PathfindingService",
    "PathQuery",
    "SceneObject",
    "StaticObjectRef",
    "Target",
    "TargetKind",
    "WaypointWalker",
    "World",
]
