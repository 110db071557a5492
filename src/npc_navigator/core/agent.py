"""Navigation agent: the public handle for moving one body around.

Usage::

    agent = NavigationAgent(body, path_service)

    await agent.move_to(Vector3(x=10, y=0, z=4))

    loop = agent.follow(DynamicActorRef(player))
    ...
    agent.stop_following()
    agent.destroy()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from npc_navigator.core.controller import MoveController
from npc_navigator.core.follow import FollowLoop
from npc_navigator.core.interfaces import (
    AgentBody,
    Locomotor,
    MarkerSink,
    PathfindingService,
    PathQuery,
    World,
)
from npc_navigator.core.nearest import Candidate, get_nearest
from npc_navigator.core.targets import as_target
from npc_navigator.core.walker import WaypointWalker
from npc_navigator.errors import InvalidArgumentError, NotFollowingError, UseAfterDestroyError
from npc_navigator.modules.event_bus import ERRORED, EventBus
from npc_navigator.schemas import (
    DEFAULT_COMPUTATION_SETTINGS,
    DEFAULT_MOVE_SETTINGS,
    AgentParameters,
    ComputationSettings,
    MoveSettings,
    NavigationError,
    PlaceReached,
    Vector3,
)
from npc_navigator.utils.logging import StructuredLogger, get_logger

logger = logging.getLogger(__name__)


@dataclass
class AgentEvents:
    """Per-agent event channels."""

    place_reached: EventBus[PlaceReached]


class NavigationAgent:
    """Owns one body's path query, locomotion and follow loop.

    Path failures never raise out of ``move_to`` or ``follow``; they
    are published as ``NavigationError`` on ``error_bus`` unless the
    call's ``MoveSettings.ignore_no_path_error`` is set.

    Starting a follow while another is active cancels the old loop
    first. At most one cycle of the old loop may still be finishing
    when the new one starts; the per-agent lock keeps their path
    queries from overlapping.
    """

    def __init__(
        self,
        body: AgentBody,
        path_service: PathfindingService,
        pathfinding_params: AgentParameters | None = None,
        computation_settings: ComputationSettings | None = None,
        *,
        error_bus: EventBus[NavigationError] | None = None,
        world: World | None = None,
        marker_sink: MarkerSink | None = None,
        slog: StructuredLogger | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            body: Body to navigate; must expose a locomotor.
            path_service: Creates the agent's path query.
            pathfinding_params: Footprint for the path query.
            computation_settings: Follow-loop timing.
            error_bus: Bus for ``NavigationError`` events (process-wide
                ``ERRORED`` by default).
            world: Default candidate source for ``get_nearest``.
            marker_sink: Receives waypoint markers when visualizing.
            slog: Structured logger for path/follow/lifecycle records
                (the process-wide ``get_logger()`` by default).

        Raises:
            InvalidArgumentError: If ``body`` is not an AgentBody or has
                no locomotor.
        """
        if not isinstance(body, AgentBody):
            raise InvalidArgumentError(
                f"Agent must be an AgentBody, got {type(body).__name__}"
            )
        locomotor = body.locomotor
        if locomotor is None:
            raise InvalidArgumentError(
                f"Agent {body.name} has to have a locomotor",
                details={"agent": body.name},
            )

        self._body = body
        self._name = body.name
        self._locomotor: Locomotor | None = locomotor
        self._params = pathfinding_params or AgentParameters()
        self._computation_settings = computation_settings or DEFAULT_COMPUTATION_SETTINGS
        self._error_bus = error_bus if error_bus is not None else ERRORED
        self._world = world
        self._slog = slog if slog is not None else get_logger()

        self._path_query: PathQuery | None = path_service.create_path(self._params)
        self.events = AgentEvents(place_reached=EventBus(name=f"{self._name}.place_reached"))

        self._walker: WaypointWalker | None = WaypointWalker(locomotor, marker_sink)
        self._controller: MoveController | None = MoveController(
            agent=self,
            path_query=self._path_query,
            locomotor=locomotor,
            walker=self._walker,
            error_bus=self._error_bus,
            place_reached=self.events.place_reached,
            slog=self._slog,
        )
        self._follow: FollowLoop | None = None
        self._is_moving = False
        self._destroyed = False

        self._slog.lifecycle("Agent created", agent=self._name, params=self._params.model_dump())

    @classmethod
    def new(
        cls,
        body: AgentBody,
        path_service: PathfindingService,
        pathfinding_params: AgentParameters | None = None,
        computation_settings: ComputationSettings | None = None,
        **kwargs: Any,
    ) -> NavigationAgent:
        return cls(body, path_service, pathfinding_params, computation_settings, **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def body(self) -> AgentBody:
        self._ensure_alive()
        return self._body

    @property
    def is_moving(self) -> bool:
        return self._is_moving

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def following(self) -> bool:
        return self._follow is not None and self._follow.active

    @property
    def follow_loop(self) -> FollowLoop | None:
        """The active follow loop, if any."""
        return self._follow

    @property
    def computation_settings(self) -> ComputationSettings:
        return self._computation_settings

    @property
    def pathfinding_params(self) -> AgentParameters:
        return self._params

    @property
    def error_bus(self) -> EventBus[NavigationError]:
        return self._error_bus

    @property
    def path_query(self) -> PathQuery:
        self._ensure_alive()
        return self._path_query

    @property
    def position(self) -> Vector3:
        self._ensure_alive()
        return self._locomotor.current_position()

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    async def move_to(self, place: Any, move_settings: MoveSettings | None = None) -> bool:
        """Compute a path to ``place`` and walk it.

        Args:
            place: Vector3, 3-sequence or array, SceneObject, Actor or Target.
            move_settings: Defaults to ``MoveSettings()``.

        Returns:
            True if a path was found and its waypoints were issued.

        Raises:
            InvalidArgumentError: For an unsupported ``place``.
            UseAfterDestroyError: After ``destroy()``.
        """
        self._ensure_alive()
        target = as_target(place)
        point = await target.resolve()
        self._ensure_alive()
        return await self._controller.move_to(point, move_settings or DEFAULT_MOVE_SETTINGS)

    def follow(self, target: Any, move_settings: MoveSettings | None = None) -> FollowLoop:
        """Start following ``target`` and return without waiting.

        Must be called with an event loop running. An already active
        follow is cancelled before the new one starts. The returned loop
        is already ``running`` unless it waits for an actor to spawn.

        Raises:
            InvalidArgumentError: For an unsupported ``target``.
            UseAfterDestroyError: After ``destroy()``.
        """
        self._ensure_alive()
        resolved = as_target(target)

        if self.following:
            logger.info("Agent %s: replacing active follow", self._name)
            self._follow.cancel()

        loop = FollowLoop(
            self._controller,
            resolved,
            move_settings or DEFAULT_MOVE_SETTINGS,
            self._computation_settings.time_between_compute,
            agent_name=self._name,
            slog=self._slog,
            on_finished=self._follow_finished,
        )
        loop.start()
        self._follow = loop
        self._slog.follow(f"Following {resolved.describe()}", agent=self._name)
        return loop

    def stop_following(self) -> bool:
        """Cancel the active follow.

        Returns:
            The agent's resulting ``is_moving`` (always False).

        Raises:
            NotFollowingError: If no follow is active.
            UseAfterDestroyError: After ``destroy()``.
        """
        self._ensure_alive()
        if not self.following:
            raise NotFollowingError(f"Agent {self._name} isn't following anyone")

        self._follow.cancel()
        self._follow = None
        self._is_moving = False
        return self._is_moving

    def get_nearest(
        self,
        candidates: Iterable[Candidate] | None = None,
        predicate: Callable[[Candidate], bool] | None = None,
    ) -> Candidate | None:
        """``get_nearest`` measured from this agent's position."""
        self._ensure_alive()
        return get_nearest(self.position, candidates, predicate, world=self._world)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Release everything the agent owns.

        Cancels an active follow first. A cycle already in flight may
        still finish; call ``stop_following`` and await the loop
        beforehand when that matters.

        Raises:
            UseAfterDestroyError: If already destroyed.
        """
        self._ensure_alive()

        if self._follow is not None:
            self._follow.cancel()
            self._follow = None

        if self._path_query is not None:
            try:
                self._path_query.close()
            except Exception as e:
                logger.warning("Agent %s: path query close failed: %s", self._name, e)
            self._path_query = None

        self.events.place_reached.close()

        self._controller = None
        self._walker = None
        self._locomotor = None
        self._world = None
        self._is_moving = False
        self._destroyed = True

        self._slog.lifecycle("Agent destroyed", agent=self._name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise UseAfterDestroyError(f"Agent {self._name} was destroyed")

    def _set_moving(self, moving: bool) -> None:
        if not self._destroyed:
            self._is_moving = moving

    def _follow_finished(self, loop: FollowLoop) -> None:
        if self._follow is loop:
            self._follow = None
            self._set_moving(False)

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else ("following" if self.following else "idle")
        return f"NavigationAgent({self._name!r}, {state})"
