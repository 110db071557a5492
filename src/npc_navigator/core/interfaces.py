"""Abstract base classes for the collaborators of the navigation core.

The core depends only on these interfaces and the schemas. Engine
bindings, simulations and test doubles implement them; the in-memory
versions live in ``npc_navigator.modules.stubs``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from npc_navigator.schemas import AgentParameters, PathResult, Vector3


# =============================================================================
# Pathfinding
# =============================================================================


class PathQuery(ABC):
    """A path handle owned by exactly one agent.

    Implementations may suspend inside ``compute`` while the search
    runs; they are never invoked concurrently for the same agent.
    """

    @abstractmethod
    async def compute(self, start: Vector3, end: Vector3) -> PathResult:
        """Compute a route from ``start`` to ``end``.

        Args:
            start: Agent's current position.
            end: Destination point.

        Returns:
            A PathResult; only ``success`` results carry waypoints.
        """
        ...

    def close(self) -> None:
        """Release engine resources held by the handle.

        Optional - handles with nothing to release may ignore it.
        """
        pass


class PathfindingService(ABC):
    """Factory for per-agent path handles."""

    @abstractmethod
    def create_path(self, params: AgentParameters) -> PathQuery:
        ...


# =============================================================================
# Locomotion
# =============================================================================


class Locomotor(ABC):
    """Fire-and-forget actuator that physically moves the agent.

    Commands are queued by the implementation; none of them report
    arrival.
    """

    @abstractmethod
    def move_to(self, point: Vector3) -> None:
        ...

    @abstractmethod
    def jump(self) -> None:
        ...

    @abstractmethod
    def current_position(self) -> Vector3:
        ...


class AgentBody(ABC):
    """The entity being navigated.

    A body without a locomotor cannot be navigated.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def locomotor(self) -> Locomotor | None:
        ...


# =============================================================================
# World queries
# =============================================================================


class SceneObject(ABC):
    """Anything in the world with a position."""

    @property
    @abstractmethod
    def position(self) -> Vector3:
        ...


class Actor(ABC):
    """A participant whose character may not be spawned yet."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def character(self) -> SceneObject | None:
        """The spawned character, or None while not spawned."""
        ...

    @abstractmethod
    async def wait_for_character(self) -> SceneObject:
        """Suspend until the character exists and return it."""
        ...


class World(ABC):
    """Default source of candidates for nearest-target lookups."""

    @abstractmethod
    def actors(self) -> list[Actor]:
        ...


# =============================================================================
# Visualization
# =============================================================================


class MarkerSink(ABC):
    """Receives transient waypoint markers when path visualization is on."""

    @abstractmethod
    def spawn_marker(self, position: Vector3, size: float, lifetime: float) -> None:
        ...
