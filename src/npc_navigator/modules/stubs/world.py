"""In-memory world, bodies and actors for tests and the demo."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from npc_navigator.core.interfaces import (
    Actor,
    AgentBody,
    Locomotor,
    MarkerSink,
    SceneObject,
    World,
)
from npc_navigator.schemas import ORIGIN, Vector3


@dataclass(frozen=True)
class LocomotorCommand:
    """One command received by a ``SimulatedLocomotor``."""

    kind: str  # "move_to" or "jump"
    point: Vector3 | None = None


class SimulatedLocomotor(Locomotor):
    """Records commands and snaps to each move target immediately."""

    def __init__(self, start: Vector3 = ORIGIN) -> None:
        self._position = start
        self.commands: list[LocomotorCommand] = []

    def move_to(self, point: Vector3) -> None:
        self.commands.append(LocomotorCommand("move_to", point))
        self._position = point

    def jump(self) -> None:
        self.commands.append(LocomotorCommand("jump"))

    def current_position(self) -> Vector3:
        return self._position

    def teleport(self, point: Vector3) -> None:
        """Set the position without recording a command."""
        self._position = point

    @property
    def moves(self) -> list[Vector3]:
        return [c.point for c in self.commands if c.kind == "move_to"]


class SimulatedBody(AgentBody):
    def __init__(self, name: str, locomotor: Locomotor | None = None) -> None:
        self._name = name
        self._locomotor = locomotor

    @property
    def name(self) -> str:
        return self._name

    @property
    def locomotor(self) -> Locomotor | None:
        return self._locomotor


class SimulatedObject(SceneObject):
    """A named object whose position can be moved by the test."""

    def __init__(self, name: str, position: Vector3 = ORIGIN) -> None:
        self.name = name
        self._position = position

    @property
    def position(self) -> Vector3:
        return self._position

    @position.setter
    def position(self, value: Vector3) -> None:
        self._position = value

    def __repr__(self) -> str:
        return f"SimulatedObject({self.name!r}, {self._position})"


class SimulatedActor(Actor):
    """An actor whose character is spawned and removed on demand."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._character: SimulatedObject | None = None
        self._spawned = asyncio.Event()

    @property
    def name(self) -> str:
        return self._name

    @property
    def character(self) -> SimulatedObject | None:
        return self._character

    def spawn(self, position: Vector3) -> SimulatedObject:
        self._character = SimulatedObject(f"{self._name}.character", position)
        self._spawned.set()
        return self._character

    def despawn(self) -> None:
        self._character = None
        self._spawned.clear()

    def move(self, position: Vector3) -> None:
        if self._character is None:
            raise RuntimeError(f"Actor {self._name} is not spawned")
        self._character.position = position

    async def wait_for_character(self) -> SimulatedObject:
        while self._character is None:
            await self._spawned.wait()
        return self._character

    def __repr__(self) -> str:
        return f"SimulatedActor({self._name!r})"


class InMemoryWorld(World):
    def __init__(self, actors: list[Actor] | None = None) -> None:
        self._actors: list[Actor] = list(actors or [])

    def add_actor(self, actor: Actor) -> Actor:
        self._actors.append(actor)
        return actor

    def remove_actor(self, actor: Actor) -> None:
        self._actors.remove(actor)

    def actors(self) -> list[Actor]:
        return list(self._actors)


@dataclass
class RecordingMarkerSink(MarkerSink):
    """Keeps every spawned marker position."""

    markers: list[Vector3] = field(default_factory=list)
    size: float | None = None

    def spawn_marker(self, position: Vector3, size: float, lifetime: float) -> None:
        self.markers.append(position)
        self.size = size
