"""Navigation targets.

A target is one of three variants, all resolved through the same
``resolve()`` coroutine:

- ``FixedPoint``: a point in world space.
- ``StaticObjectRef``: an object whose position is read once and cached.
- ``DynamicActorRef``: an actor re-read on every call; resolution waits
  for the actor's character to spawn.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Sequence

import numpy as np

from npc_navigator.core.interfaces import Actor, SceneObject
from npc_navigator.errors import InvalidArgumentError
from npc_navigator.schemas import Vector3


class TargetKind(str, Enum):
    fixed_point = "fixed_point"
    static_object = "static_object"
    dynamic_actor = "dynamic_actor"


class Target(ABC):
    """Something an agent can be sent toward."""

    kind: ClassVar[TargetKind]

    @abstractmethod
    async def resolve(self) -> Vector3:
        """Return the target's current position."""
        ...

    @abstractmethod
    def describe(self) -> str:
        ...

    @property
    def ready(self) -> bool:
        """True when ``resolve()`` returns without suspending."""
        return True


@dataclass(frozen=True)
class FixedPoint(Target):
    point: Vector3

    kind: ClassVar[TargetKind] = TargetKind.fixed_point

    async def resolve(self) -> Vector3:
        return self.point

    def describe(self) -> str:
        return f"point {self.point}"


@dataclass
class StaticObjectRef(Target):
    obj: SceneObject
    _resolved: Vector3 | None = field(default=None, init=False, repr=False)

    kind: ClassVar[TargetKind] = TargetKind.static_object

    async def resolve(self) -> Vector3:
        if self._resolved is None:
            self._resolved = self.obj.position
        return self._resolved

    def describe(self) -> str:
        return f"object {self.obj!r}"


@dataclass(frozen=True)
class DynamicActorRef(Target):
    actor: Actor

    kind: ClassVar[TargetKind] = TargetKind.dynamic_actor

    @property
    def spawned(self) -> bool:
        return self.actor.character is not None

    @property
    def ready(self) -> bool:
        return self.spawned

    async def resolve(self) -> Vector3:
        character = self.actor.character
        if character is None:
            character = await self.actor.wait_for_character()
        return character.position

    def describe(self) -> str:
        return f"actor {self.actor.name}"


def as_target(place: Any) -> Target:
    """Map a caller-supplied place onto a target variant.

    Raises:
        InvalidArgumentError: If ``place`` is none of the supported kinds.
    """
    if isinstance(place, Target):
        return place
    if isinstance(place, Vector3):
        return FixedPoint(place)
    if isinstance(place, Actor):
        return DynamicActorRef(place)
    if isinstance(place, SceneObject):
        return StaticObjectRef(place)
    if isinstance(place, np.ndarray) and place.shape == (3,):
        place = place.tolist()
    if isinstance(place, Sequence) and not isinstance(place, (str, bytes)) and len(place) == 3:
        try:
            return FixedPoint(Vector3.of(place))
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid point {place!r}: {e}") from e
    raise InvalidArgumentError(
        f"Place must be a Vector3, SceneObject, Actor or Target, got {type(place).__name__}",
        details={"type": type(place).__name__},
    )
