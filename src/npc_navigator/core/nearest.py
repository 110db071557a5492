"""Nearest-candidate lookup by straight-line distance."""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar, Union

import numpy as np

from npc_navigator.core.interfaces import Actor, SceneObject, World
from npc_navigator.errors import InvalidArgumentError
from npc_navigator.schemas import Vector3

Candidate = Union[Actor, SceneObject]
C = TypeVar("C", Actor, SceneObject)


def candidate_position(candidate: Candidate) -> Vector3 | None:
    """Current position of an actor's character or a scene object.

    Returns None for an actor whose character has not spawned.
    """
    if isinstance(candidate, Actor):
        character = candidate.character
        return character.position if character is not None else None
    if isinstance(candidate, SceneObject):
        return candidate.position
    raise InvalidArgumentError(
        f"Candidate must be an Actor or SceneObject, got {type(candidate).__name__}"
    )


def get_nearest(
    position: Vector3,
    candidates: Iterable[C] | None = None,
    predicate: Callable[[C], bool] | None = None,
    *,
    world: World | None = None,
) -> C | None:
    """Return the candidate closest to ``position``.

    Args:
        position: Point to measure from.
        candidates: Actors or scene objects to scan. Defaults to
            ``world.actors()``.
        predicate: Optional filter; rejected candidates are skipped.
        world: Source of default candidates.

    Returns:
        The nearest candidate, the first one in scan order on ties, or
        None when nothing passes the filter.

    Raises:
        InvalidArgumentError: If neither ``candidates`` nor ``world`` is given.
    """
    if candidates is None:
        if world is None:
            raise InvalidArgumentError("get_nearest needs candidates or a world to scan")
        candidates = world.actors()

    kept: list[C] = []
    points: list[tuple[float, float, float]] = []
    for candidate in candidates:
        if predicate is not None and not predicate(candidate):
            continue
        where = candidate_position(candidate)
        if where is None:
            continue
        kept.append(candidate)
        points.append(where.to_tuple())

    if not kept:
        return None

    distances = np.linalg.norm(np.asarray(points, dtype=float) - position.as_array(), axis=1)
    # argmin returns the first index among equal minima
    return kept[int(np.argmin(distances))]
