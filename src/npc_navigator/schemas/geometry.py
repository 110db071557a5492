"""Geometry primitives shared by every navigation schema."""

from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, model_validator


class Vector3(BaseModel):
    """An immutable point or offset in world space.

    Accepts ``Vector3(x=1, y=2, z=3)`` as well as a 3-element sequence
    through ``Vector3.model_validate((1, 2, 3))`` or ``Vector3.of``.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        if isinstance(data, (tuple, list)):
            if len(data) != 3:
                raise ValueError(f"Vector3 needs 3 components, got {len(data)}")
            return {"x": data[0], "y": data[1], "z": data[2]}
        if isinstance(data, np.ndarray):
            return cls._from_sequence(data.tolist())
        return data

    @classmethod
    def of(cls, value: Vector3 | Sequence[float]) -> Vector3:
        if isinstance(value, Vector3):
            return value
        return cls.model_validate(value)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __mul__(self, k: float) -> Vector3:
        return Vector3(x=self.x * k, y=self.y * k, z=self.z * k)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: Vector3) -> float:
        return (self - other).magnitude

    def lerp(self, other: Vector3, t: float) -> Vector3:
        """Linear interpolation; ``t=0`` is self, ``t=1`` is other."""
        return self + (other - self) * t

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"


ORIGIN = Vector3()


class Box(BaseModel):
    """Axis-aligned box given by two opposite corners."""

    min_corner: Vector3
    max_corner: Vector3

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _ordered(self) -> Box:
        lo, hi = self.min_corner, self.max_corner
        if lo.x > hi.x or lo.y > hi.y or lo.z > hi.z:
            raise ValueError("min_corner must not exceed max_corner on any axis")
        return self

    def contains(self, point: Vector3) -> bool:
        lo, hi = self.min_corner, self.max_corner
        return (
            lo.x <= point.x <= hi.x
            and lo.y <= point.y <= hi.y
            and lo.z <= point.z <= hi.z
        )
