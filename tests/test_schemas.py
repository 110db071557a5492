"""Tests for navigation schemas."""

from __future__ import annotations

import numpy as np
import pytest
from pydantic import ValidationError

from npc_navigator.schemas import (
    AgentParameters,
    Box,
    ComputationSettings,
    MoveSettings,
    NavigationError,
    PathResult,
    PathStatus,
    Vector3,
    Waypoint,
    WaypointAction,
)
from npc_navigator.utils.config import DEFAULT_TIME_BETWEEN_COMPUTE


class TestVector3:
    def test_from_sequence(self) -> None:
        assert Vector3.model_validate((1, 2, 3)) == Vector3(x=1, y=2, z=3)
        assert Vector3.of([4, 5, 6]).to_tuple() == (4.0, 5.0, 6.0)
        assert Vector3.of(np.array([1.0, 0.0, 0.0])).x == 1.0

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Vector3.model_validate((1, 2))

    def test_distance_and_lerp(self) -> None:
        a = Vector3(x=0, y=0, z=0)
        b = Vector3(x=3, y=4, z=0)
        assert a.distance_to(b) == pytest.approx(5.0)
        assert a.lerp(b, 0.5) == Vector3(x=1.5, y=2, z=0)

    def test_frozen_and_hashable(self) -> None:
        v = Vector3(x=1, y=1, z=1)
        with pytest.raises(ValidationError):
            v.x = 2
        assert len({v, Vector3(x=1, y=1, z=1)}) == 1


class TestBox:
    def test_contains(self) -> None:
        box = Box(min_corner=Vector3(x=0, y=0, z=0), max_corner=Vector3(x=2, y=2, z=2))
        assert box.contains(Vector3(x=1, y=1, z=1))
        assert not box.contains(Vector3(x=3, y=1, z=1))

    def test_corners_must_be_ordered(self) -> None:
        with pytest.raises(ValidationError):
            Box(min_corner=Vector3(x=5, y=0, z=0), max_corner=Vector3(x=0, y=0, z=0))


class TestPathResult:
    def test_failure_cannot_carry_waypoints(self) -> None:
        with pytest.raises(ValidationError):
            PathResult(
                status=PathStatus.no_path,
                waypoints=[Waypoint(position=Vector3())],
            )

    def test_constructors(self) -> None:
        ok = PathResult.success([Waypoint(position=Vector3(x=1, y=0, z=0))])
        assert ok.status is PathStatus.success
        assert ok.status.walkable
        missing = PathResult.no_path()
        assert missing.waypoints == []
        assert missing.message == "No path found"
        assert not missing.status.walkable


class TestSettings:
    def test_defaults(self) -> None:
        settings = MoveSettings()
        assert settings.ignore_no_path_error is False
        assert settings.visualize_path is False
        assert ComputationSettings().time_between_compute == DEFAULT_TIME_BETWEEN_COMPUTE
        assert DEFAULT_TIME_BETWEEN_COMPUTE == pytest.approx(0.07)

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ComputationSettings(time_between_compute=-1)

    def test_spacing_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AgentParameters(waypoint_spacing=0)

    def test_waypoint_default_action(self) -> None:
        assert Waypoint(position=Vector3()).action is WaypointAction.walk


class TestNavigationError:
    def test_agent_excluded_from_dump(self) -> None:
        agent = object()
        error = NavigationError(
            agent=agent,
            agent_name="npc",
            status=PathStatus.no_path,
            message="No path found",
        )
        assert error.agent is agent
        dumped = error.model_dump(mode="json")
        assert "agent" not in dumped
        assert dumped["status"] == "no_path"
        assert dumped["agent_name"] == "npc"
