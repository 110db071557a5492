"""Tests for the simulated path service and world."""

from __future__ import annotations

import asyncio

import pytest

from npc_navigator.modules.stubs import (
    SimulatedActor,
    StraightLinePathfindingService,
)
from npc_navigator.schemas import (
    AgentParameters,
    Box,
    PathStatus,
    Vector3,
    WaypointAction,
)


def _compute(service: StraightLinePathfindingService, params: AgentParameters, start, end):
    query = service.create_path(params)
    return asyncio.run(query.compute(Vector3.of(start), Vector3.of(end)))


class TestStraightLinePath:
    def test_waypoints_are_spaced_and_exclude_start(self) -> None:
        result = _compute(
            StraightLinePathfindingService(),
            AgentParameters(waypoint_spacing=4.0),
            (0, 0, 0),
            (10, 0, 0),
        )
        assert result.status is PathStatus.success
        xs = [round(w.position.x, 6) for w in result.waypoints]
        assert len(xs) == 3
        assert xs[-1] == 10
        assert 0 not in xs

    def test_rise_becomes_jump(self) -> None:
        result = _compute(
            StraightLinePathfindingService(),
            AgentParameters(waypoint_spacing=10.0),
            (0, 0, 0),
            (2, 3, 0),
        )
        assert [w.action for w in result.waypoints] == [WaypointAction.jump]

    def test_rise_without_jump_has_no_path(self) -> None:
        result = _compute(
            StraightLinePathfindingService(),
            AgentParameters(waypoint_spacing=10.0, agent_can_jump=False),
            (0, 0, 0),
            (2, 3, 0),
        )
        assert result.status is PathStatus.no_path
        assert "jump" in result.message

    def test_blocked_segment(self) -> None:
        wall = Box(min_corner=Vector3(x=4, y=-1, z=-1), max_corner=Vector3(x=5, y=1, z=1))
        service = StraightLinePathfindingService(blocked=[wall])
        assert _compute(service, AgentParameters(), (0, 0, 0), (10, 0, 0)).status is PathStatus.no_path
        assert _compute(service, AgentParameters(), (0, 0, 5), (10, 0, 5)).status is PathStatus.success

    def test_block_applies_to_existing_handles(self) -> None:
        service = StraightLinePathfindingService()
        query = service.create_path(AgentParameters())
        service.block(Box(min_corner=Vector3(x=1, y=-1, z=-1), max_corner=Vector3(x=2, y=1, z=1)))
        result = asyncio.run(query.compute(Vector3(), Vector3(x=3, y=0, z=0)))
        assert result.status is PathStatus.no_path

    def test_closed_handle_is_invalid(self) -> None:
        service = StraightLinePathfindingService()
        query = service.create_path(AgentParameters())
        query.close()
        result = asyncio.run(query.compute(Vector3(), Vector3(x=1, y=0, z=0)))
        assert result.status is PathStatus.invalid
        assert query.queries == []


class TestSimulatedActor:
    def test_move_requires_spawn(self) -> None:
        with pytest.raises(RuntimeError):
            SimulatedActor("p").move(Vector3(x=1, y=0, z=0))

    def test_wait_for_character(self) -> None:
        actor = SimulatedActor("p")

        async def scenario():
            asyncio.get_running_loop().call_later(0.01, actor.spawn, Vector3(x=4, y=0, z=0))
            return await asyncio.wait_for(actor.wait_for_character(), timeout=1.0)

        character = asyncio.run(scenario())
        assert character.position == Vector3(x=4, y=0, z=0)

    def test_despawn(self) -> None:
        actor = SimulatedActor("p")
        actor.spawn(Vector3())
        actor.despawn()
        assert actor.character is None
