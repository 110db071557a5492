"""Tests for the single move cycle and the waypoint helper."""

from __future__ import annotations

import asyncio

import pytest

from conftest import ScriptedPathfindingService, ScriptedPathQuery, make_path
from npc_navigator.core import CancellationToken, NavigationAgent, compute_waypoints
from npc_navigator.errors import NoPathFoundError
from npc_navigator.modules.event_bus import EventBus
from npc_navigator.modules.stubs import SimulatedBody, SimulatedLocomotor
from npc_navigator.schemas import (
    MoveSettings,
    NavigationError,
    PathResult,
    PathStatus,
    PlaceReached,
    Vector3,
)


@pytest.fixture
def agent(
    body: SimulatedBody,
    scripted_service: ScriptedPathfindingService,
    error_bus: EventBus,
) -> NavigationAgent:
    return NavigationAgent(body, scripted_service, error_bus=error_bus)


class TestComputeWaypoints:
    def test_returns_waypoints(self) -> None:
        query = ScriptedPathQuery(default=make_path((1, 0, 0), (2, 0, 0)))
        waypoints = asyncio.run(
            compute_waypoints(query, Vector3(), Vector3(x=2, y=0, z=0))
        )
        assert [w.position.x for w in waypoints] == [1, 2]

    def test_raises_on_no_path(self) -> None:
        query = ScriptedPathQuery(default=PathResult.no_path())
        with pytest.raises(NoPathFoundError) as exc_info:
            asyncio.run(compute_waypoints(query, Vector3(), Vector3(x=9, y=0, z=0)))
        assert exc_info.value.details["status"] == "no_path"
        assert exc_info.value.to_payload()["error_code"] == "NO_PATH"


class TestReachableTarget:
    def test_commands_match_path_order(
        self,
        agent: NavigationAgent,
        scripted_service: ScriptedPathfindingService,
        locomotor: SimulatedLocomotor,
        errors: list,
    ) -> None:
        scripted_service.query.results.append(
            make_path((1, 0, 0), (1, 0, 1), (2, 0, 1), (2, 3, 1), jumps={3})
        )

        assert asyncio.run(agent.move_to(Vector3(x=2, y=3, z=1))) is True

        kinds = [c.kind for c in locomotor.commands]
        assert kinds == ["move_to", "move_to", "move_to", "jump", "move_to"]
        assert [p.to_tuple() for p in locomotor.moves] == [
            (1, 0, 0), (1, 0, 1), (2, 0, 1), (2, 3, 1),
        ]
        assert errors == []

    def test_query_uses_current_position(
        self,
        agent: NavigationAgent,
        scripted_service: ScriptedPathfindingService,
        locomotor: SimulatedLocomotor,
    ) -> None:
        locomotor.teleport(Vector3(x=5, y=0, z=5))
        scripted_service.query.default = make_path((6, 0, 6))
        asyncio.run(agent.move_to((6, 0, 6)))
        start, end = scripted_service.query.calls[0]
        assert start == Vector3(x=5, y=0, z=5)
        assert end == Vector3(x=6, y=0, z=6)

    def test_exactly_one_place_reached(
        self,
        agent: NavigationAgent,
        scripted_service: ScriptedPathfindingService,
    ) -> None:
        scripted_service.query.default = make_path((1, 0, 0), (4, 0, 0))
        reached: list[PlaceReached] = []
        moving_during_event: list[bool] = []

        def on_reached(event: PlaceReached) -> None:
            reached.append(event)
            moving_during_event.append(agent.is_moving)

        agent.events.place_reached.subscribe(on_reached)
        asyncio.run(agent.move_to(Vector3(x=4, y=0, z=0)))

        assert len(reached) == 1
        assert reached[0].position == Vector3(x=4, y=0, z=0)
        assert reached[0].agent is agent
        assert moving_during_event == [True]
        assert agent.is_moving is False


class TestUnreachableTarget:
    def test_publishes_one_error_per_call(
        self,
        agent: NavigationAgent,
        locomotor: SimulatedLocomotor,
        errors: list,
    ) -> None:
        async def attempt_twice() -> list[bool]:
            return [
                await agent.move_to(Vector3(x=9, y=0, z=0)),
                await agent.move_to(Vector3(x=9, y=0, z=0)),
            ]

        assert asyncio.run(attempt_twice()) == [False, False]
        assert len(errors) == 2
        error: NavigationError = errors[0]
        assert error.agent is agent
        assert error.status is PathStatus.no_path
        assert error.message == "No path found"
        assert locomotor.commands == []

    def test_ignore_no_path_error_publishes_nothing(
        self,
        agent: NavigationAgent,
        errors: list,
    ) -> None:
        settings = MoveSettings(ignore_no_path_error=True)
        assert asyncio.run(agent.move_to(Vector3(x=9, y=0, z=0), settings)) is False
        assert errors == []

    def test_query_exception_becomes_invalid_error(
        self,
        agent: NavigationAgent,
        scripted_service: ScriptedPathfindingService,
        errors: list,
    ) -> None:
        scripted_service.query.results.append(RuntimeError("navmesh not built"))
        assert asyncio.run(agent.move_to(Vector3(x=1, y=0, z=0))) is False
        assert len(errors) == 1
        assert errors[0].status is PathStatus.invalid
        assert "navmesh not built" in errors[0].message

    def test_no_place_reached_on_failure(self, agent: NavigationAgent) -> None:
        reached: list = []
        agent.events.place_reached.subscribe(reached.append)
        asyncio.run(agent.move_to(Vector3(x=9, y=0, z=0)))
        assert reached == []


class TestCancellationCheckpoint:
    def test_cancel_during_query_skips_walk(
        self,
        body: SimulatedBody,
        locomotor: SimulatedLocomotor,
        error_bus: EventBus,
    ) -> None:
        query = ScriptedPathQuery(default=make_path((1, 0, 0)))
        agent = NavigationAgent(body, ScriptedPathfindingService(query), error_bus=error_bus)

        async def scenario() -> bool:
            query.gate = asyncio.Event()
            token = CancellationToken()
            controller = agent._controller
            task = asyncio.create_task(
                controller.move_to(Vector3(x=1, y=0, z=0), MoveSettings(), token=token)
            )
            await asyncio.sleep(0.01)
            token.cancel()
            query.gate.set()
            return await task

        assert asyncio.run(scenario()) is False
        assert len(query.calls) == 1
        assert locomotor.commands == []

    def test_moves_on_same_agent_are_serialized(
        self,
        body: SimulatedBody,
        error_bus: EventBus,
    ) -> None:
        query = ScriptedPathQuery(default=make_path((1, 0, 0)))
        agent = NavigationAgent(body, ScriptedPathfindingService(query), error_bus=error_bus)

        async def scenario() -> int:
            query.gate = asyncio.Event()
            first = asyncio.create_task(agent.move_to(Vector3(x=1, y=0, z=0)))
            second = asyncio.create_task(agent.move_to(Vector3(x=1, y=0, z=0)))
            await asyncio.sleep(0.02)
            in_flight = query.entered
            query.gate.set()
            await asyncio.gather(first, second)
            return in_flight

        assert asyncio.run(scenario()) == 1
        assert len(query.calls) == 2
