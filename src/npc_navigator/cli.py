"""CLI entry point for the navigation controller."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field

import typer
from rich.console import Console
from rich.table import Table

from npc_navigator.core import DynamicActorRef, NavigationAgent
from npc_navigator.modules.event_bus import EventBus
from npc_navigator.modules.stubs import (
    InMemoryWorld,
    RecordingMarkerSink,
    SimulatedActor,
    SimulatedBody,
    SimulatedLocomotor,
    StraightLinePathfindingService,
)
from npc_navigator.schemas import (
    Box,
    ComputationSettings,
    MoveSettings,
    NavigationError,
    PlaceReached,
    Vector3,
)
from npc_navigator.utils.config import (
    DEFAULT_TIME_BETWEEN_COMPUTE,
    DEMO_FOLLOW_SECONDS,
    DEMO_TARGET_SPEED,
)
from npc_navigator.utils.logging import LogLevel, StructuredLogger, get_logger, set_logger

app = typer.Typer(
    name="npc-navigator",
    help="Path-following navigation controller",
    add_completion=False,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@dataclass
class DemoReport:
    """What happened during a demo run."""

    cycles: int = 0
    successful_cycles: int = 0
    moves: int = 0
    jumps: int = 0
    markers: int = 0
    reached: list[PlaceReached] = field(default_factory=list)
    errors: list[NavigationError] = field(default_factory=list)
    final_position: Vector3 | None = None
    target_position: Vector3 | None = None


async def run_demo(
    seconds: float,
    interval: float,
    spawn_delay: float,
    blocked: bool,
    visualize: bool,
    slog: StructuredLogger | None = None,
) -> DemoReport:
    """Follow an actor circling the origin for ``seconds``.

    The actor spawns after ``spawn_delay`` seconds. With ``blocked``
    the whole area is walled off, so every cycle reports an error.
    """
    report = DemoReport()
    slog = slog if slog is not None else get_logger()
    slog.system(
        f"Demo started: {seconds}s, interval {interval}s",
        blocked=blocked,
        visualize=visualize,
    )

    blocked_boxes = []
    if blocked:
        blocked_boxes.append(
            Box(
                min_corner=Vector3(x=-100, y=-100, z=-100),
                max_corner=Vector3(x=100, y=100, z=100),
            )
        )
    service = StraightLinePathfindingService(blocked=blocked_boxes)
    errors: EventBus[NavigationError] = EventBus(name="demo.errored")
    errors.subscribe(report.errors.append)

    locomotor = SimulatedLocomotor(start=Vector3(x=-20, y=0, z=0))
    player = SimulatedActor("player")
    world = InMemoryWorld([player])
    markers = RecordingMarkerSink()

    agent = NavigationAgent(
        SimulatedBody("npc", locomotor),
        service,
        computation_settings=ComputationSettings(time_between_compute=interval),
        error_bus=errors,
        world=world,
        marker_sink=markers,
        slog=slog,
    )
    agent.events.place_reached.subscribe(report.reached.append)

    loop = agent.follow(DynamicActorRef(player), MoveSettings(visualize_path=visualize))

    await asyncio.sleep(spawn_delay)
    player.spawn(Vector3(x=10, y=0, z=0))

    elapsed = 0.0
    tick = 0.05
    while elapsed < seconds:
        await asyncio.sleep(tick)
        elapsed += tick
        angle = elapsed * DEMO_TARGET_SPEED / 10.0
        player.move(Vector3(x=10 * math.cos(angle), y=0, z=10 * math.sin(angle)))

    agent.stop_following()
    await loop.wait()

    report.cycles = loop.cycles
    report.successful_cycles = loop.successful_cycles
    report.moves = len(locomotor.moves)
    report.jumps = sum(1 for c in locomotor.commands if c.kind == "jump")
    report.markers = len(markers.markers)
    report.final_position = locomotor.current_position()
    report.target_position = player.character.position if player.character else None

    agent.destroy()
    slog.system(
        f"Demo finished after {report.cycles} cycle(s)",
        errors=len(report.errors),
    )
    return report


@app.command()
def demo(
    seconds: float = typer.Option(
        DEMO_FOLLOW_SECONDS,
        "--seconds",
        "-s",
        help="How long to follow the target",
    ),
    interval: float = typer.Option(
        DEFAULT_TIME_BETWEEN_COMPUTE,
        "--interval",
        "-i",
        help="Seconds between path computations",
    ),
    spawn_delay: float = typer.Option(
        0.1,
        "--spawn-delay",
        help="Seconds before the target spawns",
    ),
    blocked: bool = typer.Option(
        False,
        "--blocked",
        help="Wall off the map so no path exists",
    ),
    visualize: bool = typer.Option(
        False,
        "--visualize",
        help="Spawn a marker at every waypoint",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging",
    ),
) -> None:
    """Follow a simulated moving actor and summarize the run."""
    setup_logging(verbose)
    slog = StructuredLogger(level=LogLevel.DEBUG if verbose else LogLevel.INFO)
    set_logger(slog)

    report = asyncio.run(run_demo(seconds, interval, spawn_delay, blocked, visualize))

    console = Console()
    table = Table(title="Follow demo")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("cycles", str(report.cycles))
    table.add_row("successful cycles", str(report.successful_cycles))
    table.add_row("move commands", str(report.moves))
    table.add_row("jumps", str(report.jumps))
    table.add_row("markers", str(report.markers))
    table.add_row("place reached", str(len(report.reached)))
    table.add_row("errors", str(len(report.errors)))
    table.add_row("final position", str(report.final_position))
    table.add_row("target position", str(report.target_position))
    console.print(table)

    stats = slog.get_statistics()
    console.print(f"[dim]log entries: {stats['total']} ({stats['warnings']} warnings)[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    from npc_navigator import __version__
    typer.echo(f"npc-navigator v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
