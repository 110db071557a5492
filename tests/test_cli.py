"""Tests for the command line interface and demo run."""

from __future__ import annotations

import asyncio

import pytest
from typer.testing import CliRunner

from npc_navigator import __version__
from npc_navigator.cli import app, run_demo
from npc_navigator.utils.logging import LogCategory, StructuredLogger

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


@pytest.mark.slow
def test_demo_command() -> None:
    result = runner.invoke(app, ["demo", "--seconds", "0.3", "--interval", "0.02", "--spawn-delay", "0.02"])
    assert result.exit_code == 0
    assert "Follow demo" in result.stdout
    assert "cycles" in result.stdout


@pytest.mark.slow
def test_demo_follows_target() -> None:
    report = asyncio.run(run_demo(0.3, 0.02, 0.02, blocked=False, visualize=True))
    assert report.cycles >= 2
    assert report.successful_cycles == len(report.reached)
    assert report.moves > 0
    assert report.markers == report.moves
    assert report.errors == []
    assert report.final_position.distance_to(report.target_position) < 10.0


@pytest.mark.slow
def test_blocked_demo_reports_errors() -> None:
    report = asyncio.run(run_demo(0.2, 0.02, 0.02, blocked=True, visualize=False))
    assert report.moves == 0
    assert report.reached == []
    assert len(report.errors) == report.cycles
    assert report.errors


def test_demo_records_system_entries() -> None:
    slog = StructuredLogger()
    asyncio.run(run_demo(0.05, 0.02, 0.0, blocked=False, visualize=False, slog=slog))
    messages = [e.message for e in slog.filter_by_category(LogCategory.SYSTEM)]
    assert messages[0].startswith("Demo started")
    assert messages[-1].startswith("Demo finished")
