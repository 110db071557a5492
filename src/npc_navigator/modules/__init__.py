"""Event channels and simulated collaborators."""

from npc_navigator.modules.event_bus import ERRORED, EventBus

__all__ = ["ERRORED", "EventBus"]
