"""Exceptions raised by the navigation controller.

Path failures during ``move_to`` and ``follow`` are not raised: they
are published as ``NavigationError`` events on the error bus. The
exceptions here cover programming errors and the standalone
``compute_waypoints`` helper.
"""

from __future__ import annotations

from typing import Any


class NavigatorError(Exception):
    code = "NAVIGATOR_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error_code": self.code,
            "error": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class NoPathFoundError(NavigatorError):
    """The path query finished but no route exists."""

    code = "NO_PATH"


class InvalidArgumentError(NavigatorError, ValueError):
    """Unsupported target kind or an agent body missing a capability."""

    code = "INVALID_ARGUMENT"


class NotFollowingError(NavigatorError):
    code = "NOT_FOLLOWING"


class UseAfterDestroyError(NavigatorError, RuntimeError):
    code = "USE_AFTER_DESTROY"


__all__ = [
    "InvalidArgumentError",
    "NavigatorError",
    "NoPathFoundError",
    "NotFollowingError",
    "UseAfterDestroyError",
]
