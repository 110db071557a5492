"""Configuration constants for the navigation controller."""

# =============================================================================
# Follow Loop
# =============================================================================

# Seconds to wait between successive path computations while following
DEFAULT_TIME_BETWEEN_COMPUTE: float = 0.07

# =============================================================================
# Pathfinding Parameters
# =============================================================================

# Default agent footprint passed to the pathfinding service
DEFAULT_AGENT_RADIUS: float = 2.0
DEFAULT_AGENT_HEIGHT: float = 5.0

# Distance between consecutive waypoints on a computed path
DEFAULT_WAYPOINT_SPACING: float = 4.0

# Vertical rise between waypoints that requires a jump
JUMP_HEIGHT_THRESHOLD: float = 1.5

# =============================================================================
# Visualization
# =============================================================================

# Edge length of the transient waypoint marker
MARKER_SIZE: float = 0.3

# Seconds a waypoint marker stays in the scene
MARKER_LIFETIME: float = 2.0

# =============================================================================
# Event Bus
# =============================================================================

# Events retained per bus for inspection (oldest dropped)
DEFAULT_EVENT_HISTORY: int = 256

# =============================================================================
# Demo
# =============================================================================

DEMO_FOLLOW_SECONDS: float = 1.0
DEMO_TARGET_SPEED: float = 6.0
