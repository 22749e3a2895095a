"""Configuration classes for flowtrace components."""

from dataclasses import dataclass


@dataclass
class PlaybackConfig:
    """Tick interval bounds for replaying a step trace."""

    # Interval used when the caller does not choose one
    default_interval_ms: int = 500

    min_interval_ms: int = 100
    max_interval_ms: int = 2000

    # Granularity of the speed control
    interval_step_ms: int = 100

    def clamp_interval(self, interval_ms: int) -> int:
        """Snap an interval to the step grid and keep it inside the bounds."""
        snapped = round(interval_ms / self.interval_step_ms) * self.interval_step_ms
        return max(self.min_interval_ms, min(snapped, self.max_interval_ms))


@dataclass
class EditorConfig:
    """Defaults applied when nodes and edges are created without explicit values."""

    default_capacity: int = 10
    default_x: float = 200.0
    default_y: float = 200.0


# Global configuration instances
PLAYBACK_CONFIG = PlaybackConfig()
EDITOR_CONFIG = EditorConfig()
