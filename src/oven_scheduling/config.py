"""Engine configuration."""

from __future__ import annotations

from dataclasses import dataclass

from oven_scheduling.resolution import SECONDS_PER_MINUTE


@dataclass(frozen=True)
class GreedyConfig:
    """Tunable parameters of the greedy engine. Immutable.

    time_step: seconds the simulated clock advances per step.
    max_time_window: how many steps past the batch start the batch filler
        may look for late-released jobs.
    """

    time_step: int = SECONDS_PER_MINUTE
    max_time_window: int = 1

    def __post_init__(self) -> None:
        if self.time_step <= 0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if self.max_time_window < 0:
            raise ValueError(
                f"max_time_window must be >= 0, got {self.max_time_window}"
            )


DEFAULT_CONFIG = GreedyConfig()
