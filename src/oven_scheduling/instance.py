"""Instance: the read-only problem description handed to the engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from oven_scheduling.resolution import to_seconds
from oven_scheduling.types import Attribute, Job, Machine


@dataclass(frozen=True)
class Instance:
    """Machines, jobs and attributes over one scheduling horizon.

    horizon_start is the epoch of the engine clock: every integer time in
    jobs and machines counts seconds from it.
    """

    name: str
    machines: dict[int, Machine]
    jobs: list[Job]
    attributes: dict[int, Attribute]
    horizon_start: datetime
    horizon_end: datetime
    initial_states: dict[int, int] | None = None
    creation_date: datetime | None = field(default=None, compare=False)

    @property
    def horizon_length(self) -> int:
        """Length of the scheduling horizon in seconds."""
        return to_seconds(self.horizon_end, self.horizon_start)

    def job(self, job_id: int) -> Job:
        for job in self.jobs:
            if job.id == job_id:
                return job
        raise KeyError(job_id)

    def with_jobs(self, jobs: list[Job]) -> Instance:
        """Sub-instance with the same machines and attributes."""
        return replace(self, jobs=list(jobs))
