"""Shared types: jobs, machines, attributes, batches and InvalidInstanceError.

All times are integers in seconds from the scheduling horizon start.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Job:
    """Immutable description of one job.

    Invariants:
        - min_time <= max_time
        - earliest_start <= latest_end
        - every eligible machine has an entry in attribute_id_per_machine
    """

    id: int
    name: str
    earliest_start: int
    latest_end: int
    min_time: int
    max_time: int
    size: int
    eligible_machines: tuple[int, ...]
    attribute_id_per_machine: dict[int, int] = field(default_factory=dict)

    def attribute_on(self, machine_id: int) -> int:
        """Attribute id this job requires on the given machine."""
        return self.attribute_id_per_machine[machine_id]

    def is_eligible(self, machine_id: int) -> bool:
        return machine_id in self.eligible_machines


@dataclass(frozen=True)
class Machine:
    """Immutable oven description.

    Shift i is the half-open interval
    [availability_start[i], availability_end[i]). Shifts are sorted and
    non-overlapping.
    """

    id: int
    name: str
    min_cap: int
    max_cap: int
    availability_start: tuple[int, ...]
    availability_end: tuple[int, ...]

    @property
    def shift_count(self) -> int:
        return len(self.availability_start)


@dataclass(frozen=True)
class Attribute:
    """Setup costs and times from this attribute to every attribute.

    Both vectors are indexed by the 0-based position of the target attribute
    in the sorted list of attribute ids.
    """

    id: int
    name: str
    setup_costs: tuple[int, ...]
    setup_times: tuple[int, ...]


@dataclass
class Batch:
    """Group of jobs processed together on one machine.

    Mutable while the batch filler grows it; left alone afterwards.
    """

    id: int
    machine: Machine
    start_time: int
    end_time: int
    attribute: Attribute

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class BatchAssignment:
    """A job placed in a batch. The batch itself lives in the Output arena."""

    job: Job
    batch_id: int


class SolutionType(Enum):
    OPTIMAL_SOLUTION_FOUND = "OptimalSolutionFound"
    VALID_SOLUTION_FOUND = "ValidSolutionFound"
    UNVALIDATED_SOLUTION = "UnvalidatedSolution"
    UNSATISFIABLE = "Unsatisfiable"
    NO_SOLUTION_FOUND = "NoSolutionFound"
    VALID_PARTIAL_SOLUTION_FOUND = "ValidPartialSolutionFound"


class InvalidInstanceError(ValueError):
    """Raised when an instance violates the engine's preconditions."""

    def __init__(self, instance_name: str, errors: list[str]) -> None:
        self.instance_name = instance_name
        self.errors = list(errors)
        super().__init__(
            f"Invalid instance {instance_name!r}:\n"
            + "\n".join(f"  - {e}" for e in self.errors)
        )
