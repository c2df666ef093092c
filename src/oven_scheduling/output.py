"""Output: batch arena plus the assignments that reference it.

Batches are stored once, keyed by id. Assignments hold the batch id, so every
job of a batch sees the same Batch object and later mutations of its times.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from oven_scheduling.setup_times import attribute_positions
from oven_scheduling.types import (
    Attribute,
    Batch,
    BatchAssignment,
    Job,
    Machine,
    SolutionType,
)

if TYPE_CHECKING:
    from oven_scheduling.instance import Instance


@dataclass
class Output:
    """Solution accumulator produced by the engine."""

    name: str
    creation_date: datetime = field(default_factory=datetime.now)
    batches: dict[int, Batch] = field(default_factory=dict)
    assignments: list[BatchAssignment] = field(default_factory=list)
    solution_types: list[SolutionType] = field(
        default_factory=lambda: [SolutionType.UNVALIDATED_SOLUTION]
    )

    def new_batch(
        self,
        machine: Machine,
        start_time: int,
        end_time: int,
        attribute: Attribute,
    ) -> Batch:
        """Create the next batch in the arena. Ids start at 1."""
        batch = Batch(
            id=len(self.batches) + 1,
            machine=machine,
            start_time=start_time,
            end_time=end_time,
            attribute=attribute,
        )
        self.batches[batch.id] = batch
        return batch

    def assign(self, job: Job, batch: Batch) -> BatchAssignment:
        if self.batches.get(batch.id) is not batch:
            raise ValueError(f"batch {batch.id} does not belong to this output")
        assignment = BatchAssignment(job=job, batch_id=batch.id)
        self.assignments.append(assignment)
        return assignment

    def batch_of(self, assignment: BatchAssignment) -> Batch:
        return self.batches[assignment.batch_id]

    def get_batches(self) -> list[Batch]:
        """Distinct batches that hold at least one job, in id order."""
        used = {a.batch_id for a in self.assignments}
        return [self.batches[bid] for bid in sorted(used)]

    def jobs_in_batch(self, batch_id: int) -> list[Job]:
        return [a.job for a in self.assignments if a.batch_id == batch_id]

    def scheduled_job_ids(self) -> set[int]:
        return {a.job.id for a in self.assignments}

    def unscheduled_jobs(self, instance: Instance) -> list[Job]:
        scheduled = self.scheduled_job_ids()
        return [job for job in instance.jobs if job.id not in scheduled]

    def get_batch_dictionary(self) -> dict[tuple[int, int], Batch]:
        """Batches keyed by (machine_id, position), positions 1-based.

        Positions follow start time on each machine; equal start times
        fall back to batch id so the ordering is deterministic.
        """
        per_machine: dict[int, list[Batch]] = {}
        for batch in self.get_batches():
            per_machine.setdefault(batch.machine.id, []).append(batch)

        result: dict[tuple[int, int], Batch] = {}
        for machine_id in sorted(per_machine):
            ordered = sorted(per_machine[machine_id], key=lambda b: (b.start_time, b.id))
            for pos, batch in enumerate(ordered, start=1):
                result[(machine_id, pos)] = batch
        return result


def setup_times_and_costs(
    instance: Instance,
    batch_dictionary: dict[tuple[int, int], Batch],
) -> dict[tuple[int, int], tuple[int, int]]:
    """Setup (time, cost) incurred before every batch of the dictionary.

    The first batch on a machine is set up from the machine's initial state,
    or for free when the instance defines none for that machine.
    """
    positions = attribute_positions(instance.attributes)
    initial_states = instance.initial_states or {}
    result: dict[tuple[int, int], tuple[int, int]] = {}

    for (machine_id, pos), batch in sorted(batch_dictionary.items()):
        target = positions[batch.attribute.id]
        if pos == 1:
            if machine_id not in initial_states:
                result[(machine_id, pos)] = (0, 0)
                continue
            previous = instance.attributes[initial_states[machine_id]]
        else:
            previous = batch_dictionary[(machine_id, pos - 1)].attribute
        result[(machine_id, pos)] = (
            previous.setup_times[target],
            previous.setup_costs[target],
        )
    return result
