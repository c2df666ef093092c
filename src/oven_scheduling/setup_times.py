"""Setup-time resolver: attribute transition cost of putting a job on a machine."""

from __future__ import annotations

from typing import Iterable

from oven_scheduling.types import Attribute, Batch, Job, Machine


def attribute_positions(attributes: dict[int, Attribute]) -> dict[int, int]:
    """Map attribute id -> 0-based position in the sorted attribute ids.

    Setup vectors are indexed by this position.
    """
    return {attr_id: pos for pos, attr_id in enumerate(sorted(attributes))}


def previous_attribute(
    machine: Machine,
    last_batch: Batch | None,
    attributes: dict[int, Attribute],
    initial_states: dict[int, int] | None,
) -> Attribute | None:
    """Attribute the machine is currently set up for, if known."""
    if last_batch is not None:
        return last_batch.attribute
    if initial_states and machine.id in initial_states:
        return attributes[initial_states[machine.id]]
    return None


def setup_time(
    machine: Machine,
    job: Job,
    last_batch: Batch | None,
    attributes: dict[int, Attribute],
    positions: dict[int, int],
    initial_states: dict[int, int] | None = None,
) -> int:
    """Seconds of setup needed before `job` can start on `machine`.

    No history and no configured initial state means no setup.
    """
    previous = previous_attribute(machine, last_batch, attributes, initial_states)
    if previous is None:
        return 0
    return previous.setup_times[positions[job.attribute_on(machine.id)]]


def setup_times_for_machines(
    machines: Iterable[Machine],
    job: Job,
    last_batch_on_machine: dict[int, Batch],
    attributes: dict[int, Attribute],
    positions: dict[int, int],
    initial_states: dict[int, int] | None = None,
) -> dict[int, int]:
    """Setup time per candidate machine id.

    Computed independently per machine since the job's attribute depends on
    the machine.
    """
    return {
        machine.id: setup_time(
            machine,
            job,
            last_batch_on_machine.get(machine.id),
            attributes,
            positions,
            initial_states,
        )
        for machine in machines
    }
