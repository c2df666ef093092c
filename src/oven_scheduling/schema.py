"""Input validation for instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from oven_scheduling.types import InvalidInstanceError, Machine

if TYPE_CHECKING:
    from oven_scheduling.instance import Instance


def validate_machine(machine: Machine) -> list[str]:
    """Validate one machine. Returns list of error messages (empty = valid).

    Checks:
    - Capacities are consistent
    - Shift start and end lists are parallel
    - Every shift is non-empty, shifts are sorted and do not overlap
    """
    errors: list[str] = []
    prefix = f"Machine {machine.id}"

    if machine.max_cap <= 0:
        errors.append(f"{prefix}: max_cap must be positive, got {machine.max_cap}")
    if machine.min_cap > machine.max_cap:
        errors.append(
            f"{prefix}: min_cap {machine.min_cap} exceeds max_cap {machine.max_cap}"
        )

    starts, ends = machine.availability_start, machine.availability_end
    if len(starts) != len(ends):
        errors.append(
            f"{prefix}: {len(starts)} shift starts but {len(ends)} shift ends"
        )
        return errors

    for i, (start, end) in enumerate(zip(starts, ends)):
        if end < start:
            errors.append(f"{prefix}, shift {i}: ends at {end} before start {start}")
        if i > 0 and start < ends[i - 1]:
            errors.append(
                f"{prefix}: shift {i} starts at {start} before shift {i - 1} "
                f"ends at {ends[i - 1]}"
            )

    return errors


def validate_instance(instance: Instance) -> list[str]:
    """Validate an instance. Returns list of error messages (empty = valid).

    Checks:
    - There is at least one job
    - Machines are valid and attribute setup vectors cover every attribute
    - Every job has eligible machines that exist, each with a known attribute
    - Job time windows and processing times are consistent
    - Initial states reference known machines and attributes
    """
    errors: list[str] = []

    if not instance.jobs:
        errors.append("Instance has no jobs")

    if instance.horizon_end < instance.horizon_start:
        errors.append("Scheduling horizon ends before it starts")

    for machine_id, machine in instance.machines.items():
        if machine_id != machine.id:
            errors.append(f"Machine key {machine_id} does not match id {machine.id}")
        errors.extend(validate_machine(machine))

    n_attributes = len(instance.attributes)
    for attr_id, attr in instance.attributes.items():
        if attr_id != attr.id:
            errors.append(f"Attribute key {attr_id} does not match id {attr.id}")
        if len(attr.setup_times) != n_attributes or len(attr.setup_costs) != n_attributes:
            errors.append(
                f"Attribute {attr.id}: setup vectors must have {n_attributes} "
                f"entries, got {len(attr.setup_times)} times and "
                f"{len(attr.setup_costs)} costs"
            )

    seen_ids: set[int] = set()
    for job in instance.jobs:
        prefix = f"Job {job.id}"
        if job.id in seen_ids:
            errors.append(f"{prefix}: duplicate job id")
        seen_ids.add(job.id)

        if not job.eligible_machines:
            errors.append(f"{prefix}: no eligible machines")
        if job.min_time > job.max_time:
            errors.append(
                f"{prefix}: min_time {job.min_time} exceeds max_time {job.max_time}"
            )
        if job.min_time < 0:
            errors.append(f"{prefix}: negative min_time {job.min_time}")
        if job.earliest_start > job.latest_end:
            errors.append(f"{prefix}: earliest_start after latest_end")
        if job.size <= 0:
            errors.append(f"{prefix}: size must be positive, got {job.size}")

        for machine_id in job.eligible_machines:
            if machine_id not in instance.machines:
                errors.append(f"{prefix}: unknown eligible machine {machine_id}")
            if machine_id not in job.attribute_id_per_machine:
                errors.append(f"{prefix}: no attribute for machine {machine_id}")
            elif job.attribute_id_per_machine[machine_id] not in instance.attributes:
                errors.append(
                    f"{prefix}: unknown attribute "
                    f"{job.attribute_id_per_machine[machine_id]} on machine {machine_id}"
                )
        for machine_id in job.attribute_id_per_machine:
            if machine_id not in job.eligible_machines:
                errors.append(
                    f"{prefix}: attribute given for non-eligible machine {machine_id}"
                )

    for machine_id, attr_id in (instance.initial_states or {}).items():
        if machine_id not in instance.machines:
            errors.append(f"Initial state for unknown machine {machine_id}")
        if attr_id not in instance.attributes:
            errors.append(
                f"Initial state of machine {machine_id}: unknown attribute {attr_id}"
            )

    return errors


def require_valid(instance: Instance) -> None:
    """Raise InvalidInstanceError if the instance fails validation."""
    errors = validate_instance(instance)
    if errors:
        raise InvalidInstanceError(instance.name, errors)
