"""JSON boundary: load instances, dump solutions."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from oven_scheduling.instance import Instance
from oven_scheduling.output import Output, setup_times_and_costs
from oven_scheduling.resolution import format_time, parse_time, to_seconds
from oven_scheduling.schema import validate_instance
from oven_scheduling.types import Attribute, InvalidInstanceError, Job, Machine


def _machine_from_dict(data: dict, epoch: datetime) -> Machine:
    shifts = data.get("shifts", [])
    return Machine(
        id=int(data["id"]),
        name=data.get("name", f"Machine {data['id']}"),
        min_cap=int(data.get("min_cap", 0)),
        max_cap=int(data["max_cap"]),
        availability_start=tuple(parse_time(s, epoch) for s, _ in shifts),
        availability_end=tuple(parse_time(e, epoch) for _, e in shifts),
    )


def _attribute_from_dict(data: dict) -> Attribute:
    return Attribute(
        id=int(data["id"]),
        name=data.get("name", f"Attribute {data['id']}"),
        setup_costs=tuple(int(c) for c in data["setup_costs"]),
        setup_times=tuple(int(t) for t in data["setup_times"]),
    )


def _job_from_dict(data: dict, epoch: datetime) -> Job:
    return Job(
        id=int(data["id"]),
        name=data.get("name", f"Job {data['id']}"),
        earliest_start=parse_time(data["earliest_start"], epoch),
        latest_end=parse_time(data["latest_end"], epoch),
        min_time=int(data["min_time"]),
        max_time=int(data["max_time"]),
        size=int(data["size"]),
        eligible_machines=tuple(int(m) for m in data["eligible_machines"]),
        attribute_id_per_machine={
            int(k): int(v) for k, v in data["attribute_id_per_machine"].items()
        },
    )


def instance_from_dict(data: dict[str, Any], name: str = "instance") -> Instance:
    """Build and validate an Instance from its JSON representation.

    Raises InvalidInstanceError if fields are missing or malformed, or if
    the resulting instance fails validation.
    """
    if not isinstance(data, dict):
        raise InvalidInstanceError(
            name, [f"expected a JSON object, got {type(data).__name__}"]
        )
    name = data.get("name", name)
    try:
        horizon_start = datetime.fromisoformat(data["horizon"]["start"])
        horizon_end = datetime.fromisoformat(data["horizon"]["end"])
        # both ends naive, whole seconds apart
        to_seconds(horizon_end, horizon_start)
        machines = [_machine_from_dict(m, horizon_start) for m in data["machines"]]
        attributes = [_attribute_from_dict(a) for a in data["attributes"]]
        jobs = [_job_from_dict(j, horizon_start) for j in data["jobs"]]
        initial_states = data.get("initial_states")
        if initial_states is not None:
            initial_states = {int(k): int(v) for k, v in initial_states.items()}
        creation_date = data.get("creation_date")
        if creation_date is not None:
            creation_date = datetime.fromisoformat(creation_date)
    except KeyError as e:
        raise InvalidInstanceError(name, [f"missing field {e}"]) from e
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidInstanceError(name, [str(e)]) from e

    instance = Instance(
        name=name,
        machines={m.id: m for m in machines},
        jobs=jobs,
        attributes={a.id: a for a in attributes},
        horizon_start=horizon_start,
        horizon_end=horizon_end,
        initial_states=initial_states,
        creation_date=creation_date,
    )

    errors = validate_instance(instance)
    if len(machines) != len(instance.machines):
        errors.append("Duplicate machine ids")
    if len(attributes) != len(instance.attributes):
        errors.append("Duplicate attribute ids")
    if errors:
        raise InvalidInstanceError(name, errors)
    return instance


def load_instance_json(path: str | Path) -> Instance:
    """Load an Instance from a JSON file.

    The instance name defaults to the file stem.
    Raises InvalidInstanceError if the file is not JSON or validation
    fails; OSError if it cannot be read.
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInstanceError(path.stem, [f"not valid JSON: {e}"]) from e
    return instance_from_dict(data, name=path.stem)


def output_to_dict(output: Output, instance: Instance) -> dict[str, Any]:
    """JSON-ready representation of a solution, with absolute datetimes."""
    epoch = instance.horizon_start

    def iso(t: int) -> str:
        return format_time(t, epoch)

    batch_dictionary = output.get_batch_dictionary()
    setups = setup_times_and_costs(instance, batch_dictionary)
    position = {batch.id: key for key, batch in batch_dictionary.items()}

    batches = []
    for batch in output.get_batches():
        key = position[batch.id]
        batches.append({
            "id": batch.id,
            "machine_id": batch.machine.id,
            "position": key[1],
            "attribute_id": batch.attribute.id,
            "start_time": iso(batch.start_time),
            "end_time": iso(batch.end_time),
            "setup_time": setups[key][0],
            "setup_cost": setups[key][1],
            "job_ids": [job.id for job in output.jobs_in_batch(batch.id)],
        })

    return {
        "name": output.name,
        "creation_date": output.creation_date.isoformat(),
        "instance": instance.name,
        "solution_types": [t.value for t in output.solution_types],
        "batches": batches,
        "assignments": [
            {"job_id": a.job.id, "batch_id": a.batch_id} for a in output.assignments
        ],
        "unscheduled_job_ids": [job.id for job in output.unscheduled_jobs(instance)],
    }


def dump_output_json(output: Output, instance: Instance, path: str | Path) -> None:
    path = Path(path)
    with open(path, "w") as f:
        json.dump(output_to_dict(output, instance), f, indent=2)
