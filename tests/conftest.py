"""Shared test fixtures and data loading for oven-scheduling.

Instance files live in data/fixtures/instances/ as JSON, other test data in
data/fixtures/scenarios/. Small instances are also built in code with the
make_* helpers below.

Horizon: Mon 2025-01-06 00:00 (second 0) through Tue 2025-01-07 00:00.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
INSTANCES_DIR = FIXTURES_DIR / "instances"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"

EPOCH = datetime(2025, 1, 6)
DAY = 24 * 3600


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


def instance_path(name: str) -> Path:
    return INSTANCES_DIR / f"{name}.json"


def load_instance(name: str):
    """Load data/fixtures/instances/{name}.json as a validated Instance."""
    from oven_scheduling.loaders import load_instance_json

    return load_instance_json(instance_path(name))


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def make_job(job_id: int, *, es: int = 0, le: int = DAY, min_time: int = 600,
             max_time: int | None = None, size: int = 1,
             machines: tuple[int, ...] = (1,), attribute: int | dict = 1):
    """Job with sensible defaults. `attribute` is one id for every machine
    or an explicit machine -> attribute mapping."""
    from oven_scheduling.types import Job

    if isinstance(attribute, dict):
        per_machine = dict(attribute)
    else:
        per_machine = {m: attribute for m in machines}
    return Job(
        id=job_id,
        name=f"J{job_id}",
        earliest_start=es,
        latest_end=le,
        min_time=min_time,
        max_time=max_time if max_time is not None else 2 * min_time,
        size=size,
        eligible_machines=tuple(machines),
        attribute_id_per_machine=per_machine,
    )


def make_machine(machine_id: int, *, max_cap: int = 5, min_cap: int = 0,
                 shifts: tuple[tuple[int, int], ...] = ((0, DAY),)):
    from oven_scheduling.types import Machine

    return Machine(
        id=machine_id,
        name=f"Oven {machine_id}",
        min_cap=min_cap,
        max_cap=max_cap,
        availability_start=tuple(s for s, _ in shifts),
        availability_end=tuple(e for _, e in shifts),
    )


def make_attributes(setup_times: list[list[int]] | None = None,
                    ids: list[int] | None = None):
    """Attributes from a square setup-time matrix (row = from, column = to).

    Setup costs mirror the times divided by 60. Defaults to one attribute
    with id 1.
    """
    from oven_scheduling.types import Attribute

    if setup_times is None:
        setup_times = [[0]]
    if ids is None:
        ids = list(range(1, len(setup_times) + 1))
    return {
        attr_id: Attribute(
            id=attr_id,
            name=f"A{attr_id}",
            setup_costs=tuple(t // 60 for t in row),
            setup_times=tuple(row),
        )
        for attr_id, row in zip(ids, setup_times)
    }


def make_instance(jobs, machines, attributes=None, *, horizon: int = DAY,
                  initial_states: dict[int, int] | None = None,
                  name: str = "test"):
    from oven_scheduling.instance import Instance

    return Instance(
        name=name,
        machines={m.id: m for m in machines},
        jobs=list(jobs),
        attributes=attributes if attributes is not None else make_attributes(),
        horizon_start=EPOCH,
        horizon_end=EPOCH + timedelta(seconds=horizon),
        initial_states=initial_states,
    )


# ---------------------------------------------------------------------------
# Schedule checks
# ---------------------------------------------------------------------------
def assert_feasible(instance, output) -> None:
    """Check every hard constraint a greedy schedule must respect."""
    from oven_scheduling.setup_times import attribute_positions

    positions = attribute_positions(instance.attributes)
    initial_states = instance.initial_states or {}

    job_ids = [a.job.id for a in output.assignments]
    assert len(job_ids) == len(set(job_ids)), "job scheduled twice"

    for batch in output.get_batches():
        machine = batch.machine
        jobs = output.jobs_in_batch(batch.id)
        assert sum(j.size for j in jobs) <= machine.max_cap, (
            f"batch {batch.id} exceeds capacity of machine {machine.id}"
        )
        assert any(
            s <= batch.start_time and batch.end_time <= e
            for s, e in zip(machine.availability_start, machine.availability_end)
        ), f"batch {batch.id} [{batch.start_time}, {batch.end_time}] not within a shift"
        for job in jobs:
            assert job.is_eligible(machine.id)
            assert job.attribute_on(machine.id) == batch.attribute.id
            assert job.earliest_start <= batch.start_time, (
                f"job {job.id} starts before its release"
            )
            assert job.min_time <= batch.duration <= job.max_time, (
                f"batch {batch.id} duration {batch.duration} outside job {job.id} window"
            )

    for machine_id in instance.machines:
        batches = sorted(
            (b for b in output.get_batches() if b.machine.id == machine_id),
            key=lambda b: (b.start_time, b.id),
        )
        previous = None
        if machine_id in initial_states:
            previous = instance.attributes[initial_states[machine_id]]
        ready = 0
        for batch in batches:
            setup = 0
            if previous is not None:
                setup = previous.setup_times[positions[batch.attribute.id]]
            assert ready + setup <= batch.start_time, (
                f"batch {batch.id} on machine {machine_id} overlaps its predecessor"
            )
            ready = batch.end_time
            previous = batch.attribute


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def epoch() -> datetime:
    return EPOCH


@pytest.fixture
def two_ovens():
    """Two ovens, three attributes with setup times, initial states set."""
    return load_instance("two_ovens")
