"""Greedy batch scheduler: a time-stepped simulation over ovens and shifts.

The driver advances a simulated clock one step at a time. At every step it
picks released jobs in earliest-due-date order, places each on the free
machine with the smallest setup time that still fits the current shift, and
then lets the batch filler pack further compatible jobs into the same batch.
Nothing is ever unscheduled again: the result is feasible, not optimal.

The single-job variant is a feasibility probe: it only asks whether one job
can be placed anywhere at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from oven_scheduling.config import DEFAULT_CONFIG, GreedyConfig
from oven_scheduling.instance import Instance
from oven_scheduling.output import Output
from oven_scheduling.schema import require_valid
from oven_scheduling.setup_times import attribute_positions, setup_times_for_machines
from oven_scheduling.shifts import (
    ShiftState,
    advance_shift,
    initial_shift_state,
    shift_end,
)
from oven_scheduling.types import Batch, InvalidInstanceError, Job, Machine

logger = logging.getLogger(__name__)


def job_priority(job: Job) -> tuple[int, int, int]:
    """Sort key: earliest latest_end, then largest size, then lowest id."""
    return (job.latest_end, -job.size, job.id)


def _claim(unscheduled: list[Job], job: Job) -> None:
    """Remove a job from the unscheduled list (by id)."""
    for i, other in enumerate(unscheduled):
        if other.id == job.id:
            del unscheduled[i]
            return
    raise ValueError(f"job {job.id} is not unscheduled")


@dataclass
class DriverState:
    """Mutable state threaded through the driver loop."""

    time: int
    shift_states: dict[int, ShiftState]
    unscheduled: list[Job]
    last_batch: dict[int, Batch] = field(default_factory=dict)

    @classmethod
    def start(cls, instance: Instance, time: int) -> DriverState:
        return cls(
            time=time,
            shift_states={
                mid: initial_shift_state(machine, time)
                for mid, machine in instance.machines.items()
            },
            unscheduled=list(instance.jobs),
        )

    def refresh_shifts(self, machines: dict[int, Machine]) -> None:
        """Bring every machine's cached shift up to the current time."""
        for mid, machine in machines.items():
            self.shift_states[mid] = advance_shift(
                machine, self.shift_states[mid], self.time
            )

    def is_free(self, machine: Machine) -> bool:
        """On shift and not still processing its last batch."""
        if not self.shift_states[machine.id].on_shift:
            return False
        last = self.last_batch.get(machine.id)
        return last is None or last.end_time <= self.time

    def released_jobs(self) -> list[Job]:
        return [job for job in self.unscheduled if job.earliest_start <= self.time]


def _first_tick(instance: Instance, time_step: int) -> int:
    """Step at which the earliest shift of any machine begins."""
    starts = [s for m in instance.machines.values() for s in m.availability_start]
    if not starts:
        return 0
    return max(0, (min(starts) // time_step) * time_step)


def _new_output(instance: Instance) -> Output:
    return Output(name=f"Oven scheduling greedy solution for instance {instance.name}")


def find_best_machine(
    job: Job,
    candidates: list[Machine],
    setup_times: dict[int, int],
    shift_states: dict[int, ShiftState],
    now: int,
) -> tuple[Machine, int] | None:
    """Machine with minimal setup time on which `job` fits its current shift.

    Candidates are tried by (setup time, machine id). A machine is rejected
    when setup plus the job's minimal processing time would run past the end
    of the machine's current shift. Returns (machine, setup_time) or None.
    """
    for machine in sorted(candidates, key=lambda m: (setup_times[m.id], m.id)):
        setup = setup_times[machine.id]
        shift = shift_states[machine.id].shift
        if shift == -1:
            continue
        if now + setup + job.min_time <= shift_end(machine, shift):
            return machine, setup
        logger.debug(
            "job %s does not fit shift %d of machine %s (setup %ds)",
            job.id, shift, machine.id, setup,
        )
    return None


def _fits_batch(
    job: Job,
    batch: Batch,
    representative: Job,
    attribute_id: int,
    batch_size: int,
    batch_min: int,
    batch_max: int,
    end_of_shift: int,
    look_ahead: int,
) -> bool:
    """Whether `job` may join `batch` without breaking its constraints."""
    machine = batch.machine
    if not job.is_eligible(machine.id):
        return False
    if job.attribute_on(machine.id) != attribute_id:
        return False
    if job.earliest_start > batch.start_time + look_ahead:
        return False
    if job.max_time < batch_min or job.min_time > batch_max:
        return False
    if job.size + batch_size > machine.max_cap:
        return False

    # the grown batch must still end inside the current shift
    if (
        job.earliest_start + batch_min > end_of_shift
        or job.earliest_start + job.min_time > end_of_shift
        or batch.start_time + batch_min > end_of_shift
        or batch.start_time + job.min_time > end_of_shift
    ):
        return False

    if batch.end_time > representative.latest_end:
        return True
    return (
        job.earliest_start + job.min_time <= representative.latest_end
        and job.earliest_start + batch_min <= representative.latest_end
        and batch.start_time + job.min_time <= representative.latest_end
    )


def fill_batch(
    output: Output,
    batch: Batch,
    representative: Job,
    unscheduled: list[Job],
    shift: int,
    min_job_size: int,
    config: GreedyConfig = DEFAULT_CONFIG,
) -> list[Job]:
    """Greedily add compatible unscheduled jobs to a freshly created batch.

    Candidates must share the representative's attribute on the batch
    machine, fit the remaining capacity, overlap the batch's processing-time
    window, keep the batch inside the current shift, and not make the
    representative late unless it already is. The look-ahead window starts
    at the batch start and widens one step at a time (up to
    config.max_time_window) only when nothing qualifies.

    Mutates `batch` and `unscheduled`; returns the jobs added, in order.
    """
    machine = batch.machine
    attribute_id = representative.attribute_on(machine.id)
    end_of_shift = shift_end(machine, shift)
    batch_size = representative.size
    batch_min = representative.min_time
    batch_max = representative.max_time
    window = 0
    added: list[Job] = []

    def candidates() -> list[Job]:
        return [
            job for job in unscheduled
            if _fits_batch(
                job, batch, representative, attribute_id, batch_size,
                batch_min, batch_max, end_of_shift, window * config.time_step,
            )
        ]

    while batch_size + min_job_size <= machine.max_cap:
        found = candidates()
        while not found and window < config.max_time_window:
            window += 1
            found = candidates()
        if not found:
            break

        job = min(found, key=job_priority)
        _claim(unscheduled, job)
        batch_size += job.size

        if job.earliest_start > batch.start_time:
            batch.start_time = job.earliest_start
        batch_min = max(batch_min, job.min_time)
        batch_max = min(batch_max, job.max_time)
        batch.end_time = batch.start_time + batch_min

        output.assign(job, batch)
        added.append(job)
        logger.debug("job %s added to batch %d", job.id, batch.id)

    return added


def run_simple_greedy(
    instance: Instance,
    config: GreedyConfig = DEFAULT_CONFIG,
) -> Output:
    """Schedule all jobs of `instance` with the greedy heuristic.

    Jobs that cannot be placed before the horizon ends are left out of the
    output; that is an incomplete solution, not an error.

    Raises:
        InvalidInstanceError: If the instance fails validation.
    """
    require_valid(instance)

    output = _new_output(instance)
    horizon = instance.horizon_length
    positions = attribute_positions(instance.attributes)
    min_job_size = min(job.size for job in instance.jobs)
    machines = [instance.machines[mid] for mid in sorted(instance.machines)]
    state = DriverState.start(instance, _first_tick(instance, config.time_step))

    while state.unscheduled and state.time <= horizon:
        released = state.released_jobs()
        if not released:
            state.time += config.time_step
            continue

        state.refresh_shifts(instance.machines)
        free_ids = {m.id for m in machines if state.is_free(m)}
        candidates = [
            job for job in released
            if any(mid in free_ids for mid in job.eligible_machines)
        ]
        if candidates:
            logger.debug(
                "time %d: available jobs %s",
                state.time, [job.id for job in candidates],
            )

        while candidates:
            job = min(candidates, key=job_priority)
            candidates = [c for c in candidates if c.id != job.id]
            logger.debug("selected job %s", job.id)

            options = [
                m for m in machines
                if state.is_free(m)
                and job.is_eligible(m.id)
                and job.size <= m.max_cap
            ]
            if not options:
                logger.debug("no machine available for job %s", job.id)
                continue

            setup_times = setup_times_for_machines(
                options, job, state.last_batch, instance.attributes,
                positions, instance.initial_states,
            )
            choice = find_best_machine(
                job, options, setup_times, state.shift_states, state.time
            )
            if choice is None:
                logger.debug(
                    "no machine can finish job %s within its current shift", job.id
                )
                continue

            machine, setup = choice
            _claim(state.unscheduled, job)
            start = state.time + setup
            batch = output.new_batch(
                machine,
                start,
                start + job.min_time,
                instance.attributes[job.attribute_on(machine.id)],
            )
            output.assign(job, batch)
            state.last_batch[machine.id] = batch
            logger.debug(
                "job %s scheduled on machine %s, batch %d", job.id, machine.id, batch.id
            )

            fill_batch(
                output, batch, job, state.unscheduled,
                state.shift_states[machine.id].shift, min_job_size, config,
            )
            logger.debug(
                "batch %d runs [%d, %d)", batch.id, batch.start_time, batch.end_time
            )

            remaining = {j.id for j in state.unscheduled}
            candidates = [c for c in candidates if c.id in remaining]

        state.time += config.time_step

    logger.info(
        "greedy run on %s: %d/%d jobs scheduled in %d batches",
        instance.name,
        len(output.assignments),
        len(instance.jobs),
        len(output.batches),
    )
    return output


def run_simple_greedy_single_job(
    instance: Instance,
    config: GreedyConfig = DEFAULT_CONFIG,
) -> Output:
    """Place the only job of `instance` on the first machine that can take it.

    Walks the clock from the job's release to the horizon end and assigns the
    job, without setup time or batch filling, to the lowest-id eligible
    machine that is on shift and large enough. The returned output has no
    assignments if no such step exists.

    Raises:
        InvalidInstanceError: If the instance is invalid or has more than
            one job.
    """
    require_valid(instance)
    if len(instance.jobs) != 1:
        raise InvalidInstanceError(
            instance.name,
            [f"single-job probe expects exactly one job, got {len(instance.jobs)}"],
        )

    job = instance.jobs[0]
    output = _new_output(instance)
    horizon = instance.horizon_length
    step = config.time_step
    machines = [instance.machines[mid] for mid in sorted(instance.machines)]

    # first step at or after the release date
    time = max(0, -(-job.earliest_start // step) * step)
    states = {m.id: initial_shift_state(m, time) for m in machines}

    while time <= horizon:
        for machine in machines:
            states[machine.id] = advance_shift(machine, states[machine.id], time)

        options = [
            m for m in machines
            if job.is_eligible(m.id)
            and states[m.id].on_shift
            and job.size <= m.max_cap
        ]
        if options:
            machine = options[0]
            batch = output.new_batch(
                machine,
                time,
                time + job.min_time,
                instance.attributes[job.attribute_on(machine.id)],
            )
            output.assign(job, batch)
            return output

        time += step

    logger.debug("job %s cannot be placed on any machine", job.id)
    return output
