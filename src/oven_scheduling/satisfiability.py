"""Basic satisfiability check: can every job be scheduled on its own?"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from oven_scheduling.config import DEFAULT_CONFIG, GreedyConfig
from oven_scheduling.greedy import run_simple_greedy_single_job
from oven_scheduling.instance import Instance
from oven_scheduling.output import Output
from oven_scheduling.schema import require_valid
from oven_scheduling.types import Job

logger = logging.getLogger(__name__)


@dataclass
class SatisfiabilityReport:
    """Outcome of probing every job of an instance in isolation."""

    satisfiable: bool
    tardy_jobs: int
    unschedulable_job_ids: list[int] = field(default_factory=list)
    tardy_job_ids: list[int] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    def to_text(self) -> str:
        return "\n".join(self.messages)


def _probe(instance: Instance, job: Job, config: GreedyConfig) -> Output:
    return run_simple_greedy_single_job(instance.with_jobs([job]), config)


def check_satisfiability(
    instance: Instance,
    log_file_path: str | Path | None = None,
    max_workers: int | None = None,
    config: GreedyConfig = DEFAULT_CONFIG,
) -> SatisfiabilityReport:
    """Run the single-job probe for every job.

    The instance is unsatisfiable if any job cannot be placed at all. Jobs
    whose probe batch ends after their latest_end are counted as always
    tardy. Probes are independent, so they may run on a thread pool
    (max_workers > 1); results are reported in job order either way.

    If log_file_path is given, the report text is written there.

    Raises:
        InvalidInstanceError: If the instance fails validation.
    """
    require_valid(instance)
    logger.info("checking satisfiability of instance %s", instance.name)

    jobs = list(instance.jobs)
    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outputs = list(pool.map(lambda j: _probe(instance, j, config), jobs))
    else:
        outputs = [_probe(instance, job, config) for job in jobs]

    report = SatisfiabilityReport(satisfiable=True, tardy_jobs=0)
    for job, output in zip(jobs, outputs):
        if not output.assignments:
            report.satisfiable = False
            report.unschedulable_job_ids.append(job.id)
            message = f"Job with id {job.id} cannot be scheduled"
            logger.warning("instance %s is unsatisfiable: %s", instance.name, message)
            report.messages.append(message)
            continue

        batch = output.batch_of(output.assignments[0])
        if batch.end_time > job.latest_end:
            report.tardy_jobs += 1
            report.tardy_job_ids.append(job.id)
            message = f"Job with id {job.id} always finishes late"
            logger.info(message)
            report.messages.append(message)

    if report.satisfiable:
        message = "Scheduling of single jobs was successful for all jobs."
        logger.info("basic satisfiability test passed for %s", instance.name)
        report.messages.append(message)

    if log_file_path:
        Path(log_file_path).write_text(report.to_text() + "\n")

    return report
