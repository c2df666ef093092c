"""oven-scheduling: Greedy batch scheduling of jobs on ovens with shifts."""

from oven_scheduling.config import DEFAULT_CONFIG, GreedyConfig
from oven_scheduling.greedy import (
    fill_batch,
    find_best_machine,
    run_simple_greedy,
    run_simple_greedy_single_job,
)
from oven_scheduling.instance import Instance
from oven_scheduling.loaders import (
    dump_output_json,
    instance_from_dict,
    load_instance_json,
    output_to_dict,
)
from oven_scheduling.output import Output, setup_times_and_costs
from oven_scheduling.resolution import from_seconds, to_seconds
from oven_scheduling.satisfiability import SatisfiabilityReport, check_satisfiability
from oven_scheduling.types import (
    Attribute,
    Batch,
    BatchAssignment,
    InvalidInstanceError,
    Job,
    Machine,
    SolutionType,
)

__all__ = [
    "Attribute",
    "Batch",
    "BatchAssignment",
    "DEFAULT_CONFIG",
    "GreedyConfig",
    "Instance",
    "InvalidInstanceError",
    "Job",
    "Machine",
    "Output",
    "SatisfiabilityReport",
    "SolutionType",
    "check_satisfiability",
    "dump_output_json",
    "fill_batch",
    "find_best_machine",
    "from_seconds",
    "instance_from_dict",
    "load_instance_json",
    "output_to_dict",
    "run_simple_greedy",
    "run_simple_greedy_single_job",
    "setup_times_and_costs",
    "to_seconds",
]
