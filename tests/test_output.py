"""Tests for the Output arena, batch dictionary and setup accounting."""

from __future__ import annotations

import pytest

from conftest import make_attributes, make_instance, make_job, make_machine


@pytest.fixture
def attributes():
    return make_attributes([[0, 600], [300, 0]])


class TestOutput:

    def test_new_output_is_unvalidated(self):
        from oven_scheduling.output import Output
        from oven_scheduling.types import SolutionType

        output = Output(name="x")
        assert output.solution_types == [SolutionType.UNVALIDATED_SOLUTION]
        assert output.batches == {}
        assert output.assignments == []

    def test_batch_ids_start_at_one(self, attributes):
        from oven_scheduling.output import Output

        output = Output(name="x")
        first = output.new_batch(make_machine(1), 0, 600, attributes[1])
        second = output.new_batch(make_machine(1), 600, 1200, attributes[1])
        assert (first.id, second.id) == (1, 2)

    def test_assignments_share_batch(self, attributes):
        from oven_scheduling.output import Output

        output = Output(name="x")
        batch = output.new_batch(make_machine(1), 0, 600, attributes[1])
        a1 = output.assign(make_job(1), batch)
        a2 = output.assign(make_job(2), batch)

        batch.end_time = 900
        assert output.batch_of(a1) is output.batch_of(a2)
        assert output.batch_of(a2).end_time == 900

    def test_assign_rejects_foreign_batch(self, attributes):
        from oven_scheduling.output import Output

        other = Output(name="other")
        batch = other.new_batch(make_machine(1), 0, 600, attributes[1])
        with pytest.raises(ValueError, match="does not belong"):
            Output(name="x").assign(make_job(1), batch)

    def test_get_batches_skips_empty(self, attributes):
        from oven_scheduling.output import Output

        output = Output(name="x")
        unused = output.new_batch(make_machine(1), 0, 600, attributes[1])
        used = output.new_batch(make_machine(1), 600, 1200, attributes[1])
        output.assign(make_job(1), used)

        assert output.get_batches() == [used]
        assert unused.id in output.batches

    def test_unscheduled_jobs(self, attributes):
        from oven_scheduling.output import Output

        jobs = [make_job(1), make_job(2), make_job(3)]
        instance = make_instance(jobs, [make_machine(1)])
        output = Output(name="x")
        batch = output.new_batch(make_machine(1), 0, 600, attributes[1])
        output.assign(jobs[1], batch)

        assert output.scheduled_job_ids() == {2}
        assert [j.id for j in output.unscheduled_jobs(instance)] == [1, 3]


class TestBatchDictionary:

    def _output(self, attributes):
        from oven_scheduling.output import Output

        m1, m2 = make_machine(1), make_machine(2)
        output = Output(name="x")
        # created out of start order on machine 1
        for machine, start, attr in [
            (m1, 1200, 2), (m2, 0, 1), (m1, 0, 1), (m1, 600, 1),
        ]:
            batch = output.new_batch(machine, start, start + 600, attributes[attr])
            output.assign(make_job(batch.id, machines=(1, 2), attribute=attr), batch)
        return output

    def test_positions_follow_start_time(self, attributes):
        result = self._output(attributes).get_batch_dictionary()

        assert list(result) == [(1, 1), (1, 2), (1, 3), (2, 1)]
        assert [result[(1, p)].id for p in (1, 2, 3)] == [3, 4, 1]
        assert result[(2, 1)].id == 2

    def test_equal_start_falls_back_to_id(self, attributes):
        from oven_scheduling.output import Output

        output = Output(name="x")
        for _ in range(2):
            batch = output.new_batch(make_machine(1), 0, 600, attributes[1])
            output.assign(make_job(batch.id), batch)

        result = output.get_batch_dictionary()
        assert [result[(1, p)].id for p in (1, 2)] == [1, 2]

    def test_setup_times_and_costs(self, attributes):
        from oven_scheduling.output import setup_times_and_costs

        output = self._output(attributes)
        instance = make_instance(
            [], [make_machine(1), make_machine(2)], attributes,
            initial_states={1: 2},
        )
        result = setup_times_and_costs(instance, output.get_batch_dictionary())

        # machine 1 starts in attribute 2, runs 1, 1, then 2
        assert result[(1, 1)] == (300, 5)
        assert result[(1, 2)] == (0, 0)
        assert result[(1, 3)] == (600, 10)
        # machine 2 has no initial state
        assert result[(2, 1)] == (0, 0)
