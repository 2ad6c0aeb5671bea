"""
Tests for FCFS, SJF and Round Robin scheduling and the scheduling visualizer.
"""

import random

import pytest

from algorithms.scheduling import compute_metrics, fcfs, round_robin, sjf
from algorithms.step import StepKind
from structures.process import Process, default_processes
from visualizers import SchedulingVisualizer


@pytest.fixture
def sample_processes():
    """P1(6,0) P2(4,1) P3(5,2) P4(3,3)"""
    return default_processes()


def run(fn, processes, **kwargs):
    timeline = []
    steps = list(fn(processes, timeline=timeline, **kwargs))
    return timeline, steps


def order(timeline):
    return [e.process for e in timeline]


class TestProcess:
    def test_negative_times_rejected(self):
        with pytest.raises(ValueError):
            Process(id=1, name="P1", burst_time=-1)
        with pytest.raises(ValueError):
            Process(id=1, name="P1", burst_time=1, arrival_time=-2)

    def test_color_and_remaining(self):
        p = Process(id=3, name="P3", burst_time=5)
        assert p.color == "accent"
        assert p.remaining_time == 5

    def test_from_dict_defaults(self):
        p = Process.from_dict({"burst_time": 2}, index=4)
        assert (p.id, p.name, p.arrival_time) == (5, "P5", 0)


class TestFCFS:
    def test_timeline(self, sample_processes):
        timeline, _ = run(fcfs, sample_processes)
        assert len(timeline) == 18
        assert order(timeline) == ["P1"] * 6 + ["P2"] * 4 + ["P3"] * 5 + ["P4"] * 3
        assert [e.time for e in timeline] == list(range(18))

    def test_metrics(self, sample_processes):
        timeline, steps = run(fcfs, sample_processes)
        m = compute_metrics(sample_processes, timeline)
        waits = {s.name: s.waiting_time for s in m.per_process}
        assert waits == {"P1": 0, "P2": 5, "P3": 8, "P4": 12}
        assert m.avg_waiting_time == pytest.approx(6.25)
        assert m.avg_turnaround_time == pytest.approx(10.75)
        assert m.total_time == 18
        assert m.cpu_utilization == pytest.approx(1.0)
        assert steps[-1].state["metrics"]["avg_waiting_time"] == pytest.approx(6.25)

    def test_idle_gap(self):
        procs = [Process(id=1, name="P1", burst_time=1, arrival_time=2)]
        timeline, steps = run(fcfs, procs)
        assert [(e.process, e.time) for e in timeline] == [("P1", 2)]
        assert any(s.message == "💤 CPU idle until time 2" for s in steps)
        assert steps[-1].metrics["idle_units"] == 2

    def test_stable_for_equal_arrivals(self):
        procs = [
            Process(id=1, name="A", burst_time=1),
            Process(id=2, name="B", burst_time=1),
        ]
        timeline, _ = run(fcfs, procs)
        assert order(timeline) == ["A", "B"]


class TestSJF:
    def test_timeline(self, sample_processes):
        timeline, _ = run(sjf, sample_processes)
        assert order(timeline) == ["P1"] * 6 + ["P4"] * 3 + ["P2"] * 4 + ["P3"] * 5

    def test_metrics(self, sample_processes):
        timeline, _ = run(sjf, sample_processes)
        m = compute_metrics(sample_processes, timeline)
        assert m.avg_waiting_time == pytest.approx(5.5)

    def test_ties_go_to_input_order(self):
        procs = [
            Process(id=1, name="A", burst_time=2),
            Process(id=2, name="B", burst_time=2),
        ]
        timeline, _ = run(sjf, procs)
        assert order(timeline) == ["A", "A", "B", "B"]

    def test_idle_until_first_arrival(self):
        procs = [Process(id=1, name="P1", burst_time=2, arrival_time=3)]
        timeline, steps = run(sjf, procs)
        assert [e.time for e in timeline] == [3, 4]
        assert sum(1 for s in steps if s.kind == StepKind.IDLE) == 3


class TestRoundRobin:
    def test_timeline(self, sample_processes):
        timeline, _ = run(round_robin, sample_processes, quantum=2)
        assert order(timeline) == [
            "P1", "P1", "P2", "P2", "P3", "P3", "P4", "P4",
            "P1", "P1", "P2", "P2", "P3", "P3", "P4",
            "P1", "P1", "P3",
        ]

    def test_metrics(self, sample_processes):
        timeline, steps = run(round_robin, sample_processes)
        m = compute_metrics(sample_processes, timeline)
        assert m.avg_waiting_time == pytest.approx(9.5)
        assert steps[-1].metrics["preemptions"] == 6

    def test_nothing_ready_advances_clock(self):
        procs = [Process(id=1, name="P1", burst_time=2, arrival_time=3)]
        timeline, steps = run(round_robin, procs)
        assert [e.time for e in timeline] == [3, 4]
        m = compute_metrics(procs, timeline)
        assert m.total_time == 5
        assert m.cpu_utilization == pytest.approx(0.4)
        assert steps[-1].is_final

    def test_bad_quantum(self, sample_processes):
        with pytest.raises(ValueError):
            list(round_robin(sample_processes, quantum=0))


@pytest.mark.parametrize("fn", [fcfs, sjf, round_robin])
class TestEveryPolicy:
    def test_units_match_bursts(self, fn, sample_processes):
        timeline, _ = run(fn, sample_processes)
        for p in sample_processes:
            assert order(timeline).count(p.name) == p.burst_time

    def test_no_unit_before_arrival(self, fn, sample_processes):
        timeline, _ = run(fn, sample_processes)
        arrival = {p.name: p.arrival_time for p in sample_processes}
        assert all(e.time >= arrival[e.process] for e in timeline)

    def test_templates_untouched(self, fn, sample_processes):
        run(fn, sample_processes)
        assert [p.remaining_time for p in sample_processes] == [6, 4, 5, 3]

    def test_zero_burst_completes_on_arrival(self, fn):
        procs = [
            Process(id=1, name="P1", burst_time=0, arrival_time=0),
            Process(id=2, name="P2", burst_time=2, arrival_time=0),
        ]
        timeline, steps = run(fn, procs)
        assert order(timeline) == ["P2", "P2"]
        m = compute_metrics(procs, timeline)
        assert m.per_process[0].waiting_time == 0
        assert steps[-1].is_final

    def test_empty_process_list(self, fn):
        timeline, steps = run(fn, [])
        assert timeline == []
        assert steps[-1].is_final
        assert steps[-1].state["metrics"]["avg_waiting_time"] is None


class TestSchedulingVisualizer:
    def test_defaults(self):
        viz = SchedulingVisualizer()
        assert [p.name for p in viz.processes] == ["P1", "P2", "P3", "P4"]
        assert viz.algorithm == "fcfs"

    def test_run_reports_metrics_and_log(self):
        viz = SchedulingVisualizer()
        assert viz.run_to_completion().value == "completed"
        snap = viz.get_snapshot()
        assert snap["metrics"]["avg_waiting_time"] == pytest.approx(6.25)
        assert len(snap["timeline"]) == 18
        assert snap["current_time"] == 18
        assert "📊 Performance Metrics:" in snap["log"]
        assert "P3: Waiting Time = 8, Turnaround Time = 13" in snap["log"]
        assert snap["processes"][3]["waiting_time"] == 12

    def test_round_robin_uses_configured_quantum(self):
        viz = SchedulingVisualizer(algorithm="rr")
        viz.run_to_completion()
        assert viz.get_snapshot()["log"][0] == "🔄 Starting Round Robin Scheduling (Quantum: 2)"

    def test_cancel_keeps_partial_timeline_without_metrics(self):
        viz = SchedulingVisualizer()
        viz.start()
        for _ in range(6):
            viz.step()
        viz.cancel()
        snap = viz.get_snapshot()
        assert snap["status"] == "cancelled"
        assert 0 < len(snap["timeline"]) < 18
        assert snap["metrics"]["avg_waiting_time"] is None
        assert snap["processes"][0]["waiting_time"] is None

    def test_add_process(self):
        viz = SchedulingVisualizer()
        p = viz.add_process(burst_time=2, arrival_time=1)
        assert p.name == "P5"
        assert len(viz.processes) == 5
        assert viz.get_snapshot()["log"][-1] == "➕ Added P5 (Burst: 2, Arrival: 1)"

    def test_input_changes_rejected_mid_run(self):
        viz = SchedulingVisualizer()
        viz.start()
        viz.step()
        assert viz.add_process(burst_time=1) is None
        assert not viz.set_processes([{"burst_time": 1}])

    def test_set_processes_from_dicts(self):
        viz = SchedulingVisualizer([{"burst_time": 3}, {"burst_time": 1, "arrival_time": 1, "name": "B"}])
        assert [p.name for p in viz.processes] == ["P1", "B"]

    def test_duplicate_names_rejected(self):
        viz = SchedulingVisualizer()
        with pytest.raises(ValueError, match="Duplicate process name: A"):
            viz.set_processes([{"burst_time": 1, "name": "A"}, {"burst_time": 2, "name": "A"}])
        assert [p.name for p in viz.processes] == ["P1", "P2", "P3", "P4"]
        with pytest.raises(ValueError):
            viz.add_process(burst_time=1, name="P2")

    def test_generated_name_skips_taken_ones(self):
        viz = SchedulingVisualizer([{"burst_time": 1, "name": "P2"}])
        assert viz.add_process(burst_time=1).name == "P3"
        assert [p.name for p in viz.processes] == ["P2", "P3"]

    def test_reset_restores_defaults(self):
        viz = SchedulingVisualizer([{"burst_time": 3}])
        viz.run_to_completion()
        viz.reset()
        assert len(viz.processes) == 4
        assert viz.timeline == []
        assert viz.status == "idle"


def random_processes(rng):
    return [
        Process(id=i, name=f"P{i}", burst_time=rng.randint(0, 6), arrival_time=rng.randint(0, 8))
        for i in range(1, rng.randint(1, 6) + 1)
    ]


@pytest.mark.parametrize("seed", range(12))
@pytest.mark.parametrize("fn", [fcfs, sjf, round_robin])
class TestRandomProcessSets:
    def test_timeline_covers_every_burst(self, fn, seed):
        procs = random_processes(random.Random(seed))
        timeline, steps = run(fn, procs)
        arrival = {p.name: p.arrival_time for p in procs}

        for p in procs:
            assert order(timeline).count(p.name) == p.burst_time
        assert all(e.time >= arrival[e.process] for e in timeline)
        times = [e.time for e in timeline]
        assert times == sorted(set(times))
        assert steps[-1].is_final

    def test_waiting_never_negative(self, fn, seed):
        procs = random_processes(random.Random(seed))
        timeline, _ = run(fn, procs)
        m = compute_metrics(procs, timeline)
        for s in m.per_process:
            assert s.waiting_time >= 0
            assert s.turnaround_time >= s.burst_time
