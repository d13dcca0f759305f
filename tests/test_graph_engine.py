import math

import pytest

from Graphwars import GraphEngine
from Graphwars import MathEngine
from Graphwars import config_manager
from Graphwars import error as E


SETTINGS = {
    "graph_res": 0.01,
    "graphing_speed": 20.0,
    "discontinuity_threshold": 15.0,
    "graph_bound": 10.0,
}


def trace_of(problem, start, settings=SETTINGS):
    return GraphEngine.GraphTrace(MathEngine.parse(problem), start, settings)


class TestGraphTrace:
    def test_curve_passes_through_start_point(self):
        trace = trace_of("x", (-5.0, 0.0))
        first = trace.step()
        assert first == (-5.0, 0.0)
        assert trace.shift_up == 5.0

    def test_line_runs_until_it_leaves_the_field(self):
        trace = trace_of("x", (-5.0, 0.0))
        points = trace.run()
        assert trace.outcome == "done"
        assert trace.failed_at is None
        # y = x + 5 reaches the upper bound near x = 5
        assert points[-1][1] <= 10.0
        assert points[-1][0] == pytest.approx(5.0, abs=0.02)

    def test_constants_are_in_scope(self):
        trace = trace_of("x+e-π", (0.0, 0.0))
        assert trace.step() == (0.0, 0.0)

    def test_start_outside_domain_fails_immediately(self):
        trace = trace_of("ln(x)", (-5.0, 0.0))
        assert trace.outcome == "failed"
        assert trace.failed_at == -5.0
        assert isinstance(trace.error, E.OutOfDomain)
        assert trace.step() is None
        assert trace.points == []

    def test_division_by_zero_at_start(self):
        trace = trace_of("1/0", (2.0, 1.0))
        assert trace.failed_at == 2.0
        assert isinstance(trace.error, E.Div0)

    def test_pole_is_a_discontinuity(self):
        trace = trace_of("1/x", (-1.0, 0.0))
        trace.run()
        assert trace.outcome == "failed"
        assert -0.3 < trace.failed_at < -0.2
        assert trace.error is None

    def test_steep_line_fails_on_second_sample(self):
        trace = trace_of("20x", (0.0, 0.0))
        trace.run()
        assert trace.outcome == "failed"
        assert trace.failed_at == pytest.approx(0.01)
        assert trace.points == [(0.0, 0.0)]

    def test_eval_error_mid_trace(self):
        trace = trace_of("sqrt(0-x)", (-0.05, 0.0))
        trace.run()
        assert trace.outcome == "failed"
        assert isinstance(trace.error, E.OutOfDomain)
        assert trace.failed_at > 0

    def test_advance(self):
        trace = trace_of("0.5x", (-5.0, 0.0))
        new_points = trace.advance(5)
        assert len(new_points) == 5
        assert trace.points == new_points
        assert trace.outcome == "running"
        assert new_points[1][0] == pytest.approx(-4.99)

    def test_step_after_finish_returns_none(self):
        trace = trace_of("x", (9.995, 0.0))
        trace.run()
        assert trace.finished
        assert trace.step() is None
        assert trace.advance(10) == []

    def test_invalid_resolution(self):
        settings = dict(SETTINGS, graph_res=0)
        with pytest.raises(E.MathError) as exc_info:
            trace_of("x", (0.0, 0.0), settings)
        assert exc_info.value.code == "5003"

    def test_settings_default_to_config(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config_manager, "config_json", tmp_path / "config.json")
        trace = GraphEngine.GraphTrace(MathEngine.parse("x"), (0.0, 0.0))
        assert trace.graph_res == config_manager.DEFAULT_SETTINGS["graph_res"]
        assert trace.graph_bound == config_manager.DEFAULT_SETTINGS["graph_bound"]

    def test_long_formula_ends_as_a_failed_trace(self):
        trace = trace_of("+".join(["x"] * 1200), (-5.0, 0.0))
        assert trace.shift_up == 6000.0
        trace.run()
        assert trace.outcome == "failed"
        assert trace.failed_at == pytest.approx(-4.99)
        assert trace.points == [(-5.0, 0.0)]

    def test_long_formula_with_flat_tail(self):
        trace = trace_of("+".join(["x"] * 1200) + "*0", (-5.0, 0.0))
        trace.run()
        assert trace.outcome == "failed"
        assert trace.error is None

    def test_nan_ends_the_trace(self):
        trace = trace_of("(0-1)^x", (0.5, 0.0))
        assert math.isnan(trace.shift_up)
        trace.run()
        assert trace.failed_at == 0.5


def test_steps_per_second():
    assert GraphEngine.steps_per_second(SETTINGS) == pytest.approx(2000.0)
