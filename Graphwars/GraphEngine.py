# GraphEngine.py
"""""
Stepped sampling of a parsed formula, the evaluate-many half of parse-once/evaluate-many.

A GraphTrace starts at a given point, shifts the curve vertically so it passes
through that point and then walks to the right in steps of `graph_res`:

- an evaluation error, a NaN/inf value or a jump steeper than
  `discontinuity_threshold` ends the trace as failed at that x
- leaving the square [-graph_bound, graph_bound]² ends the trace as done

The trace never reparses; callers simply stop calling step() to abort.
"""""

import math

from . import ScientificEngine
from . import config_manager as config_manager
from . import error as E


def steps_per_second(settings):
    """Number of samples per second at the configured graphing speed."""
    return float(settings["graphing_speed"]) / float(settings["graph_res"])


class GraphTrace:
    def __init__(self, parsed_function, start, settings=None):
        if settings is None:
            settings = config_manager.load_setting_value("all")

        self.graph_res = float(settings["graph_res"])
        self.discontinuity_threshold = float(settings["discontinuity_threshold"])
        self.graph_bound = float(settings["graph_bound"])
        if self.graph_res <= 0 or self.graph_bound <= 0:
            raise E.MathError("graph_res and graph_bound have to be positive.", code="5003")

        self.function = parsed_function.with_constants(ScientificEngine.CONSTANTS).bind("x")
        self.points = []
        self.finished = False
        self.failed_at = None
        self.error = None
        self.prev_y = None
        self.shift_up = 0.0

        start_x, start_y = start
        self.next_x = float(start_x)

        try:
            y_start = self.function(self.next_x)
        except E.EvalError as e:
            self._fail(self.next_x, e)
            return
        self.shift_up = float(start_y) - y_start

    @property
    def outcome(self):
        if not self.finished:
            return "running"
        return "failed" if self.failed_at is not None else "done"

    def _fail(self, x, error=None):
        self.finished = True
        self.failed_at = x
        self.error = error

    def step(self):
        """Sample one point. Returns it, or None once the trace has finished."""
        if self.finished:
            return None

        current_x = self.next_x
        try:
            next_y = self.function(current_x)
        except E.EvalError as e:
            self._fail(current_x, e)
            return None

        y = next_y + self.shift_up
        if (math.isnan(y) or math.isinf(y) or
                (self.prev_y is not None and abs(self.prev_y - y) > self.graph_res * self.discontinuity_threshold)):
            self._fail(current_x)
            return None
        elif abs(current_x) > self.graph_bound or abs(y) > self.graph_bound:
            self.finished = True
            return None

        self.prev_y = y
        self.next_x = current_x + self.graph_res
        point = (current_x, y)
        self.points.append(point)
        return point

    def advance(self, count):
        """Run up to `count` steps (one timer tick) and return the new points."""
        new_points = []
        for _ in range(int(count)):
            point = self.step()
            if point is None:
                break
            new_points.append(point)
        return new_points

    def run(self):
        while not self.finished:
            self.step()
        return self.points
