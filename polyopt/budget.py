"""Refinement budgets for the inner-bound sampling loop.

A budget is started with the time spent on the outer bound and is then
polled after every sample. TimeBudget reproduces the adaptive wall-clock rule
(stop once sampling has used a fixed fraction of the outer-bound time);
SampleBudget stops after a fixed number of samples and makes the loop
reproducible.
"""
import time

from .config import REFINE_TIME_FRACTION
from .errors import InvalidArgument


class TimeBudget:
    """Spend `fraction` of the outer-bound time on sampling."""

    def __init__(self, fraction=REFINE_TIME_FRACTION, clock=time.perf_counter):
        if fraction < 0:
            raise InvalidArgument(f"fraction must be >= 0, got {fraction}")
        self.fraction = fraction
        self.clock = clock
        self.start_time = None
        self.limit = 0.0

    def target_time(self, ob_time):
        """Refinement time allowed for an outer bound that took ob_time seconds."""
        return self.fraction * max(ob_time, 0.0)

    def start(self, ob_time):
        self.limit = self.target_time(ob_time)
        self.start_time = self.clock()

    def elapsed(self):
        if self.start_time is None:
            return 0.0
        return self.clock() - self.start_time

    def exhausted(self, n_samples):
        # the first sample is always drawn
        if n_samples == 0:
            return False
        return self.elapsed() >= self.limit

    def status_line(self):
        return f"refine: {self.elapsed():.3f}s / {self.limit:.3f}s"


class SampleBudget:
    """Stop after exactly n_samples samples, independent of timing."""

    def __init__(self, n_samples):
        if isinstance(n_samples, bool) or int(n_samples) != n_samples or n_samples < 0:
            raise InvalidArgument(f"n_samples must be a non-negative integer, got {n_samples!r}")
        self.n_samples = int(n_samples)
        self.start_time = None
        self.limit = None

    def target_time(self, ob_time):
        return None

    def start(self, ob_time):
        self.start_time = time.perf_counter()

    def elapsed(self):
        if self.start_time is None:
            return 0.0
        return time.perf_counter() - self.start_time

    def exhausted(self, n_samples):
        return n_samples >= self.n_samples

    def status_line(self):
        return f"refine: {self.n_samples} samples, {self.elapsed():.3f}s"
