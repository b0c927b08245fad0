"""
Replicate-run progress for SimRel.

``simulate_many`` reports progress through any callable taking
``(done, total)``. ``ReplicateProgress`` sits between the runner and that
callable and decides which counts are worth reporting. Two ready-made
callables are provided: ``PrintReporter`` for a terminal line and
``TqdmReporter`` for a tqdm bar.
"""

import math
import sys
from typing import Callable, Optional, TextIO


class SimulationCancelled(Exception):
    """A replicate run was stopped by its ``cancel_check``."""


class ReplicateProgress:
    """Counts finished replicates and forwards selected counts.

    The callback always sees ``(0, total)`` first and ``(total, total)``
    last. In between it is called whenever at least *min_step* replicates
    finished since the last report. No count is reported twice.

    Args:
        total: Number of replicates in the run.
        callback: Called as ``callback(done, total)``.
        min_step: Replicates between two reports. Defaults to one
            percent of *total*, at least 1.
    """

    def __init__(self, total: int, callback: Callable[[int, int], None], min_step: Optional[int] = None):
        self.total = total
        self.min_step = min_step if min_step is not None else max(1, math.ceil(total / 100))
        self._callback = callback
        self.done = 0
        self._last_reported: Optional[int] = None

    def _report(self):
        if self._last_reported != self.done:
            self._last_reported = self.done
            self._callback(self.done, self.total)

    def begin(self):
        self.done = 0
        self._last_reported = None
        self._report()

    def completed(self, k: int = 1):
        """Record *k* more finished replicates."""
        self.done = min(self.done + k, self.total)
        last = self._last_reported or 0
        if self.done == self.total or self.done - last >= self.min_step:
            self._report()

    def end(self):
        """Report ``(total, total)`` unless it was the last report."""
        self.done = self.total
        self._report()


class PrintReporter:
    """Rewrites one terminal line, e.g. ``replicates: 40/200 (20%)``.

    Args:
        stream: Text stream to write to. Defaults to ``sys.stderr`` at
            call time.
        label: Text in front of the counts.
    """

    def __init__(self, stream: Optional[TextIO] = None, label: str = "replicates"):
        self.stream = stream
        self.label = label

    def __call__(self, done: int, total: int):
        if total <= 0:
            return
        out = self.stream if self.stream is not None else sys.stderr
        out.write(f"\r{self.label}: {done}/{total} ({100 * done / total:.0f}%)")
        if done >= total:
            out.write("\n")
        out.flush()


class TqdmReporter:
    """Shows replicate progress as a tqdm bar.

    tqdm is imported on the first call, so it is only needed when this
    reporter is used (``pip install SimRel[progress]``). Keyword
    arguments go to ``tqdm.tqdm``.
    """

    def __init__(self, **tqdm_kwargs):
        tqdm_kwargs.setdefault("desc", "replicates")
        tqdm_kwargs.setdefault("unit", "rep")
        self._tqdm_kwargs = tqdm_kwargs
        self._bar = None

    def __call__(self, done: int, total: int):
        from tqdm import tqdm

        if self._bar is None:
            self._bar = tqdm(total=total, **self._tqdm_kwargs)
        if done > self._bar.n:
            self._bar.update(done - self._bar.n)
        if done >= total:
            self._bar.close()
            self._bar = None
