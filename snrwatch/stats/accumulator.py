"""Streaming count/mean/variance/min/max accumulator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from snrwatch.util.math import sqrt_nonfinite_safe


@dataclass(frozen=True)
class StatSummary:
    n: int
    mean: float
    stddev: float
    min: float
    max: float


@dataclass
class Accumulator:
    """Running statistics for one numeric series, without keeping history.

    ``var_accum`` holds the sample variance (ddof=1). It is advanced with the
    recurrence in :meth:`update`; reports produced by earlier versions of the
    tool depend on that exact operation order, so keep it as written.
    """

    count: int
    mean: float
    var_accum: float
    min: float
    max: float

    @classmethod
    def create(cls, x: float) -> "Accumulator":
        return cls(count=1, mean=x, var_accum=0.0, min=x, max=x)

    def update(self, x: float) -> None:
        self.count += 1
        n = self.count
        self.mean = ((n - 1) * self.mean + x) / n
        if n < 2:
            self.var_accum = 0.0
        else:
            self.var_accum = ((n - 2) * self.var_accum + n * (self.mean - x) * (self.mean - x) / (n - 1)) / (n - 1)
        self.min = min(self.min, x)
        self.max = max(self.max, x)

    def summary(self) -> StatSummary:
        return StatSummary(
            n=self.count,
            mean=self.mean,
            stddev=sqrt_nonfinite_safe(self.var_accum),
            min=self.min,
            max=self.max,
        )


def observe(acc: Optional[Accumulator], x: float) -> Accumulator:
    """Create ``acc`` from ``x`` when absent, otherwise fold ``x`` into it."""
    if acc is None:
        return Accumulator.create(x)
    acc.update(x)
    return acc
