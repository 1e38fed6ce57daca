"""Streaming quantile estimation.

A Greenwald-Khanna summary ("Space-Efficient Online Computation of Quantile
Summaries") sized for the tightest error tolerance among the configured
objectives. Every tuple keeps ``width + delta <= 2 * epsilon * n``, which
bounds the rank error of any query by ``epsilon * n`` regardless of the
order observations arrive in.

Observations are buffered and merged into the summary in sorted batches.
Until the first merge, queries are answered exactly from the buffer.
"""

import math
import threading
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_BUFFER_SIZE = 500


@dataclass
class _Sample:
    value: float
    # Rank distance to the previous sample, and uncertainty of this rank
    width: int
    delta: int


class QuantileStream:
    """Bounded-memory estimator for a fixed set of target quantiles.

    Memory grows as ``O(log(epsilon * n) / epsilon)`` for the smallest
    configured epsilon. Not thread-safe; callers serialize access (see
    ``LockedQuantileStream``).
    """

    def __init__(
        self,
        objectives: Mapping[float, float],
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ):
        if not objectives:
            raise ValueError("At least one quantile objective is required")
        for quantile, epsilon in objectives.items():
            if not 0.0 < quantile < 1.0:
                raise ValueError(f"Quantile {quantile} must be in (0, 1)")
            if not 0.0 <= epsilon < 1.0:
                raise ValueError(f"Error tolerance {epsilon} must be in [0, 1)")
        if buffer_size < 1:
            raise ValueError("Buffer size must be positive")

        self.objectives = dict(sorted(objectives.items()))
        self.epsilon = min(self.objectives.values())
        self._buffer_size = buffer_size
        self._buffer: list[float] = []
        self._samples: list[_Sample] = []
        self._n = 0
        self._flushed = False

    def __len__(self) -> int:
        return self._n + len(self._buffer)

    def insert(self, value: float) -> None:
        """Add one observation."""
        self._buffer.append(value)
        if len(self._buffer) >= self._buffer_size:
            self._flush()

    def query(self, quantile: float) -> float:
        """Estimate the value at ``quantile``; NaN when the stream is empty."""
        if not self._flushed:
            if not self._buffer:
                return math.nan
            self._buffer.sort()
            i = max(int(math.ceil(len(self._buffer) * quantile)) - 1, 0)
            return self._buffer[i]

        self._flush()
        rank = max(math.ceil(quantile * self._n), 1)
        allowed = rank + self.epsilon * self._n

        # Last sample whose maximum possible rank stays within the allowance
        prev = self._samples[0]
        min_rank = 0
        for current in self._samples:
            min_rank += current.width
            if min_rank + current.delta > allowed:
                return prev.value
            prev = current
        return prev.value

    def reset(self) -> None:
        """Drop all observations."""
        self._buffer.clear()
        self._samples.clear()
        self._n = 0
        self._flushed = False

    def _flush(self) -> None:
        if not self._buffer:
            return
        self._buffer.sort()
        self._merge(self._buffer)
        self._buffer = []
        self._flushed = True
        self._compress()

    def _merge(self, values: list[float]) -> None:
        old = self._samples
        merged: list[_Sample] = []
        i = 0
        for value in values:
            while i < len(old) and old[i].value <= value:
                merged.append(old[i])
                i += 1
            if not merged or i == len(old):
                # New minimum or maximum: rank is exact
                delta = 0
            else:
                delta = old[i].width + old[i].delta - 1
            merged.append(_Sample(value, 1, delta))
        merged.extend(old[i:])
        self._samples = merged
        self._n += len(values)

    def _compress(self) -> None:
        samples = self._samples
        capacity = math.floor(2 * self.epsilon * self._n)
        if len(samples) < 3 or capacity < 2:
            return

        # Fold samples into their right neighbour; the minimum and maximum stay
        kept = [samples[-1]]
        for current in reversed(samples[1:-1]):
            head = kept[-1]
            if current.width + head.width + head.delta <= capacity:
                head.width += current.width
            else:
                kept.append(current)
        kept.append(samples[0])
        kept.reverse()
        self._samples = kept


class LockedQuantileStream:
    """A ``QuantileStream`` paired with running sum and count under one lock."""

    def __init__(self, objectives: Mapping[float, float]):
        self._stream = QuantileStream(objectives)
        self._lock = threading.Lock()
        self._sum = 0.0
        self._count = 0

    def observe(self, value: float) -> None:
        with self._lock:
            self._stream.insert(value)
            self._sum += value
            self._count += 1

    def snapshot(self) -> tuple[dict[float, float], float, int]:
        """Return ``(quantile estimates, sum, count)`` taken atomically."""
        with self._lock:
            estimates = {
                q: self._stream.query(q) for q in self._stream.objectives
            }
            return estimates, self._sum, self._count
