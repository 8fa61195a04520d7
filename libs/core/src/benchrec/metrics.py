from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple

from .errors import EmptySampleSet
from .system_info import SystemInfo

"""Benchmark result containers and the statistics computed over them.

Durations are integer nanoseconds throughout (the unit of
``time.perf_counter_ns``) so raw samples keep sub-microsecond precision and
aggregate values are reproducible bit for bit.
"""

NANOS_PER_SEC = 1_000_000_000
NANOS_PER_MICRO = 1_000


class TimingMethod(enum.Enum):
    # Full timing of execution plus a sync barrier.
    SYSTEM = "System"
    # Hardware reported timestamps coming from a sync call.
    DEVICE = "Device"


def _as_secs(duration_ns: int) -> float:
    return duration_ns / NANOS_PER_SEC


def _from_secs(secs: float) -> int:
    return int(round(secs * NANOS_PER_SEC))


def now_millis() -> int:
    """Milliseconds since the epoch, used as the run start timestamp."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class BenchmarkDurations:
    timing_method: TimingMethod = TimingMethod.SYSTEM
    # All durations of the run, in the order they were benchmarked
    durations: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "durations", tuple(self.durations))

    def _require_samples(self) -> None:
        if not self.durations:
            raise EmptySampleSet("cannot compute statistics without any duration samples")

    def min_max_median(self) -> Tuple[int, int, int]:
        """Return ``(min, max, median)``.

        The median is the element at index ``n // 2`` of the sorted samples,
        i.e. the upper-middle value for an even count. It is never interpolated.
        """
        self._require_samples()
        ordered = sorted(self.durations)
        return ordered[0], ordered[-1], ordered[len(ordered) // 2]

    def mean(self) -> int:
        self._require_samples()
        return sum(self.durations) // len(self.durations)

    def variance(self, mean: Optional[int] = None) -> int:
        """Population variance, expressed as a duration.

        Each squared deviation is taken in float seconds and turned back into
        a duration before summing, so the result reads as "seconds squared"
        in a seconds-shaped value.
        """
        self._require_samples()
        if mean is None:
            mean = self.mean()
        mean_secs = _as_secs(mean)
        total = 0
        for duration in self.durations:
            tmp = _as_secs(duration) - mean_secs
            total += _from_secs(tmp * tmp)
        return total // len(self.durations)


@dataclass(frozen=True)
class BenchmarkComputations:
    mean: int = 0
    median: int = 0
    variance: int = 0
    min: int = 0
    max: int = 0

    @classmethod
    def from_durations(cls, durations: BenchmarkDurations) -> "BenchmarkComputations":
        mean = durations.mean()
        lo, hi, median = durations.min_max_median()
        return cls(
            mean=mean,
            median=median,
            variance=durations.variance(mean),
            min=lo,
            max=hi,
        )


def _freeze_shapes(shapes: Iterable[Iterable[int]]) -> Tuple[Tuple[int, ...], ...]:
    return tuple(tuple(int(dim) for dim in shape) for shape in shapes)


@dataclass(frozen=True)
class BenchmarkResult:
    """Result of a single benchmark run.

    ``computed`` is derived from ``raw`` when the result is built. Passing it
    explicitly is reserved for restoring stored values, whose statistics were
    truncated to microseconds when they were written.
    """

    name: str
    raw: BenchmarkDurations
    git_hash: str = ""
    options: Optional[str] = None
    shapes: Tuple[Tuple[int, ...], ...] = ()
    # Epoch milliseconds taken just before the run
    timestamp: int = 0
    computed: Optional[BenchmarkComputations] = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "shapes", _freeze_shapes(self.shapes))
        if self.computed is None:
            object.__setattr__(self, "computed", BenchmarkComputations.from_durations(self.raw))

    @classmethod
    def from_samples(
        cls,
        name: str,
        samples: Sequence[int],
        *,
        git_hash: str,
        options: Optional[str] = None,
        shapes: Iterable[Iterable[int]] = (),
        timestamp: Optional[int] = None,
        timing_method: TimingMethod = TimingMethod.SYSTEM,
    ) -> "BenchmarkResult":
        return cls(
            name=name,
            raw=BenchmarkDurations(timing_method=timing_method, durations=tuple(samples)),
            git_hash=git_hash,
            options=options,
            shapes=_freeze_shapes(shapes),
            timestamp=now_millis() if timestamp is None else timestamp,
        )

    @property
    def num_samples(self) -> int:
        return len(self.raw.durations)


@dataclass(frozen=True)
class BenchmarkRecord:
    backend: str
    device: str
    feature: str
    burn_version: str
    system_info: SystemInfo
    results: BenchmarkResult
