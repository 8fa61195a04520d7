from __future__ import annotations

import dataclasses

import pytest

from benchrec import (
    BenchmarkComputations,
    BenchmarkDurations,
    BenchmarkResult,
    EmptySampleSet,
    TimingMethod,
)

SECOND = 1_000_000_000


def _secs(*values: int) -> BenchmarkDurations:
    return BenchmarkDurations(
        timing_method=TimingMethod.SYSTEM,
        durations=[v * SECOND for v in values],
    )


def test_min_max_median_odd_number_of_samples() -> None:
    lo, hi, median = _secs(10, 20, 30, 40, 50).min_max_median()
    assert lo == 10 * SECOND
    assert hi == 50 * SECOND
    assert median == 30 * SECOND


def test_median_even_count_takes_upper_middle() -> None:
    durations = BenchmarkDurations(
        durations=[18 * SECOND + 5, 20 * SECOND, 30 * SECOND, 40 * SECOND],
    )
    lo, hi, median = durations.min_max_median()
    assert lo == 18_000_000_005
    assert hi == 40 * SECOND
    assert median == 30 * SECOND


def test_median_ignores_measurement_order() -> None:
    _, _, median = _secs(40, 10, 30, 20).min_max_median()
    assert median == 30 * SECOND


def test_mean_duration() -> None:
    assert _secs(10, 20, 30, 40).mean() == 25 * SECOND


def test_mean_truncates_to_nanoseconds() -> None:
    assert BenchmarkDurations(durations=[1, 2]).mean() == 1


def test_population_variance() -> None:
    durations = _secs(10, 20, 30, 40, 50)
    mean = durations.mean()
    assert durations.variance(mean) == 200 * SECOND
    assert durations.variance() == 200 * SECOND


def test_variance_of_identical_samples_is_zero() -> None:
    assert BenchmarkDurations(durations=[8_506_423] * 4).variance() == 0


@pytest.mark.parametrize(
    "samples",
    [
        [1],
        [5, 3],
        [8_858_583, 8_719_822, 8_705_335, 8_835_636, 8_592_507, 8_506_423],
        [SECOND, 3, 70 * SECOND, 12_345],
    ],
)
def test_statistics_are_bounded_by_extremes(samples) -> None:
    computed = BenchmarkComputations.from_durations(BenchmarkDurations(durations=samples))
    assert computed.min <= computed.median <= computed.max
    assert computed.min <= computed.mean <= computed.max
    assert computed.variance >= 0


def test_empty_samples_fail_fast() -> None:
    empty = BenchmarkDurations()
    with pytest.raises(EmptySampleSet):
        empty.mean()
    with pytest.raises(EmptySampleSet):
        BenchmarkComputations.from_durations(empty)
    with pytest.raises(EmptySampleSet):
        BenchmarkResult(name="noop", raw=empty, git_hash="abc")


def test_result_computes_statistics_on_construction() -> None:
    raw = _secs(10, 20, 30, 40, 50)
    result = BenchmarkResult(name="matmul", raw=raw, git_hash="abc", shapes=[[2, 3], [3, 4]], timestamp=1)
    assert result.computed == BenchmarkComputations(
        mean=30 * SECOND,
        median=30 * SECOND,
        variance=200 * SECOND,
        min=10 * SECOND,
        max=50 * SECOND,
    )
    assert result.shapes == ((2, 3), (3, 4))
    assert result.num_samples == 5


def test_result_from_samples_defaults() -> None:
    result = BenchmarkResult.from_samples(
        "conv2d",
        [3, 1, 2],
        git_hash="abc",
        timing_method=TimingMethod.DEVICE,
    )
    assert result.raw.timing_method is TimingMethod.DEVICE
    assert result.raw.durations == (3, 1, 2)
    assert result.computed.median == 2
    assert result.options is None
    assert result.shapes == ()
    assert result.timestamp > 1_600_000_000_000


def test_result_is_immutable() -> None:
    result = BenchmarkResult(name="x", raw=_secs(1), git_hash="abc")
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.name = "y"  # type: ignore[misc]


def test_default_timing_method_is_system() -> None:
    assert BenchmarkDurations().timing_method is TimingMethod.SYSTEM
