from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
CLI_SRC = ROOT / "apps" / "cli" / "src"
CORE_SRC = ROOT / "libs" / "core" / "src"

for candidate in (CLI_SRC, CORE_SRC):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from benchrec import (  # noqa: E402
    BenchmarkDurations,
    BenchmarkRecord,
    BenchmarkResult,
    SystemInfo,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("BENCHREC_CACHE_DIR", "BENCHREC_SERVER_URL", "BENCHREC_TOKEN", "BENCHREC_UPLOAD_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "benchrec"

def make_record(name: str = "unary", timestamp: int = 1710208069697, samples=None) -> BenchmarkRecord:
    if samples is None:
        samples = [8_858_583, 8_719_822, 8_705_335, 8_835_636, 8_592_507]
    result = BenchmarkResult(
        name=name,
        raw=BenchmarkDurations(durations=samples),
        git_hash="02d37011ab4dc773286e5983c09cde61f95ba4b5",
        options=None,
        shapes=[[32, 512, 1024]],
        timestamp=timestamp,
    )
    return BenchmarkRecord(
        backend="candle",
        device="Cuda(0)",
        feature="wgpu-fusion",
        burn_version="0.13.0",
        system_info=SystemInfo(cpus=["AMD Ryzen 9 7950X"], gpus=["NVIDIA GeForce RTX 4090"]),
        results=result,
    )

@pytest.fixture
def record() -> BenchmarkRecord:
    return make_record()
