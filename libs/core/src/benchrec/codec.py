from __future__ import annotations
"""Flat JSON schema for benchmark records.

Records are stored and shared as a single flat object so they can be queried
directly from a document database::

    {
      "backend": "backend name",
      "device": "device name",
      "feature": "feature name",
      "gitHash": "hash",
      "burnVersion": "version",
      "max": <duration in microseconds>,
      "mean": <duration in microseconds>,
      "median": <duration in microseconds>,
      "min": <duration in microseconds>,
      "name": "benchmark name",
      "numSamples": <number of samples>,
      "options": "options" | null,
      "rawDurations": [{"secs": <seconds>, "nanos": <nanoseconds>}, ...],
      "systemInfo": {"cpus": ["cpu1", ...], "gpus": ["gpu1", ...]},
      "shapes": [[shape 1], [shape 2], ...],
      "timestamp": <epoch milliseconds>,
      "variance": <duration in microseconds>
    }

``_FIELDS`` is the single source of truth for both directions.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import MalformedRecord
from .metrics import (
    NANOS_PER_MICRO,
    NANOS_PER_SEC,
    BenchmarkComputations,
    BenchmarkDurations,
    BenchmarkRecord,
    BenchmarkResult,
)
from .system_info import SystemInfo


def _expect_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _expect_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _expect_str(value)


def _expect_uint(value: Any) -> int:
    # bool is an int subclass; JSON true/false is never a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {value}")
    return value


def _micros_to_nanos(value: Any) -> int:
    return _expect_uint(value) * NANOS_PER_MICRO


def _nanos_to_micros(duration: int) -> int:
    return duration // NANOS_PER_MICRO


def _encode_duration(duration: int) -> Dict[str, int]:
    secs, nanos = divmod(duration, NANOS_PER_SEC)
    return {"secs": secs, "nanos": nanos}


def _decode_duration(value: Any) -> int:
    if not isinstance(value, Mapping):
        raise TypeError("duration must be an object with 'secs' and 'nanos'")
    if set(value.keys()) != {"secs", "nanos"}:
        raise ValueError(f"duration must have exactly 'secs' and 'nanos', got {sorted(value.keys())}")
    secs = _expect_uint(value["secs"])
    nanos = _expect_uint(value["nanos"])
    if nanos >= NANOS_PER_SEC:
        raise ValueError(f"nanos out of range: {nanos}")
    return secs * NANOS_PER_SEC + nanos


def _decode_durations(value: Any) -> Tuple[int, ...]:
    if not isinstance(value, list):
        raise TypeError("rawDurations must be a list")
    return tuple(_decode_duration(item) for item in value)


def _decode_shapes(value: Any) -> Tuple[Tuple[int, ...], ...]:
    if not isinstance(value, list) or not all(isinstance(shape, list) for shape in value):
        raise TypeError("shapes must be a list of lists")
    return tuple(tuple(_expect_uint(dim) for dim in shape) for shape in value)


def _decode_system_info(value: Any) -> SystemInfo:
    return SystemInfo.from_dict(value)


@dataclass(frozen=True)
class _Field:
    key: str
    encode: Callable[[BenchmarkRecord], Any]
    decode: Callable[[Any], Any]
    # Model slot the decoded value fills; None means parsed then dropped.
    target: Optional[str]


_FIELDS: Tuple[_Field, ...] = (
    _Field("backend", lambda r: r.backend, _expect_str, "backend"),
    _Field("device", lambda r: r.device, _expect_str, "device"),
    _Field("feature", lambda r: r.feature, _expect_str, "feature"),
    _Field("gitHash", lambda r: r.results.git_hash, _expect_str, "git_hash"),
    _Field("burnVersion", lambda r: r.burn_version, _expect_str, "burn_version"),
    _Field("max", lambda r: _nanos_to_micros(r.results.computed.max), _micros_to_nanos, "max"),
    _Field("mean", lambda r: _nanos_to_micros(r.results.computed.mean), _micros_to_nanos, "mean"),
    _Field("median", lambda r: _nanos_to_micros(r.results.computed.median), _micros_to_nanos, "median"),
    _Field("min", lambda r: _nanos_to_micros(r.results.computed.min), _micros_to_nanos, "min"),
    _Field("name", lambda r: r.results.name, _expect_str, "name"),
    # Redundant with len(rawDurations); regenerated on every encode.
    _Field("numSamples", lambda r: r.results.num_samples, _expect_uint, None),
    _Field("options", lambda r: r.results.options, _expect_optional_str, "options"),
    _Field(
        "rawDurations",
        lambda r: [_encode_duration(d) for d in r.results.raw.durations],
        _decode_durations,
        "durations",
    ),
    _Field("systemInfo", lambda r: r.system_info.to_dict(), _decode_system_info, "system_info"),
    _Field("shapes", lambda r: [list(shape) for shape in r.results.shapes], _decode_shapes, "shapes"),
    _Field("timestamp", lambda r: r.results.timestamp, _expect_uint, "timestamp"),
    _Field(
        "variance",
        lambda r: _nanos_to_micros(r.results.computed.variance),
        _micros_to_nanos,
        "variance",
    ),
)

_FIELDS_BY_KEY: Dict[str, _Field] = {f.key: f for f in _FIELDS}

FIELD_NAMES: Tuple[str, ...] = tuple(f.key for f in _FIELDS)


def encode(record: BenchmarkRecord) -> Dict[str, Any]:
    """Flatten a record into the external schema (statistics in microseconds)."""
    return {f.key: f.encode(record) for f in _FIELDS}


def decode(payload: Mapping[str, Any]) -> BenchmarkRecord:
    """Rebuild a record from its flat form.

    Keys may arrive in any order. ``numSamples`` is checked for type and then
    ignored: the length of ``rawDurations`` is authoritative. Any other
    unknown key, a missing key or a value of the wrong shape raises
    ``MalformedRecord``.
    """
    if not isinstance(payload, Mapping):
        raise MalformedRecord(f"expected a JSON object, got {type(payload).__name__}")

    values: Dict[str, Any] = {}
    for key, raw_value in payload.items():
        spec = _FIELDS_BY_KEY.get(key)
        if spec is None:
            raise MalformedRecord(f"unexpected key: {key!r}", key=key)
        try:
            value = spec.decode(raw_value)
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(f"invalid value for {key!r}: {exc}", key=key) from exc
        if spec.target is not None:
            values[spec.target] = value

    missing: List[str] = [f.key for f in _FIELDS if f.target is not None and f.target not in values]
    if missing:
        raise MalformedRecord(f"missing keys: {', '.join(missing)}", key=missing[0])

    computed = BenchmarkComputations(
        mean=values["mean"],
        median=values["median"],
        variance=values["variance"],
        min=values["min"],
        max=values["max"],
    )
    results = BenchmarkResult(
        name=values["name"],
        raw=BenchmarkDurations(durations=values["durations"]),
        git_hash=values["git_hash"],
        options=values["options"],
        shapes=values["shapes"],
        timestamp=values["timestamp"],
        computed=computed,
    )
    return BenchmarkRecord(
        backend=values["backend"],
        device=values["device"],
        feature=values["feature"],
        burn_version=values["burn_version"],
        system_info=values["system_info"],
        results=results,
    )


def dumps(record: BenchmarkRecord) -> str:
    """Pretty JSON text for ``record``; unserializable values raise ``MalformedRecord``."""
    try:
        return json.dumps(encode(record), indent=2)
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(f"record {record.results.name!r} cannot be serialized: {exc}") from exc


def loads(text: str) -> BenchmarkRecord:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedRecord(f"invalid JSON: {exc}") from exc
    return decode(payload)
