__version__ = "0.1.0"

from .errors import (
    BenchrecError,
    EmptySampleSet,
    FilesystemFailure,
    MalformedRecord,
    UploadFailure,
)
from .system_info import SystemInfo
from .metrics import (
    BenchmarkComputations,
    BenchmarkDurations,
    BenchmarkRecord,
    BenchmarkResult,
    TimingMethod,
    now_millis,
)
from .codec import decode, encode
from .config import BenchrecConfig
from .upload import UploadOutcome, upload_record
from .persistence import ResultStore, save_records

__all__ = [
    "__version__",
    "BenchrecError",
    "EmptySampleSet",
    "FilesystemFailure",
    "MalformedRecord",
    "UploadFailure",
    "SystemInfo",
    "TimingMethod",
    "BenchmarkDurations",
    "BenchmarkComputations",
    "BenchmarkResult",
    "BenchmarkRecord",
    "now_millis",
    "encode",
    "decode",
    "BenchrecConfig",
    "UploadOutcome",
    "upload_record",
    "ResultStore",
    "save_records",
]
