"""
Exception types raised by the benchrec core.

Filesystem and contract errors propagate to the caller. Upload errors are
converted into an ``UploadOutcome`` by the upload client and never escape it.
"""

from __future__ import annotations

import os
from typing import Optional


class BenchrecError(Exception):
    """Base class for all benchrec errors."""


class EmptySampleSet(BenchrecError, ValueError):
    """Statistics were requested for a run without any duration samples."""


class MalformedRecord(BenchrecError, ValueError):
    """A flat record could not be decoded (unknown, missing or mistyped key)."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class FilesystemFailure(BenchrecError, OSError):
    """The cache directory, a record file or the index could not be written."""

    def __init__(self, message: str, path: "os.PathLike[str] | str | None" = None) -> None:
        super().__init__(message)
        self.path = path


class UploadFailure(BenchrecError):
    """The collection server rejected a record or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


__all__ = [
    "BenchrecError",
    "EmptySampleSet",
    "MalformedRecord",
    "FilesystemFailure",
    "UploadFailure",
]
