from __future__ import annotations

import os
import pathlib
from typing import Optional

"""Environment-driven settings for the result store and upload client.

Every value can be overridden through a ``BENCHREC_*`` variable; empty values
count as unset so ``BENCHREC_TOKEN=`` in a shell does not enable uploads.
"""

INDEX_FILE_NAME = "benchmark_results.txt"
DEFAULT_SERVER_URL = "http://localhost:8000/"
DEFAULT_UPLOAD_TIMEOUT = 30.0

def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if (v is not None and str(v).strip() != "") else default

def default_cache_dir() -> pathlib.Path:
    return pathlib.Path.home() / ".cache" / "benchrec"

class BenchrecConfig:
    """Container for cache location and sharing settings."""

    def __init__(self) -> None:
        cache_dir = _env("BENCHREC_CACHE_DIR")
        self.cache_dir: pathlib.Path = (
            pathlib.Path(cache_dir).expanduser() if cache_dir else default_cache_dir()
        )
        self.server_url: str = _env("BENCHREC_SERVER_URL", DEFAULT_SERVER_URL) or DEFAULT_SERVER_URL
        self.token: Optional[str] = _env("BENCHREC_TOKEN")
        try:
            self.upload_timeout: float = float(_env("BENCHREC_UPLOAD_TIMEOUT") or DEFAULT_UPLOAD_TIMEOUT)
        except ValueError:
            self.upload_timeout = DEFAULT_UPLOAD_TIMEOUT
        if self.upload_timeout <= 0:
            self.upload_timeout = DEFAULT_UPLOAD_TIMEOUT
