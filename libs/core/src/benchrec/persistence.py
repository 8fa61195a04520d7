from __future__ import annotations
"""Local result cache: one JSON file per run plus an append-only index.

The index (``benchmark_results.txt``) lists the absolute path of every record
file ever written to the cache directory, one per line, so later tooling can
pick the results up. It is opened in append mode only and never truncated.
"""

import logging
import os
import pathlib
from typing import Iterable, List, Optional, Sequence

from .codec import dumps, loads
from .config import DEFAULT_UPLOAD_TIMEOUT, INDEX_FILE_NAME, BenchrecConfig
from .errors import FilesystemFailure
from .metrics import BenchmarkRecord
from .upload import upload_record

log = logging.getLogger(__name__)


def record_file_name(record: BenchmarkRecord) -> str:
    return f"bench_{record.results.name}_{record.results.timestamp}.json"


class ResultStore:
    """Writes records below ``cache_dir`` and reads them back via the index."""

    def __init__(self, cache_dir: "os.PathLike[str] | str", *, upload_timeout: float = DEFAULT_UPLOAD_TIMEOUT) -> None:
        self.cache_dir = pathlib.Path(cache_dir).expanduser()
        self.upload_timeout = upload_timeout

    @classmethod
    def from_config(cls, config: Optional[BenchrecConfig] = None) -> "ResultStore":
        config = config or BenchrecConfig()
        return cls(config.cache_dir, upload_timeout=config.upload_timeout)

    @property
    def index_path(self) -> pathlib.Path:
        return self.cache_dir / INDEX_FILE_NAME

    def _ensure_cache_dir(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemFailure(f"cannot create cache directory {self.cache_dir}: {exc}", self.cache_dir) from exc

    def _write_record(self, record: BenchmarkRecord) -> pathlib.Path:
        path = (self.cache_dir / record_file_name(record)).resolve()
        # Encoded in full before the file is opened.
        text = dumps(record)
        try:
            with path.open("w", encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            raise FilesystemFailure(f"cannot write record file {path}: {exc}", path) from exc
        return path

    def _append_index(self, path: pathlib.Path) -> None:
        # One write per line in append mode so concurrent writers do not clobber each other.
        try:
            with self.index_path.open("a", encoding="utf-8") as f:
                f.write(f"{path}\n")
        except OSError as exc:
            raise FilesystemFailure(f"cannot append to index {self.index_path}: {exc}", self.index_path) from exc

    def save_records(
        self,
        records: Iterable[BenchmarkRecord],
        url: Optional[str] = None,
        token: Optional[str] = None,
    ) -> List[pathlib.Path]:
        """Persist ``records`` and optionally share each one with ``url``.

        Each record is written and indexed before its upload is attempted, so
        a failed upload never costs the local copy. Filesystem errors abort
        the whole call with ``FilesystemFailure``.
        """
        if url and not token:
            raise ValueError("an auth token is required to share results")
        self._ensure_cache_dir()

        written: List[pathlib.Path] = []
        for record in records:
            path = self._write_record(record)
            self._append_index(path)
            written.append(path)
            log.debug("Saved %s", path)

            if url:
                outcome = upload_record(record, token, url, timeout=self.upload_timeout)
                if not outcome.ok:
                    log.warning("Keeping local copy of %s at %s", record.results.name, path)
        return written

    def index_entries(self) -> List[pathlib.Path]:
        if not self.index_path.exists():
            return []
        lines = self.index_path.read_text(encoding="utf-8").splitlines()
        return [pathlib.Path(line.strip()) for line in lines if line.strip()]

    def load_record(self, path: "os.PathLike[str] | str") -> BenchmarkRecord:
        return loads(pathlib.Path(path).read_text(encoding="utf-8"))

    def load_records(self) -> List[BenchmarkRecord]:
        """Decode every indexed record that still exists on disk."""
        records: List[BenchmarkRecord] = []
        for path in self.index_entries():
            if not path.exists():
                log.warning("Indexed result file is missing: %s", path)
                continue
            records.append(self.load_record(path))
        return records


def save_records(
    records: Sequence[BenchmarkRecord],
    url: Optional[str] = None,
    token: Optional[str] = None,
    *,
    cache_dir: "os.PathLike[str] | str | None" = None,
) -> List[pathlib.Path]:
    store = ResultStore(cache_dir) if cache_dir is not None else ResultStore.from_config()
    return store.save_records(records, url=url, token=token)
