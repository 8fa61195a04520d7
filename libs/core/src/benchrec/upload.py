from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from . import __version__
from .codec import encode
from .config import DEFAULT_UPLOAD_TIMEOUT
from .errors import UploadFailure
from .metrics import BenchmarkRecord

"""Single-shot upload of a record to the collection server.

One POST per record; no retries, no queueing. Every failure is logged and
returned as an ``UploadOutcome`` so callers can carry on with the next record.
"""

log = logging.getLogger(__name__)

USER_AGENT = f"benchrec/{__version__}"


@dataclass(frozen=True)
class UploadOutcome:
    ok: bool
    status: Optional[int] = None
    error: Optional[str] = None


def build_headers(token: str) -> dict:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
        "Authorization": f"Bearer {token}",
    }


def _post_record(
    record: BenchmarkRecord,
    token: str,
    url: str,
    timeout: float,
    session: Optional[requests.Session],
) -> int:
    poster = session if session is not None else requests
    try:
        response = poster.post(url, headers=build_headers(token), json=encode(record), timeout=timeout)
    except requests.RequestException as exc:
        raise UploadFailure(f"request to {url} failed: {exc}") from exc
    if not 200 <= response.status_code < 300:
        raise UploadFailure(
            f"server answered {response.status_code} {response.reason or ''}".rstrip(),
            status=response.status_code,
        )
    return response.status_code


def upload_record(
    record: BenchmarkRecord,
    token: str,
    url: str,
    *,
    timeout: float = DEFAULT_UPLOAD_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> UploadOutcome:
    """POST one record as JSON to ``url`` using ``token`` as bearer credential."""
    log.info("Sharing results for %s...", record.results.name)
    try:
        status = _post_record(record, token, url, timeout, session)
    except UploadFailure as exc:
        log.warning("Failed to share results for %s: %s", record.results.name, exc)
        return UploadOutcome(ok=False, status=exc.status, error=str(exc))
    log.info("Results for %s shared successfully.", record.results.name)
    return UploadOutcome(ok=True, status=status)
