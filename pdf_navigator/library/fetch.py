from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from .errors import DocumentLoadError, FetchFailed, FetchTimeout
from .identifiers import is_url

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class Deadline:
    """
    Wall-clock budget for one load, shared by fetching and decoding.
    """

    timeout: float
    expires_at: float

    @classmethod
    def after(cls, timeout: float) -> "Deadline":
        return cls(timeout=timeout, expires_at=time.monotonic() + timeout)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    def check(self, locator: str) -> None:
        if time.monotonic() > self.expires_at:
            raise FetchTimeout(locator, self.timeout)


class SourceFetcher:
    """
    Reads document bytes from a local path or an http(s) URL.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None, chunk_size: int = 65536):
        self.transport = transport
        self.chunk_size = chunk_size

    def fetch(self, locator: str, deadline: Optional[Deadline] = None) -> bytes:
        deadline = deadline or Deadline.after(DEFAULT_TIMEOUT)
        if is_url(locator):
            return self._fetch_url(locator, deadline)
        return self._read_file(locator)

    def _read_file(self, locator: str) -> bytes:
        path = Path(locator).expanduser()
        if not path.is_file():
            raise DocumentLoadError(f"PDF not found: {locator}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise DocumentLoadError(f"Could not read {locator}: {exc}") from exc

    def _fetch_url(self, url: str, deadline: Deadline) -> bytes:
        logger.info("Fetching %s (timeout %ss)", url, deadline.timeout)
        chunks = []
        try:
            with httpx.Client(
                timeout=httpx.Timeout(deadline.remaining()),
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchFailed(url, f"{response.status_code} {response.reason_phrase}")
                    for chunk in response.iter_bytes(self.chunk_size):
                        deadline.check(url)
                        chunks.append(chunk)
        except httpx.TimeoutException as exc:
            raise FetchTimeout(url, deadline.timeout) from exc
        except httpx.RequestError as exc:
            raise FetchFailed(url, str(exc)) from exc
        return b"".join(chunks)
