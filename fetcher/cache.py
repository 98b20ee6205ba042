"""Thread-safe host -> RobotsPolicy cache with explicit clearing only."""

from __future__ import annotations

import threading

from core.models import RobotsPolicy


class ComplianceCache:
    """
    Unbounded policy cache shared by crawl workers.

    Entries never expire; they live until `clear()`. Policies are frozen, so
    handing the stored object to several threads is safe.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, RobotsPolicy] = {}

    def get(self, host_key: str) -> RobotsPolicy | None:
        """Return the cached policy for a host, if any."""
        with self._lock:
            return self._entries.get(host_key)

    def put_if_absent(self, host_key: str, policy: RobotsPolicy) -> RobotsPolicy:
        """Store `policy` unless another worker already did; return the stored one."""
        with self._lock:
            return self._entries.setdefault(host_key, policy)

    def clear(self) -> None:
        """Drop every cached policy."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, host_key: object) -> bool:
        with self._lock:
            return host_key in self._entries
