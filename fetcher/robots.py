"""Robots.txt retrieval with conservative status classification."""

from __future__ import annotations

from dataclasses import dataclass

import requests

from core.config import ComplianceConfig
from core.models import FetchStatus


# Client errors that mean "policy exists but we may not read it".
_DENIED_STATUS_CODES = frozenset({401, 403, 429})


@dataclass(slots=True, frozen=True)
class FetchOutcome:
    """Result of one robots.txt request."""

    status: FetchStatus
    body: str = ""
    status_code: int | None = None
    error: str | None = None

    @classmethod
    def ok(cls, body: str, status_code: int = 200) -> FetchOutcome:
        return cls(status=FetchStatus.OK, body=body, status_code=status_code)

    @classmethod
    def not_found(cls, status_code: int = 404) -> FetchOutcome:
        return cls(status=FetchStatus.NOT_FOUND, status_code=status_code)

    @classmethod
    def server_error(cls, status_code: int | None = None, error: str | None = None) -> FetchOutcome:
        return cls(status=FetchStatus.SERVER_ERROR, status_code=status_code, error=error)

    @classmethod
    def network_error(cls, error: str) -> FetchOutcome:
        return cls(status=FetchStatus.NETWORK_ERROR, error=error)


def robots_url_for(host_key: str) -> str:
    """Return the robots.txt location for a `scheme://authority` host key."""
    return f"{host_key}/robots.txt"


def classify_status(status_code: int) -> FetchStatus:
    """Map an HTTP status code onto the fetch outcome taxonomy."""
    if 200 <= status_code < 300:
        return FetchStatus.OK
    if status_code in _DENIED_STATUS_CODES:
        return FetchStatus.SERVER_ERROR
    if 400 <= status_code < 500:
        return FetchStatus.NOT_FOUND
    return FetchStatus.SERVER_ERROR


def _read_body_with_limit(response: requests.Response, max_bytes: int) -> bytes:
    """Read the response body, stopping once `max_bytes` have been received."""
    chunks: list[bytes] = []
    total = 0
    for chunk in response.iter_content(chunk_size=8192):
        if not chunk:
            continue
        chunks.append(chunk[: max_bytes - total])
        total += len(chunks[-1])
        if total >= max_bytes:
            break
    return b"".join(chunks)


class PolicyFetcher:
    """Fetch robots.txt for a host and classify the response."""

    def __init__(
        self,
        user_agent: str = ComplianceConfig.USER_AGENT,
        timeout_seconds: float = ComplianceConfig.ROBOTS_TIMEOUT_SECONDS,
        max_bytes: int = ComplianceConfig.MAX_ROBOTS_BYTES,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize request policy and the shared HTTP session."""
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if max_bytes <= 0:
            raise ValueError("max_bytes must be > 0")
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds
        self.max_bytes = max_bytes
        self._session = session or requests.Session()

    def fetch(self, host_key: str) -> FetchOutcome:
        """
        Request `<host_key>/robots.txt` once.

        The body is streamed and reading stops at `max_bytes`. Transport
        failures (timeout, DNS, connection refused, redirect loops, broken
        streams) become NETWORK_ERROR; this method never raises for them.
        """
        robots_url = robots_url_for(host_key)
        try:
            response = self._session.get(
                robots_url,
                headers={"User-Agent": self.user_agent},
                allow_redirects=True,
                timeout=self.timeout_seconds,
                stream=True,
            )
        except requests.Timeout as exc:
            return FetchOutcome.network_error(f"timeout fetching {robots_url}: {exc}")
        except requests.RequestException as exc:
            return FetchOutcome.network_error(f"request error fetching {robots_url}: {exc}")

        try:
            status = classify_status(response.status_code)
            if status is FetchStatus.OK:
                body = _read_body_with_limit(response, self.max_bytes)
                return FetchOutcome.ok(
                    body.decode("utf-8", errors="replace"),
                    status_code=response.status_code,
                )
            if status is FetchStatus.NOT_FOUND:
                return FetchOutcome.not_found(response.status_code)
            return FetchOutcome.server_error(
                response.status_code,
                error=f"robots.txt returned {response.status_code} for {robots_url}",
            )
        except requests.RequestException as exc:
            return FetchOutcome.network_error(f"error reading {robots_url}: {exc}")
        finally:
            response.close()
