"""
Shared pytest fixtures and configuration for scraper-compliance tests.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Callable

import pytest

from core.models import ScrapedData
from fetcher.compliance import RobotsTxtCompliance


# ============================================================================
# HTTP Stubs
# ============================================================================

class DummyResponse:
    """Minimal streaming response object for exercising fetcher logic."""

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        chunk_size: int | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = body
        self.chunk_size = chunk_size
        self.stream_error = stream_error
        self.chunks_read = 0
        self.closed = False

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def iter_content(self, chunk_size: int = 8192):
        size = self.chunk_size or chunk_size
        for index in range(0, len(self.content), size):
            self.chunks_read += 1
            yield self.content[index : index + size]
        if self.stream_error is not None:
            raise self.stream_error

    def close(self) -> None:
        self.closed = True


class DummySession:
    """Sequence-driven session for deterministic HTTP behavior."""

    def __init__(self, responses: list[object] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[str] = []
        self.kwargs: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any):
        self.calls.append(url)
        self.kwargs.append(kwargs)
        if not self.responses:
            raise AssertionError("No more stubbed responses available")
        next_item = self.responses.pop(0)
        if isinstance(next_item, Exception):
            raise next_item
        return next_item


class StaticSession:
    """Thread-safe session that answers every request with the same response."""

    def __init__(self, response: DummyResponse) -> None:
        self.response = response
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def get(self, url: str, **_: Any):
        with self._lock:
            self.calls.append(url)
        return self.response


def robots_response(body: str, status_code: int = 200) -> DummyResponse:
    """Build a robots.txt response from text."""
    return DummyResponse(status_code, body=body.encode("utf-8"))


def parse_json_lines(captured: str) -> list[dict[str, Any]]:
    """Decode structured log lines emitted to stdout."""
    lines = [line for line in captured.splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


# ============================================================================
# Fixtures: Engine
# ============================================================================

@pytest.fixture
def captured_events() -> list[tuple[str, dict[str, Any]]]:
    """Collect (event_type, payload) pairs emitted by components."""
    return []


@pytest.fixture
def make_engine(
    captured_events: list[tuple[str, dict[str, Any]]],
) -> Callable[..., RobotsTxtCompliance]:
    """Factory for engines wired to a stub session and the event collector."""

    def _make(session: object, **kwargs: Any) -> RobotsTxtCompliance:
        kwargs.setdefault(
            "event_hook",
            lambda event_type, payload: captured_events.append((event_type, payload)),
        )
        return RobotsTxtCompliance(session=session, **kwargs)

    return _make


# ============================================================================
# Fixtures: ScrapedData
# ============================================================================

@pytest.fixture
def sample_record() -> ScrapedData:
    """Sample fully populated scraped record."""
    return ScrapedData(
        title="Blue Widget",
        description='A "very" blue widget, 2-pack',
        url="https://shop.example.com/widgets/blue",
        price="19.99",
        image_url="https://shop.example.com/img/blue.png",
    )


@pytest.fixture
def sparse_record() -> ScrapedData:
    """Scraped record with only title and URL."""
    return ScrapedData(title="Red Widget", url="https://shop.example.com/widgets/red")
