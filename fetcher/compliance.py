"""Robots.txt compliance engine: cache-or-fetch policy resolution and URL decisions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable
from urllib.parse import urlparse

import requests

from core.config import ComplianceConfig
from core.models import FetchStatus, PolicySource, RobotsPolicy
from core.structured_logging import EventHook, default_event_hook
from fetcher.cache import ComplianceCache
from fetcher.robots import FetchOutcome, PolicyFetcher, robots_url_for
from parser.robots import parse_robots_txt


_DEFAULT_PORTS = {"http": 80, "https": 443}


class InvalidUrlError(ValueError):
    """Raised when a URL has no usable scheme/host for a robots check."""


@dataclass(slots=True)
class ComplianceDecision:
    """Decision payload for one URL robots check."""

    allowed: bool
    crawl_delay_ms: int
    host: str
    robots_url: str
    source: PolicySource | None
    matched_rule: str | None
    cache_hit: bool


def split_url(url: str) -> tuple[str, str]:
    """
    Return `(host_key, path)` for a URL.

    The host key is the lower-cased `scheme://host[:port]` with default ports
    dropped, so every URL on one site shares a cache entry. The path keeps
    the query string because robots rules match against it.
    """
    try:
        parsed = urlparse(url.strip())
        port = parsed.port
    except (AttributeError, ValueError) as exc:
        raise InvalidUrlError(f"Invalid URL for robots check: {url!r}") from exc

    scheme = parsed.scheme.lower()
    if scheme not in ComplianceConfig.ALLOWED_PROTOCOLS:
        raise InvalidUrlError(f"Unsupported scheme for robots check: {url!r}")

    hostname = parsed.hostname
    if not hostname:
        raise InvalidUrlError(f"Invalid URL for robots check: missing host in {url!r}")
    if ":" in hostname:
        hostname = f"[{hostname}]"

    host_key = f"{scheme}://{hostname}"
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        host_key = f"{host_key}:{port}"

    path = parsed.path or "/"
    if parsed.query:
        path = f"{path}?{parsed.query}"
    return host_key, path


def longest_match(rules: Iterable[str], path: str) -> str | None:
    """Return the longest rule that is a literal prefix of `path`."""
    best: str | None = None
    for rule in rules:
        if path.startswith(rule) and (best is None or len(rule) > len(best)):
            best = rule
    return best


def check_path(policy: RobotsPolicy, path: str) -> tuple[bool, str | None]:
    """
    Evaluate a path against a policy, returning `(allowed, matched_rule)`.

    Longest matching prefix wins. On a tie between Allow and Disallow the
    Allow rule wins; with no matching rule the path is allowed.
    """
    if policy.blocked:
        return False, None
    if policy.unrestricted:
        return True, None

    allow = longest_match(policy.allow_rules, path)
    disallow = longest_match(policy.disallow_rules, path)
    if disallow is not None and (allow is None or len(disallow) > len(allow)):
        return False, disallow
    return True, allow


def build_policy(
    outcome: FetchOutcome,
    default_delay_ms: int = ComplianceConfig.DEFAULT_CRAWL_DELAY_MS,
) -> RobotsPolicy:
    """Turn a fetch outcome into the policy cached for that host."""
    if outcome.status is FetchStatus.OK:
        return parse_robots_txt(outcome.body, default_delay_ms=default_delay_ms)
    if outcome.status is FetchStatus.NOT_FOUND:
        return RobotsPolicy(unrestricted=True, crawl_delay_ms=default_delay_ms)
    if outcome.status in (FetchStatus.SERVER_ERROR, FetchStatus.NETWORK_ERROR):
        return RobotsPolicy(blocked=True, crawl_delay_ms=default_delay_ms)
    raise ValueError(f"Unhandled fetch status: {outcome.status!r}")


class RobotsTxtCompliance:
    """Decide whether URLs may be crawled and how long to wait between requests."""

    def __init__(
        self,
        session: requests.Session | None = None,
        fetcher: PolicyFetcher | None = None,
        cache: ComplianceCache | None = None,
        user_agent: str = ComplianceConfig.USER_AGENT,
        timeout_seconds: float = ComplianceConfig.ROBOTS_TIMEOUT_SECONDS,
        default_delay_ms: int = ComplianceConfig.DEFAULT_CRAWL_DELAY_MS,
        event_hook: EventHook | None = None,
    ) -> None:
        """Initialize fetcher, shared cache and event sink."""
        if default_delay_ms < 0:
            raise ValueError("default_delay_ms must be >= 0")
        self._fetcher = fetcher or PolicyFetcher(
            user_agent=user_agent,
            timeout_seconds=timeout_seconds,
            session=session,
        )
        self._cache = cache if cache is not None else ComplianceCache()
        self.default_delay_ms = default_delay_ms
        self._emit = event_hook or default_event_hook

    def is_url_allowed(self, url: str) -> bool:
        """Return True when robots.txt permits fetching `url`."""
        return self.evaluate(url).allowed

    def get_crawl_delay(self, url: str) -> int:
        """Return the delay in milliseconds to keep between requests to the URL's host."""
        return self.evaluate(url).crawl_delay_ms

    def clear_cache(self) -> None:
        """Forget all cached policies; the next lookup per host fetches again."""
        self._cache.clear()

    def get_cache_size(self) -> int:
        """Return the number of hosts with a cached policy."""
        return len(self._cache)

    def evaluate(self, url: str) -> ComplianceDecision:
        """Return a full robots decision for observability and rate control."""
        try:
            host_key, path = split_url(url)
        except InvalidUrlError as exc:
            self._notify("robots_invalid_url", {"url": url, "message": str(exc)})
            return ComplianceDecision(
                allowed=False,
                crawl_delay_ms=self.default_delay_ms,
                host="",
                robots_url="",
                source=None,
                matched_rule=None,
                cache_hit=False,
            )

        policy, cache_hit = self._get_or_fetch(host_key)
        allowed, matched_rule = check_path(policy, path)
        return ComplianceDecision(
            allowed=allowed,
            crawl_delay_ms=policy.crawl_delay_ms,
            host=host_key,
            robots_url=robots_url_for(host_key),
            source=policy.source,
            matched_rule=matched_rule,
            cache_hit=cache_hit,
        )

    def _get_or_fetch(self, host_key: str) -> tuple[RobotsPolicy, bool]:
        cached = self._cache.get(host_key)
        if cached is not None:
            return cached, True

        policy, event_type, payload = self._resolve(host_key)
        stored = self._cache.put_if_absent(host_key, policy)
        self._notify(event_type, payload)
        return stored, False

    def _resolve(self, host_key: str) -> tuple[RobotsPolicy, str, dict[str, Any]]:
        """Fetch and build a policy; any failure yields the blocked policy."""
        robots_url = robots_url_for(host_key)
        try:
            outcome = self._fetcher.fetch(host_key)
            policy = build_policy(outcome, default_delay_ms=self.default_delay_ms)
        except Exception as exc:
            return (
                RobotsPolicy(blocked=True, crawl_delay_ms=self.default_delay_ms),
                "robots_fetch_failed",
                {
                    "host": host_key,
                    "robots_url": robots_url,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

        return (
            policy,
            "robots_fetched",
            {
                "host": host_key,
                "robots_url": robots_url,
                "fetch_status": outcome.status.value,
                "status_code": outcome.status_code,
                "source": policy.source.value,
                "crawl_delay_ms": policy.crawl_delay_ms,
                "message": outcome.error,
            },
        )

    def _notify(self, event_type: str, payload: dict[str, Any]) -> None:
        """Send one event to the sink; a failing sink never breaks a decision."""
        try:
            self._emit(event_type, payload)
        except Exception:
            pass
