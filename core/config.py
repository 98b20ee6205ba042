"""
Default compliance configuration for scraper-compliance.

These settings are the process-wide defaults for robots.txt handling and
output writing. Individual components accept constructor overrides (tests
use them heavily), but nothing mutates these class attributes at runtime.

Design: Everything defaults to "safe + slow" mode. When a policy cannot be
confirmed, the crawler is denied, never granted.
"""

from typing import Set


class ComplianceConfig:
    """
    Compliance settings shared by fetcher, engine and writers.
    """

    # ========================================================================
    # Robots.txt Retrieval
    # ========================================================================

    # User-Agent (must be descriptive)
    USER_AGENT: str = "scraper-compliance/0.1 (+https://example.com/bot)"
    """User-Agent header sent with robots.txt requests."""

    # Agent token whose group is honored when parsing robots.txt
    ROBOTS_AGENT_TOKEN: str = "*"
    """Only the wildcard group is evaluated."""

    # Timeout for a single robots.txt request
    ROBOTS_TIMEOUT_SECONDS: float = 10.0
    """Maximum time to wait for robots.txt (seconds). Expiry = network error."""

    # Robots.txt body cap (memory safety)
    MAX_ROBOTS_BYTES: int = 500_000
    """Streaming reads stop after this many bytes; the rest is never downloaded."""

    # Protocol whitelist: only http(s) URLs can be checked
    ALLOWED_PROTOCOLS: Set[str] = {"http", "https"}
    """Only HTTP(S) allowed."""

    # ========================================================================
    # Politeness Defaults
    # ========================================================================

    # Crawl delay when robots.txt is silent or unavailable
    DEFAULT_CRAWL_DELAY_MS: int = 1000
    """Delay between requests to the same host (milliseconds)."""

    # ========================================================================
    # Output Writers
    # ========================================================================

    # Rotate output files once they grow past this size
    MAX_OUTPUT_FILE_BYTES: int = 10 * 1024 * 1024
    """Size threshold for CSV/JSONL rotation (10 MiB)."""

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration at startup.

        Raises:
            AssertionError: If any constraint is violated.
        """
        assert (
            cls.ROBOTS_TIMEOUT_SECONDS > 0
        ), "ROBOTS_TIMEOUT_SECONDS must be > 0"

        assert (
            cls.DEFAULT_CRAWL_DELAY_MS >= 0
        ), "DEFAULT_CRAWL_DELAY_MS must be ≥0"

        assert (
            cls.MAX_ROBOTS_BYTES > 0
        ), "MAX_ROBOTS_BYTES must be > 0"

        assert (
            cls.ROBOTS_AGENT_TOKEN == "*"
        ), "ROBOTS_AGENT_TOKEN must be the wildcard agent"

        assert (
            cls.ALLOWED_PROTOCOLS <= {"http", "https"}
        ), "ALLOWED_PROTOCOLS may only contain http/https"

        assert (
            cls.MAX_OUTPUT_FILE_BYTES > 0
        ), "MAX_OUTPUT_FILE_BYTES must be > 0"


# Validate at module import time
ComplianceConfig.validate()
