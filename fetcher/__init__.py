"""Fetcher subsystem: robots.txt retrieval, policy cache, and compliance decisions."""

from fetcher.cache import ComplianceCache
from fetcher.compliance import ComplianceDecision, InvalidUrlError, RobotsTxtCompliance
from fetcher.robots import FetchOutcome, PolicyFetcher

__all__ = [
    "ComplianceCache",
    "ComplianceDecision",
    "InvalidUrlError",
    "RobotsTxtCompliance",
    "FetchOutcome",
    "PolicyFetcher",
]
