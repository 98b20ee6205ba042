"""Core module for scraper-compliance."""

from core.models import (
    FetchStatus,
    PolicySource,
    RobotsPolicy,
    ScrapedData,
)
from core.config import ComplianceConfig
from core.structured_logging import emit_json_event

__all__ = [
    "FetchStatus",
    "PolicySource",
    "RobotsPolicy",
    "ScrapedData",
    "ComplianceConfig",
    "emit_json_event",
]
