"""
Core Pydantic models for scraper-compliance.

Design principles:
- Robots policies are immutable once built (frozen models, tuple rule lists)
- Provenance is explicit: parsed, unrestricted (no robots.txt) or blocked
- Scraped records serialize deterministically for CSV/JSONL output
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.config import ComplianceConfig


# ============================================================================
# Enums
# ============================================================================

class FetchStatus(str, Enum):
    """How did the robots.txt request end?"""
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"  # No robots.txt: everything allowed
    SERVER_ERROR = "SERVER_ERROR"  # 5xx, 401/403/429: fail closed
    NETWORK_ERROR = "NETWORK_ERROR"  # Timeout, DNS, refused: fail closed


class PolicySource(str, Enum):
    """Where did a robots policy come from?"""
    PARSED = "parsed"
    UNRESTRICTED = "unrestricted"
    BLOCKED = "blocked"


# ============================================================================
# Robots Policy
# ============================================================================

class RobotsPolicy(BaseModel):
    """
    Robots policy for one host.

    Design:
    - allow_rules / disallow_rules: literal path prefixes in file order
    - crawl_delay_ms: always milliseconds (robots.txt states seconds)
    - unrestricted / blocked: mutually exclusive provenance flags; rule
      lists are empty when either is set

    Example:
      RobotsPolicy(allow_rules=("/public",), disallow_rules=("/",))
      RobotsPolicy(blocked=True)  # every path denied
    """
    model_config = ConfigDict(frozen=True)

    allow_rules: Tuple[str, ...] = ()
    disallow_rules: Tuple[str, ...] = ()
    crawl_delay_ms: int = Field(default=ComplianceConfig.DEFAULT_CRAWL_DELAY_MS, ge=0)
    unrestricted: bool = False
    blocked: bool = False

    @model_validator(mode="after")
    def validate_provenance(self) -> "RobotsPolicy":
        """A policy is parsed, unrestricted or blocked, never a mix."""
        if self.unrestricted and self.blocked:
            raise ValueError("policy cannot be both unrestricted and blocked")
        if (self.unrestricted or self.blocked) and (self.allow_rules or self.disallow_rules):
            raise ValueError("unrestricted/blocked policies cannot carry rules")
        return self

    @property
    def source(self) -> PolicySource:
        """Provenance tag for logs and decisions."""
        if self.blocked:
            return PolicySource.BLOCKED
        if self.unrestricted:
            return PolicySource.UNRESTRICTED
        return PolicySource.PARSED


# ============================================================================
# Scraped Data (Output Record)
# ============================================================================

class ScrapedData(BaseModel):
    """
    One record produced by the page extractor and written by the output writers.

    Field order is the CSV column order.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "title": "Blue Widget",
                    "description": "A very blue widget",
                    "url": "https://shop.example.com/widgets/blue",
                    "price": "19.99",
                    "image_url": "https://shop.example.com/img/blue.png",
                }
            ]
        }
    )


CSV_COLUMNS: Tuple[str, ...] = tuple(ScrapedData.model_fields)
