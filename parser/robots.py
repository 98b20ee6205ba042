"""Permissive robots.txt parser producing immutable RobotsPolicy objects."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from core.config import ComplianceConfig
from core.models import RobotsPolicy


_BOM = "\ufeff"


@dataclass(slots=True)
class _AgentGroup:
    """One user-agent group: its agent tokens plus the rule lines under it."""

    agents: list[str] = field(default_factory=list)
    allow: list[str] = field(default_factory=list)
    disallow: list[str] = field(default_factory=list)
    crawl_delay_ms: int | None = None
    has_rules: bool = False


def _strip_line(raw: str) -> str:
    """Drop comments and surrounding whitespace."""
    return raw.split("#", 1)[0].strip()


def _split_directive(line: str) -> tuple[str, str] | None:
    """Split `field: value`, returning None for lines that are not directives."""
    name, sep, value = line.partition(":")
    if not sep:
        return None
    name = name.strip().lower()
    if not name:
        return None
    return name, value.strip()


def parse_crawl_delay(value: str) -> int | None:
    """Convert a Crawl-delay value in seconds to milliseconds, or None if unusable."""
    try:
        seconds = float(value)
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return int(round(seconds * 1000))


def _iter_groups(body: str) -> list[_AgentGroup]:
    """Group directive lines by the user-agent lines preceding them."""
    groups: list[_AgentGroup] = []
    current: _AgentGroup | None = None

    for raw in body.lstrip(_BOM).splitlines():
        line = _strip_line(raw)
        if not line:
            continue
        directive = _split_directive(line)
        if directive is None:
            continue
        name, value = directive

        if name == "user-agent":
            # Consecutive user-agent lines share the group that follows them.
            if current is None or current.has_rules:
                current = _AgentGroup()
                groups.append(current)
            current.agents.append(value.lower())
            continue

        if current is None:
            continue

        if name == "allow":
            current.has_rules = True
            if value:
                current.allow.append(value)
        elif name == "disallow":
            current.has_rules = True
            if value:
                current.disallow.append(value)
        elif name == "crawl-delay":
            current.has_rules = True
            if current.crawl_delay_ms is None:
                current.crawl_delay_ms = parse_crawl_delay(value)

    return groups


def parse_robots_txt(
    body: str,
    agent_token: str = ComplianceConfig.ROBOTS_AGENT_TOKEN,
    default_delay_ms: int = ComplianceConfig.DEFAULT_CRAWL_DELAY_MS,
) -> RobotsPolicy:
    """
    Parse robots.txt text into a policy for the wildcard agent.

    Unparsable lines are skipped. Every group naming `agent_token` is merged
    in file order; other agent groups are ignored. The first usable
    Crawl-delay wins, and its absence leaves `default_delay_ms`.
    """
    allow: list[str] = []
    disallow: list[str] = []
    delay_ms: int | None = None

    for group in _iter_groups(body):
        if agent_token not in group.agents:
            continue
        allow.extend(group.allow)
        disallow.extend(group.disallow)
        if delay_ms is None:
            delay_ms = group.crawl_delay_ms

    return RobotsPolicy(
        allow_rules=tuple(allow),
        disallow_rules=tuple(disallow),
        crawl_delay_ms=default_delay_ms if delay_ms is None else delay_ms,
    )
