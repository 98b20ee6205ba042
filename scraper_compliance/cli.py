"""Minimal CLI entrypoint for scraper-compliance."""

from __future__ import annotations

import argparse
from typing import Any
from typing import Sequence
from uuid import uuid4

from core.config import ComplianceConfig
from core.structured_logging import emit_json_event
from fetcher import RobotsTxtCompliance
from scraper_compliance import __version__


def _resolve_command_run_id(args: argparse.Namespace) -> str:
    """Resolve run_id from CLI args or create one for command-level tracing."""
    explicit = getattr(args, "run_id", None)
    if explicit:
        return str(explicit)
    return str(uuid4())


def _emit_cli_event(
    event_type: str,
    *,
    run_id: str,
    command: str,
    **payload: Any,
) -> str:
    """Emit one structured CLI event line with standard fields."""
    return emit_json_event(
        event_type=event_type,
        run_id=run_id,
        command=command,
        **payload,
    )


def _cmd_check(args: argparse.Namespace) -> int:
    """Report robots decision and crawl delay for each URL."""
    run_id = _resolve_command_run_id(args)

    def engine_events(event_type: str, payload: dict[str, Any]) -> None:
        _emit_cli_event(event_type, run_id=run_id, command="check", **payload)

    engine = RobotsTxtCompliance(
        user_agent=args.user_agent,
        timeout_seconds=args.timeout,
        event_hook=engine_events,
    )

    disallowed = 0
    for url in args.urls:
        decision = engine.evaluate(url)
        if not decision.allowed:
            disallowed += 1
        _emit_cli_event(
            "robots_decision",
            run_id=run_id,
            command="check",
            url=url,
            allowed=decision.allowed,
            crawl_delay_ms=decision.crawl_delay_ms,
            host=decision.host,
            robots_url=decision.robots_url,
            source=decision.source.value if decision.source else None,
            matched_rule=decision.matched_rule,
            cache_hit=decision.cache_hit,
        )

    _emit_cli_event(
        "cli_check_completed",
        run_id=run_id,
        command="check",
        checked=len(args.urls),
        disallowed=disallowed,
        hosts_cached=engine.get_cache_size(),
    )
    if args.fail_on_disallow and disallowed:
        return 2
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create argument parser for the scraper-compliance CLI."""
    parser = argparse.ArgumentParser(
        prog="scraper-compliance",
        description="Check URLs against their hosts' robots.txt policies",
    )
    parser.add_argument("--version", action="version", version=f"scraper-compliance {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser(
        "check",
        help="Decide whether URLs may be crawled and report crawl delays",
    )
    check_parser.add_argument("urls", nargs="+", help="Absolute http(s) URLs to check")
    check_parser.add_argument(
        "--user-agent",
        default=ComplianceConfig.USER_AGENT,
        help="User-Agent header for robots.txt requests",
    )
    check_parser.add_argument(
        "--timeout",
        type=float,
        default=ComplianceConfig.ROBOTS_TIMEOUT_SECONDS,
        help="robots.txt request timeout in seconds",
    )
    check_parser.add_argument("--run-id", help="Optional explicit run ID for logging")
    check_parser.add_argument(
        "--fail-on-disallow",
        action="store_true",
        help="Exit with status 2 when any URL is disallowed",
    )
    check_parser.set_defaults(func=_cmd_check)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Execute CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return int(args.func(args))
    except Exception as exc:
        run_id = _resolve_command_run_id(args)
        _emit_cli_event(
            "cli_error",
            run_id=run_id,
            command=str(getattr(args, "command", "unknown")),
            level="error",
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return 1


def cli() -> None:
    """Console-script entrypoint."""
    raise SystemExit(main())


if __name__ == "__main__":
    raise SystemExit(main())
