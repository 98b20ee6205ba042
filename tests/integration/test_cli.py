"""End-to-end tests for the scraper-compliance CLI with stubbed HTTP."""

from __future__ import annotations

import pytest

from scraper_compliance.cli import main as cli_main

from conftest import DummyResponse, DummySession, parse_json_lines, robots_response


@pytest.fixture
def stub_session(monkeypatch):
    """Route the CLI's requests.Session to a stub."""

    def _install(responses: list[object]) -> DummySession:
        session = DummySession(responses)
        monkeypatch.setattr("fetcher.robots.requests.Session", lambda: session)
        return session

    return _install


@pytest.mark.integration
def test_cli_check_reports_decisions(stub_session, capsys):
    """check emits one robots_decision per URL and a completion summary."""
    session = stub_session([robots_response("User-agent: *\nDisallow: /private\nCrawl-delay: 4")])

    exit_code = cli_main(
        [
            "check",
            "https://example.com/private/a",
            "https://example.com/public",
            "--run-id",
            "run-cli-1",
        ]
    )
    lines = parse_json_lines(capsys.readouterr().out)
    decisions = [line for line in lines if line["event_type"] == "robots_decision"]
    summary = [line for line in lines if line["event_type"] == "cli_check_completed"][0]

    assert exit_code == 0
    assert len(session.calls) == 1
    assert [d["allowed"] for d in decisions] == [False, True]
    assert all(d["crawl_delay_ms"] == 4000 for d in decisions)
    assert decisions[0]["matched_rule"] == "/private"
    assert decisions[1]["cache_hit"] is True
    assert all(line["run_id"] == "run-cli-1" for line in lines)
    assert summary["checked"] == 2
    assert summary["disallowed"] == 1
    assert summary["hosts_cached"] == 1


@pytest.mark.integration
def test_cli_fail_on_disallow_sets_exit_code(stub_session, capsys):
    """--fail-on-disallow turns a denied URL into exit status 2."""
    stub_session([DummyResponse(503)])

    exit_code = cli_main(["check", "https://example.com/", "--fail-on-disallow"])
    lines = parse_json_lines(capsys.readouterr().out)

    assert exit_code == 2
    fetched = [line for line in lines if line["event_type"] == "robots_fetched"][0]
    assert fetched["source"] == "blocked"


@pytest.mark.integration
def test_cli_invalid_timeout_reports_error(stub_session, capsys):
    """Configuration errors surface as a cli_error event and exit status 1."""
    stub_session([])

    exit_code = cli_main(["check", "https://example.com/", "--timeout", "0"])
    lines = parse_json_lines(capsys.readouterr().out)

    assert exit_code == 1
    assert lines[-1]["event_type"] == "cli_error"
    assert lines[-1]["error_type"] == "ValueError"
    assert lines[-1]["level"] == "error"


def test_cli_without_command_prints_help(capsys):
    """No subcommand prints usage and exits cleanly."""
    exit_code = cli_main([])

    assert exit_code == 0
    assert "scraper-compliance" in capsys.readouterr().out


def test_cli_version(capsys):
    """--version reports the package version."""
    with pytest.raises(SystemExit) as excinfo:
        cli_main(["--version"])

    assert excinfo.value.code == 0
    assert "scraper-compliance 0.1.0" in capsys.readouterr().out
