from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from inactive_contributors import cli
from inactive_contributors.config import get_settings
from inactive_contributors.github import DEFAULT_API_URL, RestGitHub
from inactive_contributors.models import ChangeRecord


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_ORG",
        "GITHUB_API_URL",
        "ALUMNI_TEAM",
        "SOURCE_TEAM",
        "MAXIMUM_ABSENCE_BEFORE_RETIREMENT",
        "RETIREMENT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def install_github(monkeypatch: pytest.MonkeyPatch, github: RestGitHub) -> list[tuple]:
    connections: list[tuple] = []

    def fake_connect(token, org, **kwargs):
        connections.append((token, org, kwargs))
        return github

    monkeypatch.setattr(RestGitHub, "connect", fake_connect)
    return connections


def test_run_logs_configuration_and_retires(monkeypatch, caplog) -> None:
    github = RestGitHub.create_null(team_members=[["blaisep"]], has_committed=[False])
    connections = install_github(monkeypatch, github)
    logger = logging.getLogger("tests.cli")

    with caplog.at_level(logging.INFO, logger=logger.name):
        asyncio.run(
            cli.run(
                "90d",
                "test-inactive-contributor-action",
                "test-Alumni",
                "secret",
                logger=logger,
                clock=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        )

    assert connections == [("secret", "test-inactive-contributor-action", {"base_url": DEFAULT_API_URL})]
    messages = [record.getMessage() for record in caplog.records if record.name == logger.name]
    first = json.loads(messages[0])
    assert first == {
        "configuration": {
            "maximum_absence_before_retirement": "90d",
            "alumni_team": "test-Alumni",
            "source_team": "committers",
        }
    }
    assert github.track_changes().data == [
        ChangeRecord(action="add", user="blaisep", team="test-Alumni"),
        ChangeRecord(action="remove", user="blaisep", team="committers"),
    ]


def test_main_requires_token(monkeypatch, capsys) -> None:
    connections = install_github(monkeypatch, RestGitHub.create_null())

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--org", "some-org"])

    assert excinfo.value.code == 2
    assert "GITHUB_TOKEN" in capsys.readouterr().err
    assert connections == []


def test_main_requires_org(monkeypatch, capsys) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
    assert "--org" in capsys.readouterr().err


def test_main_requires_alumni_team(monkeypatch, capsys) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    connections = install_github(monkeypatch, RestGitHub.create_null(team_members=[["blaisep"]]))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--org", "some-org"])

    assert excinfo.value.code == 2
    assert "ALUMNI_TEAM" in capsys.readouterr().err
    assert connections == []


def test_main_rejects_malformed_duration(monkeypatch, capsys) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    connections = install_github(monkeypatch, RestGitHub.create_null())

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--org", "some-org", "--alumni-team", "alumni", "--maximum-absence", "ninety"])

    assert excinfo.value.code == 2
    assert "ninety" in capsys.readouterr().err
    assert connections == []


def test_main_rejects_out_of_range_duration(monkeypatch, capsys) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    connections = install_github(monkeypatch, RestGitHub.create_null())

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--org", "some-org", "--alumni-team", "alumni", "--maximum-absence", "1000000d"])

    assert excinfo.value.code == 2
    assert "out of range" in capsys.readouterr().err
    assert connections == []


def test_main_uses_environment_and_overrides(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_ORG", "env-org")
    monkeypatch.setenv("ALUMNI_TEAM", "env-alumni")
    github = RestGitHub.create_null(team_members=[["funficient"]])
    connections = install_github(monkeypatch, github)

    cli.main(["--source-team", "fishcakes", "--maximum-absence", "30d"])

    assert connections[0][:2] == ("secret", "env-org")
    assert github.track_changes().data == [
        ChangeRecord(action="add", user="funficient", team="env-alumni"),
        ChangeRecord(action="remove", user="funficient", team="fishcakes"),
    ]


def test_main_exits_with_status_one_on_github_error(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "secret")

    def not_found(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    client = httpx.AsyncClient(base_url=DEFAULT_API_URL, transport=httpx.MockTransport(not_found))
    install_github(monkeypatch, RestGitHub(client, "non-existent-org"))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--org", "non-existent-org", "--alumni-team", "alumni"])

    assert excinfo.value.code == 1
