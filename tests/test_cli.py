"""Tests for masthead.cli: argument parsing, route listing, server startup."""

import json
from pathlib import Path
from typing import Any

import pytest

from masthead.cli import main

ENV_VARS = (
    "MASTHEAD_HOST",
    "MASTHEAD_PORT",
    "MASTHEAD_DEBUG",
    "MASTHEAD_DATA_FILE",
    "MASTHEAD_LOG_LEVEL",
    "POSTS_TABLE",
    "QUIZZES_TABLE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_run_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "--help"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "masthead" in capsys.readouterr().out

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["deploy"])
        assert exc_info.value.code == 2


class TestRoutesCommand:
    def test_lists_site_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes"])
        out = capsys.readouterr().out

        assert "METHOD" in out
        assert "/sitemap.xml" in out
        assert "/robots.txt" in out
        assert "/{path:path}" in out
        assert "front_page" in out
        assert "endpoint" in out
        assert "dispatch" in out

    def test_invalid_port_exits_one(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("MASTHEAD_PORT", "abc")
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 1
        assert "MASTHEAD_PORT" in capsys.readouterr().err


class TestRunCommand:
    def test_starts_dev_server(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        calls: list[dict[str, Any]] = []

        def fake_run_dev_server(app: Any, host: str, port: int, *, reload: bool = False) -> None:
            calls.append({"app": app, "host": host, "port": port, "reload": reload})

        monkeypatch.setattr("masthead.server.dev.run_dev_server", fake_run_dev_server)
        data = tmp_path / "site.json"
        data.write_text(json.dumps({"posts": [{"postId": "p1"}]}))

        main(["run", "--port", "9001", "--data", str(data)])

        assert len(calls) == 1
        assert calls[0]["port"] == 9001
        assert calls[0]["host"] == "127.0.0.1"
        assert calls[0]["reload"] is False

    def test_bad_data_file_exits_one(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "--data", str(tmp_path / "absent.json")])
        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().err
