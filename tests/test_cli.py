"""Tests for the command-line interface"""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from melody_fetcher.cli import app as app_module
from melody_fetcher.cli.formatters import format_error_with_suggestions
from melody_fetcher.core.fetcher import MediaFetcher
from melody_fetcher.exceptions import ConfigurationError, MalformedOutputError
from melody_fetcher.resolver.process import CommandResult
from melody_fetcher.utils.formatting import format_duration

from .conftest import FakeDownloader, FakeResolver

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "CONFIG_FILE", tmp_path / "config.ini")
    resolver = FakeResolver()

    def from_config(config, config_provider):
        return MediaFetcher(
            tmp_path / "scratch", resolver, FakeDownloader(), config_provider
        )

    monkeypatch.setattr(MediaFetcher, "from_config", staticmethod(from_config))
    return resolver


def test_search_prints_results(cli_env):
    cli_env.search_result = CommandResult(0, '[{"Name":"Hello","Source":"qq"}]')
    result = runner.invoke(app_module.app, ["search", "hello"])
    assert result.exit_code == 0
    assert "Hello" in result.output


def test_search_requires_a_query(cli_env):
    result = runner.invoke(app_module.app, ["search"])
    assert result.exit_code == 1
    assert cli_env.calls == []


def test_meta_failure_exits_non_zero(cli_env):
    cli_env.metadata_result = CommandResult(1, "panic")
    result = runner.invoke(app_module.app, ["meta", "https://music.example.com/1"])
    assert result.exit_code == 1


def test_fetch_writes_named_file(cli_env, tmp_path):
    result = runner.invoke(
        app_module.app, ["fetch", "https://music.example.com/1", "--name", "a"]
    )
    assert result.exit_code == 0
    assert len(list((tmp_path / "scratch").glob("*/a.mp3"))) == 1


def test_init_then_show_config(cli_env, tmp_path):
    result = runner.invoke(app_module.app, ["init", "--sources", "qq,kugou"])
    assert result.exit_code == 0
    assert (tmp_path / "config.ini").is_file()

    result = runner.invoke(app_module.app, ["show-config"])
    assert result.exit_code == 0
    assert "qq, kugou" in result.output


def test_meta_prints_loosely_typed_fields(cli_env):
    cli_env.metadata_result = CommandResult(
        0, '{"title":"Hello","duration":"3:45","resource_type":7,"audios":"n/a"}'
    )
    result = runner.invoke(app_module.app, ["meta", "https://music.example.com/1"])
    assert result.exit_code == 0
    assert "Hello" in result.output
    assert "3:45" in result.output


def test_search_with_unreadable_config_exits_non_zero(cli_env, tmp_path):
    (tmp_path / "config.ini").write_text(
        "[DEFAULT]\nmax_connections = lots\n", encoding="utf-8"
    )
    result = runner.invoke(app_module.app, ["search", "hello"])
    assert result.exit_code == 1
    assert cli_env.calls == []


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (None, "-"),
        (65, "1:05"),
        (215.4, "3:35"),
        ("215", "3:35"),
        (3727, "1:02:07"),
        ("3:45", "3:45"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def _panel_text(panel) -> str:
    console = Console(width=120, record=True)
    console.print(panel)
    return console.export_text()


def test_error_panel_suggestions():
    text = _panel_text(format_error_with_suggestions(ConfigurationError("bad")))
    assert "ConfigurationError: bad" in text
    assert "melody-fetcher init --force" in text

    text = _panel_text(format_error_with_suggestions(MalformedOutputError("oops")))
    assert "Run the command with -v for detailed logs." in text
