"""命令行测试"""

from click.testing import CliRunner

from contributor_analytics import cli
from contributor_analytics.cli import main


def test_cli_help():
    result = CliRunner().invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "generate" in result.output
    assert "init-db" in result.output
    assert "serve" in result.output


def test_generate_help_lists_options():
    result = CliRunner().invoke(main, ["generate", "--help"])

    assert result.exit_code == 0
    assert "--overwrite" in result.output
    assert "--repo" in result.output


def test_generate_requires_both_dates():
    result = CliRunner().invoke(main, ["generate", "--start-date", "2024-01-01"])

    assert result.exit_code != 0
    assert "--end-date" in result.output


def test_generate_rejects_reversed_dates():
    result = CliRunner().invoke(main, ["generate", "--start-date", "2024-02-01", "--end-date", "2024-01-01"])

    assert result.exit_code != 0
    assert "开始日期必须早于结束日期" in result.output


def test_generate_rejects_malformed_date():
    result = CliRunner().invoke(main, ["generate", "--start-date", "2024-01-01", "--end-date", "2024-13-01"])

    assert result.exit_code != 0
    assert "无效日期" in result.output


def test_serve_runs_uvicorn_with_app(monkeypatch):
    import uvicorn

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    result = CliRunner().invoke(cli.main, ["serve", "--port", "9001"])

    assert result.exit_code == 0
    assert calls[0][0] == "contributor_analytics.main:app"
    assert calls[0][1]["port"] == 9001
    assert calls[0][1]["host"] == "127.0.0.1"
