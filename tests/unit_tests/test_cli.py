from unittest.mock import patch

from click.testing import CliRunner

from submissions_api.cli import cli


def test_show_config(monkeypatch):
    monkeypatch.setenv("S3_BUCKET_NAME", "cli-bucket")
    runner = CliRunner()

    result = runner.invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert "Deployment Mode: local-dev" in result.output
    assert "S3 Bucket: cli-bucket" in result.output
    assert "Listen Address: 0.0.0.0:3000" in result.output


def test_serve_runs_app_factory_under_uvicorn():
    runner = CliRunner()

    with patch("uvicorn.run") as run:
        result = runner.invoke(cli, ["serve", "--port", "8081"])

    assert result.exit_code == 0
    run.assert_called_once()
    args, kwargs = run.call_args
    assert args == ("submissions_api.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["port"] == 8081
    assert kwargs["host"] == "0.0.0.0"
