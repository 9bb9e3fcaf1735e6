"""
Tests for client configuration and the command line client.
"""

import time
from unittest.mock import AsyncMock, patch

import pytest

from orchestrator.client.cli import build_parser, main, run_command
from orchestrator.client.config import AUDIENCE_OPTIONS, LANGUAGE_OPTIONS, ClientSettings
from orchestrator.client.storage import FileSessionStorage


class TestClientSettings:
    def test_defaults(self, monkeypatch):
        for name in ("WEBHOOK_URL", "API_BASE_URL", "API_KEY", "N8N_SECRET"):
            monkeypatch.delenv(f"ORCHESTRATOR_CLIENT_{name}", raising=False)

        settings = ClientSettings()

        assert settings.webhook_url == "http://localhost:5678/webhook/REPLACE_ME"
        assert settings.api_base_url == "http://localhost:4000"
        assert settings.webhook_timeout == 30
        assert settings.api_timeout == 10
        assert settings.is_webhook_url_unconfigured() is True
        assert settings.is_security_configured() is False

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("ORCHESTRATOR_CLIENT_WEBHOOK_URL", "https://n8n.example/webhook/abc")
        monkeypatch.setenv("ORCHESTRATOR_CLIENT_API_KEY", "key")
        monkeypatch.setenv("ORCHESTRATOR_CLIENT_N8N_SECRET", "secret")

        settings = ClientSettings()

        assert settings.is_webhook_url_unconfigured() is False
        assert settings.is_security_configured() is True

    def test_security_needs_both_secrets(self):
        assert ClientSettings(api_key="key", n8n_secret="").is_security_configured() is False

    @pytest.mark.parametrize(
        ("url", "backend_type", "label"),
        [
            ("http://localhost:5678/webhook/x", "local", "Local"),
            ("http://127.0.0.1:5678/webhook/x", "local", "Local"),
            ("https://holiday.onrender.com/webhook/x", "render", "Render"),
            ("https://holiday.vercel.app/webhook/x", "vercel", "Vercel"),
            ("https://abc.ngrok-free.app/webhook/x", "ngrok", "ngrok"),
            ("https://n8n.example.com/webhook/x", "other", "Remote"),
        ],
    )
    def test_backend_type(self, url, backend_type, label):
        settings = ClientSettings(webhook_url=url)

        assert settings.get_backend_type() == backend_type
        assert settings.get_backend_label() == label

    def test_options(self):
        assert [value for value, _ in LANGUAGE_OPTIONS] == ["en", "hi"]
        assert [value for value, _ in AUDIENCE_OPTIONS] == ["business", "personal"]


class TestCli:
    def test_send_arguments(self):
        args = build_parser().parse_args(
            ["send", "--holiday", "Holi", "--sender", "Asha", "--recipients", "a@x.com"]
        )

        assert args.command == "send"
        assert args.audience == "business"
        assert args.language == "en"
        assert args.tone == ""

    def test_rejects_unknown_language(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["send", "--holiday", "H", "--sender", "S", "--recipients", "a@x.com", "--language", "fr"]
            )

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_main_runs_command(self):
        with (
            patch("orchestrator.client.cli.run_command", new=AsyncMock(return_value=0)) as mock_run,
            patch("orchestrator.client.cli.configure_logging"),
        ):
            assert main(["status"]) == 0

        assert mock_run.await_args[0][0].command == "status"


class TestRunCommand:
    """Commands that need no server."""

    @pytest.fixture
    def cli_settings(self, tmp_path) -> ClientSettings:
        return ClientSettings(
            webhook_url="http://localhost:5678/webhook/abc",
            api_key="key",
            n8n_secret="secret",
            session_file=tmp_path / "session.json",
        )

    @pytest.mark.asyncio
    async def test_status_with_stored_session(self, cli_settings, capsys):
        FileSessionStorage(cli_settings.session_file).save("tok", int(time.time() * 1000) + 60_000)

        assert await run_command(build_parser().parse_args(["status"]), cli_settings) == 0

        out = capsys.readouterr().out
        assert "Session: active" in out
        assert "(Local)" in out
        assert "Warning" not in out

    @pytest.mark.asyncio
    async def test_logout_removes_session_file(self, cli_settings):
        FileSessionStorage(cli_settings.session_file).save("tok", int(time.time() * 1000) + 60_000)

        assert await run_command(build_parser().parse_args(["logout"]), cli_settings) == 0

        assert not cli_settings.session_file.exists()

    @pytest.mark.asyncio
    async def test_logs_requires_login(self, cli_settings, capsys):
        assert await run_command(build_parser().parse_args(["logs"]), cli_settings) == 1

        assert "Not logged in" in capsys.readouterr().err
