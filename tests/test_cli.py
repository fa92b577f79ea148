"""Tests for the command-line interface."""
import json

import pytest
from typer.testing import CliRunner

from rehabchat.cli import app as cli_app
from rehabchat.relay import EvaluationRelay

runner = CliRunner()


@pytest.fixture
def fake_relay(monkeypatch, factory_cls, instruction):
    """Replace the Gemini-backed relay with a scripted one."""
    factory = factory_cls()
    monkeypatch.setattr(
        cli_app, "get_relay", lambda: EvaluationRelay(factory, instruction=instruction)
    )
    return factory


def _stored(store_path):
    return json.loads(store_path.read_text(encoding="utf-8"))


class TestKeyCommands:
    """Tests for API key management."""

    def test_set_show_clear(self, cli_env):
        result = runner.invoke(cli_app.app, ["key", "set", "AIzaSecretKey1234"])
        assert result.exit_code == 0
        assert _stored(cli_env)["gemini-api-key"] == "AIzaSecretKey1234"

        result = runner.invoke(cli_app.app, ["key", "show"])
        assert "AIza" in result.output
        assert "SecretKey" not in result.output

        result = runner.invoke(cli_app.app, ["key", "clear"])
        assert result.exit_code == 0
        assert "gemini-api-key" not in _stored(cli_env)

    def test_show_without_key(self, cli_env):
        result = runner.invoke(cli_app.app, ["key", "show"])
        assert "No API key" in result.output


class TestEvaluate:
    """Tests for the evaluate command."""

    def test_requires_api_key(self, cli_env, fake_relay, sample_video):
        result = runner.invoke(cli_app.app, ["evaluate", str(sample_video.path), "--no-progress"])

        assert result.exit_code == 1
        assert fake_relay.providers == []

    def test_streams_and_records_exchange(self, cli_env, fake_relay, sample_video, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        result = runner.invoke(
            cli_app.app,
            ["evaluate", str(sample_video.path), "--prompt", "How engaged?", "--no-progress"],
        )

        assert result.exit_code == 0, result.output
        assert "Hello, world" in result.output
        assert fake_relay.last.api_key == "env-key"
        history = json.loads(_stored(cli_env)["gemini-chat-history"])
        assert [(m["role"], m["content"]) for m in history] == [
            ("user", "How engaged?"),
            ("assistant", "Hello, world"),
        ]

    def test_progress_then_non_streaming(self, cli_env, fake_relay, sample_video, monkeypatch):
        monkeypatch.setattr(cli_app, "PROGRESS_INTERVAL", 0.001)
        runner.invoke(cli_app.app, ["key", "set", "stored-key"])

        result = runner.invoke(cli_app.app, ["evaluate", str(sample_video.path), "--no-stream"])

        assert result.exit_code == 0, result.output
        assert "Hello, world" in result.output
        assert fake_relay.last.api_key == "stored-key"
        assert fake_relay.last.calls[0][0] == "generate_content"

    def test_generation_failure_exits(self, cli_env, sample_video, monkeypatch, factory_cls, instruction):
        factory = factory_cls(error=RuntimeError("quota exceeded"))
        monkeypatch.setattr(
            cli_app, "get_relay", lambda: EvaluationRelay(factory, instruction=instruction)
        )
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        result = runner.invoke(cli_app.app, ["evaluate", str(sample_video.path), "--no-progress"])

        assert result.exit_code == 1
        assert "quota exceeded" in result.output
        assert not cli_env.exists()


class TestConversation:
    """Tests for ask, history and clear-history."""

    def test_ask_uses_stored_transcript(self, cli_env, fake_relay, sample_video, monkeypatch, instruction):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        runner.invoke(
            cli_app.app,
            ["evaluate", str(sample_video.path), "-p", "first", "--no-progress"],
        )

        result = runner.invoke(cli_app.app, ["ask", "what next?"])

        assert result.exit_code == 0, result.output
        provider = fake_relay.last
        assert [t.content for t in provider.history] == [instruction, "first", "Hello, world"]
        assert [t.role for t in provider.history] == ["model", "user", "model"]
        assert provider.calls == [("send_message_stream", "what next?")]
        history = json.loads(_stored(cli_env)["gemini-chat-history"])
        assert len(history) == 4

    def test_history_and_clear(self, cli_env, fake_relay, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        runner.invoke(cli_app.app, ["ask", "hello there", "--no-stream"])

        result = runner.invoke(cli_app.app, ["history"])
        assert result.exit_code == 0
        assert "hello there" in result.output

        result = runner.invoke(cli_app.app, ["clear-history"])
        assert result.exit_code == 0

        result = runner.invoke(cli_app.app, ["history"])
        assert "No chat history" in result.output
