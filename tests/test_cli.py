"""Tests for the command-line interface."""

import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from interview_copilot.cli import app
from tests.mocks.mock_provider import ScriptedAdapter, interview_reply

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """The CLI reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def scripted_pipeline(make_pipeline):
    adapter = ScriptedAdapter(name="groq", script=[interview_reply("I mentor junior engineers weekly.")])
    pipeline = make_pipeline(adapter)
    with patch("interview_copilot.cli.ResponsePipeline.create", return_value=pipeline):
        yield pipeline, adapter


class TestAskCommand:
    def test_prints_answer(self, scripted_pipeline):
        result = runner.invoke(app, ["ask", "How do you grow your team?", "--provider", "groq"])

        assert result.exit_code == 0
        assert "I mentor junior engineers weekly." in result.stdout
        assert "React" in result.stdout

    def test_passes_options_through(self, scripted_pipeline, tmp_path):
        _, adapter = scripted_pipeline
        resume = tmp_path / "resume.txt"
        resume.write_text("Engineering manager at Hooli", encoding="utf-8")

        result = runner.invoke(
            app,
            [
                "ask",
                "How do you grow your team?",
                "--provider",
                "GROQ",
                "--model",
                "llama-3.1-8b-instant",
                "--role-type",
                "engineering manager",
                "--resume",
                str(resume),
            ],
        )

        assert result.exit_code == 0
        call = adapter.calls[0]
        assert call["model"] == "llama-3.1-8b-instant"
        assert "engineering manager" in call["system"]
        assert "Engineering manager at Hooli" in call["user"]

    def test_error_response_exits_nonzero(self, scripted_pipeline):
        _, adapter = scripted_pipeline
        result = runner.invoke(app, ["ask", "How do you grow your team?", "--provider", "acme"])

        assert result.exit_code == 1
        assert adapter.call_count == 0


class TestModelsCommand:
    def test_lists_all_providers(self):
        result = runner.invoke(app, ["models"])

        assert result.exit_code == 0
        assert "llama-3.3-70b-versatile" in result.stdout
        assert "gemini-2.0-flash-exp" in result.stdout

    def test_single_provider(self):
        result = runner.invoke(app, ["models", "--provider", "gemini"])

        assert result.exit_code == 0
        assert "gemini-2.0-flash-exp" in result.stdout
        assert "llama-3.3-70b-versatile" not in result.stdout

    def test_unknown_provider(self):
        result = runner.invoke(app, ["models", "--provider", "acme"])

        assert result.exit_code == 1

    def test_initializes_logging(self):
        with patch("interview_copilot.cli._init_logging_from_cli") as init:
            result = runner.invoke(app, ["models", "--log-level", "DEBUG", "--log-format", "json"])

        assert result.exit_code == 0
        init.assert_called_once_with("DEBUG", None, "json", False)


class TestValidateCommand:
    def test_valid_key(self, scripted_pipeline):
        result = runner.invoke(app, ["validate", "groq", "--api-key", "valid-key"])

        assert result.exit_code == 0
        assert "key is valid" in result.stdout

    def test_invalid_key(self, scripted_pipeline):
        result = runner.invoke(app, ["validate", "groq", "--api-key", "wrong"])

        assert result.exit_code == 1

    def test_key_from_environment(self, scripted_pipeline, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "valid-key")

        result = runner.invoke(app, ["validate", "groq"])

        assert result.exit_code == 0

    def test_missing_key(self, scripted_pipeline, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)

        result = runner.invoke(app, ["validate", "groq"])

        assert result.exit_code == 1

    def test_initializes_logging(self, scripted_pipeline):
        with patch("interview_copilot.cli._init_logging_from_cli") as init:
            result = runner.invoke(app, ["validate", "groq", "--api-key", "valid-key", "--log-level", "WARNING"])

        assert result.exit_code == 0
        init.assert_called_once_with("WARNING", None, "text", False)
