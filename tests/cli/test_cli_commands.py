"""
Tests for the voice-relay CLI

Subcommands are invoked through click's CliRunner; provider SDKs and the
dispatcher are mocked.
"""

import json
import os
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from cli import main
from relay.dispatcher import Dispatcher
from relay.errors import MissingCredentialError, ProviderError
from relay.models import TranscriptionResult
from relay.utils.logging_config import logging_config


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to the runner's streams."""
    yield
    logging_config.reset()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def recording(tmp_path):
    path = tmp_path / "recording.webm"
    path.write_bytes(b"\x1aE\xdf\xa3fake-webm-opus-audio")
    return path


RESULT = TranscriptionResult("groq", "Bonjou", "Hello", "Haitian Creole")


class TestGroup:
    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("serve", "translate", "providers"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "voice-relay" in result.output


class TestTranslate:
    def test_prints_result(self, runner, recording):
        with patch.object(Dispatcher, "handle", new=AsyncMock(return_value=RESULT)):
            result = runner.invoke(main, ["translate", str(recording), "--provider", "groq"])

        assert result.exit_code == 0
        assert "Transcription: Bonjou" in result.output
        assert "Translation:   Hello" in result.output

    def test_json_output(self, runner, recording):
        with patch.object(Dispatcher, "handle", new=AsyncMock(return_value=RESULT)):
            result = runner.invoke(main, ["translate", str(recording), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["translation"] == "Hello"

    def test_credentials_are_passed_by_wire_name(self, runner, recording):
        handle = AsyncMock(return_value=RESULT)
        with patch.object(Dispatcher, "handle", new=handle):
            runner.invoke(main, [
                "translate", str(recording), "--provider", "huggingface",
                "--groq-api-key", "gsk_test", "--hf-api-key", "hf_test",
            ])

        request = handle.call_args.args[0]
        assert request.provider == "huggingface"
        assert request.credentials["groqApiKey"] == "gsk_test"
        assert request.credentials["hfApiKey"] == "hf_test"
        assert request.credentials["ociConfigPath"] is None

    def test_client_error_exit_code(self, runner, recording):
        error = MissingCredentialError("groq", "groqApiKey")
        with patch.object(Dispatcher, "handle", new=AsyncMock(side_effect=error)):
            result = runner.invoke(main, ["translate", str(recording), "--provider", "groq"])

        assert result.exit_code == 1
        assert "groqApiKey" in result.output

    def test_provider_error_exit_code(self, runner, recording):
        error = ProviderError("groq", "No transcription generated")
        with patch.object(Dispatcher, "handle", new=AsyncMock(side_effect=error)):
            result = runner.invoke(main, ["translate", str(recording), "--provider", "groq"])

        assert result.exit_code == 2
        assert "No transcription generated" in result.output

    def test_unknown_provider_exit_code(self, runner, recording):
        result = runner.invoke(main, ["translate", str(recording), "--provider", "not-a-real-provider"])
        assert result.exit_code == 1
        assert "Invalid provider" in result.output

    def test_original_file_is_kept_and_copy_removed(
        self, runner, recording, temp_dir, groq_client, fake_mp3
    ):
        with patch("relay.providers.cloud_groq.create_groq_client", return_value=groq_client), \
                patch("relay.providers.groq_whisper.to_compact_mono_16k_mp3", fake_mp3):
            result = runner.invoke(main, [
                "translate", str(recording), "--provider", "groq", "--groq-api-key", "gsk_test", "--json",
            ])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["transcription"] == "Bonjou, kijan ou ye?"
        assert recording.exists()
        assert os.listdir(temp_dir) == []

    def test_missing_audio_file(self, runner):
        result = runner.invoke(main, ["translate", "nope.webm"])
        assert result.exit_code == 2
        assert "does not exist" in result.output


class TestProviders:
    def test_lists_providers(self, runner):
        result = runner.invoke(main, ["providers"])
        assert result.exit_code == 0
        assert "* gcp" in result.output
        assert "groqApiKey, hfApiKey" in result.output

    def test_json(self, runner):
        result = runner.invoke(main, ["providers", "--json"])
        assert result.exit_code == 0
        ids = [info["provider"] for info in json.loads(result.stdout)]
        assert ids == ["gcp", "groq", "huggingface", "llama", "oci"]


class TestServe:
    def test_runs_uvicorn(self, runner):
        with patch("cli.serve.uvicorn.run") as mock_run:
            result = runner.invoke(main, ["serve", "--port", "8080"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with("api.app:app", host="127.0.0.1", port=8080, reload=False)
