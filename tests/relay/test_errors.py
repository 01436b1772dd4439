"""Tests for the relay exception hierarchy."""

import pytest

from relay.errors import (
    ClientInputError,
    MissingCredentialError,
    MissingInputError,
    NoTranscriptionError,
    NoTranslationError,
    ProviderError,
    ProviderNotAvailableError,
    RelayError,
    TimedOutError,
    TranscodeError,
    UnknownProviderError,
)


class TestClientInputErrors:
    def test_missing_input_default_message(self):
        assert str(MissingInputError()) == "No audio file provided"

    def test_unknown_provider_lists_valid_options(self):
        error = UnknownProviderError("nope", ["gcp", "groq"])
        assert "Invalid provider" in str(error)
        assert "'nope'" in str(error)
        assert "gcp, groq" in str(error)
        assert error.provider == "nope"

    def test_missing_credential_names_field(self):
        error = MissingCredentialError("groq", "groqApiKey")
        assert error.provider == "groq"
        assert error.field == "groqApiKey"
        assert "groqApiKey" in str(error)

    @pytest.mark.parametrize("error", [
        MissingInputError(),
        UnknownProviderError("x"),
        MissingCredentialError("oci", "ociConfigPath"),
    ])
    def test_client_errors_are_not_provider_errors(self, error):
        assert isinstance(error, ClientInputError)
        assert isinstance(error, RelayError)
        assert not isinstance(error, ProviderError)


class TestProviderErrors:
    def test_message_names_provider(self):
        error = ProviderError("llama", "Groq API error: quota")
        assert str(error) == "llama processing failed: Groq API error: quota"
        assert error.provider == "llama"
        assert error.detail == "Groq API error: quota"

    def test_empty_stage_errors(self):
        assert "No transcription generated" in str(NoTranscriptionError("groq"))
        assert "No translation generated" in str(NoTranslationError("groq"))
        assert isinstance(NoTranscriptionError("groq"), ProviderError)
        assert isinstance(NoTranslationError("groq"), ProviderError)

    def test_timed_out_reports_wait(self):
        error = TimedOutError("oci", "job-1", 305.2)
        assert isinstance(error, ProviderError)
        assert "timeout after 305s" in str(error)
        assert "job-1" in str(error)

    def test_not_available_is_provider_error(self):
        assert isinstance(ProviderNotAvailableError("gcp", "missing sdk"), ProviderError)

    def test_transcode_error_is_relay_error(self):
        assert isinstance(TranscodeError("bad"), RelayError)
        assert not isinstance(TranscodeError("bad"), ClientInputError)
