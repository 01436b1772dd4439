"""Tests for request, credential and result types."""

import pytest

from relay.errors import MissingCredentialError
from relay.models import ProviderCredentials, ProviderId, TranscriptionRequest, TranscriptionResult


class TestProviderId:
    def test_values(self):
        assert ProviderId.values() == ["gcp", "groq", "huggingface", "llama", "oci"]

    def test_compares_as_string(self):
        assert ProviderId.GROQ == "groq"


class TestProviderCredentials:
    def test_empty_values_are_dropped(self):
        creds = ProviderCredentials("groq", {"groqApiKey": "gsk_1", "hfApiKey": "", "other": None})
        assert dict(creds) == {"groqApiKey": "gsk_1"}
        assert len(creds) == 1

    def test_require_returns_value(self):
        creds = ProviderCredentials("groq", {"groqApiKey": "gsk_1"})
        assert creds.require("groqApiKey") == "gsk_1"

    def test_require_missing_raises(self):
        creds = ProviderCredentials("huggingface", {"groqApiKey": "gsk_1"})
        with pytest.raises(MissingCredentialError) as exc_info:
            creds.require("hfApiKey")
        assert exc_info.value.provider == "huggingface"
        assert exc_info.value.field == "hfApiKey"

    def test_repr_masks_values(self):
        creds = ProviderCredentials("groq", {"groqApiKey": "gsk_secret"})
        assert "gsk_secret" not in repr(creds)
        assert "groqApiKey" in repr(creds)


class TestTranscriptionRequest:
    def test_credentials_default_empty(self):
        request = TranscriptionRequest(audio_path="a.webm", provider="gcp")
        assert dict(request.credentials) == {}

    def test_frozen(self):
        request = TranscriptionRequest(audio_path="a.webm", provider="gcp")
        with pytest.raises(Exception):
            request.provider = "oci"


class TestTranscriptionResult:
    def test_to_dict_omits_unset_fields(self):
        result = TranscriptionResult("groq", "Bonjou", "Hello", "Haitian Creole")
        assert result.to_dict() == {
            "provider": "groq",
            "transcription": "Bonjou",
            "translation": "Hello",
            "language": "Haitian Creole",
        }

    def test_to_dict_includes_models_and_note(self):
        result = TranscriptionResult(
            "oci", "Bonjou", "Hello", "Haitian Creole (processed as French)",
            models={"transcription": "OCI AI Speech"}, note="French was used",
        )
        data = result.to_dict()
        assert data["models"] == {"transcription": "OCI AI Speech"}
        assert data["note"] == "French was used"
