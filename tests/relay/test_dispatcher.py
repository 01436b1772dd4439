"""
Unit Tests: Dispatcher

Validation order, credential isolation, error wrapping, and deletion of the
uploaded file on every exit path.
"""

from unittest.mock import patch

import pytest

from relay.dispatcher import Dispatcher, build_credentials
from relay.errors import (
    MissingCredentialError,
    MissingInputError,
    NoTranscriptionError,
    ProviderError,
    UnknownProviderError,
)
from relay.factory import ProviderRegistry
from relay.models import ProviderCredentials, TranscriptionRequest
from relay.providers.base import TranslationProvider


class EchoProvider(TranslationProvider):
    """Provider double returning fixed text and recording what it was given."""

    name = "echo"
    required_credentials = ("echoKey",)
    optional_credentials = ("echoRegion",)

    transcript = "Bonjou"
    translation = "Hello"

    def __init__(self, config):
        super().__init__(config)
        self.seen_credentials = []

    async def transcribe(self, audio_path, credentials, artifacts):
        self.seen_credentials.append(dict(credentials))
        assert audio_path.exists()
        return self.transcript

    async def translate(self, text, credentials, artifacts):
        return self.translation


class ExplodingProvider(EchoProvider):
    name = "exploding"

    async def process_audio(self, audio_path, credentials):
        raise RuntimeError("socket closed")


@pytest.fixture
def registry(relay_config):
    return ProviderRegistry(
        relay_config, providers={"echo": EchoProvider, "exploding": ExplodingProvider}
    )


@pytest.fixture
def dispatcher(relay_config, registry):
    return Dispatcher(relay_config, registry)


def request_for(path, provider="echo", **credentials):
    return TranscriptionRequest(audio_path=path, provider=provider, credentials=credentials)


class TestBuildCredentials:
    def test_keeps_only_the_providers_fields(self, relay_config):
        provider = EchoProvider(relay_config)
        creds = build_credentials(
            provider,
            {"echoKey": "k", "groqApiKey": "gsk_other", "ociConfigPath": "/oci"},
        )
        assert dict(creds) == {"echoKey": "k"}
        assert creds.provider == "echo"

    def test_request_value_wins_over_default(self, relay_config):
        provider = EchoProvider(relay_config)
        creds = build_credentials(provider, {"echoKey": "request"}, {"echoKey": "default", "echoRegion": "us"})
        assert dict(creds) == {"echoKey": "request", "echoRegion": "us"}

    def test_empty_request_value_falls_back_to_default(self, relay_config):
        provider = EchoProvider(relay_config)
        creds = build_credentials(provider, {"echoKey": ""}, {"echoKey": "default"})
        assert creds["echoKey"] == "default"


class TestValidation:
    @pytest.mark.asyncio
    async def test_missing_file(self, dispatcher, temp_dir):
        with pytest.raises(MissingInputError):
            await dispatcher.handle(request_for(temp_dir / "absent.webm", echoKey="k"))

    @pytest.mark.asyncio
    async def test_no_path(self, dispatcher):
        with pytest.raises(MissingInputError):
            await dispatcher.handle(request_for(None, echoKey="k"))

    @pytest.mark.asyncio
    async def test_empty_file(self, dispatcher, temp_dir):
        empty = temp_dir / "empty.webm"
        empty.write_bytes(b"")
        with pytest.raises(MissingInputError):
            await dispatcher.handle(request_for(empty, echoKey="k"))
        assert not empty.exists()

    @pytest.mark.asyncio
    async def test_unknown_provider(self, dispatcher, webm_file):
        with pytest.raises(UnknownProviderError) as exc_info:
            await dispatcher.handle(request_for(webm_file, provider="not-a-real-provider"))
        assert "Invalid provider" in str(exc_info.value)
        assert not webm_file.exists()

    @pytest.mark.asyncio
    async def test_missing_credential(self, dispatcher, registry, webm_file):
        with pytest.raises(MissingCredentialError) as exc_info:
            await dispatcher.handle(request_for(webm_file, echoKey=""))
        assert exc_info.value.field == "echoKey"
        assert registry.create_provider("echo").seen_credentials == []
        assert not webm_file.exists()

    @pytest.mark.asyncio
    async def test_missing_groq_key_makes_no_network_call(self, relay_config, webm_file):
        dispatcher = Dispatcher(relay_config)
        with patch("relay.providers.cloud_groq.create_groq_client") as mock_client:
            with pytest.raises(MissingCredentialError):
                await dispatcher.handle(request_for(webm_file, provider="groq", hfApiKey="hf_1"))
        mock_client.assert_not_called()
        assert not webm_file.exists()


class TestHandle:
    @pytest.mark.asyncio
    async def test_success_returns_normalized_result(self, dispatcher, webm_file):
        result = await dispatcher.handle(request_for(webm_file, echoKey="k"))

        assert result.provider == "echo"
        assert result.transcription == "Bonjou"
        assert result.translation == "Hello"
        assert result.language == "Haitian Creole"
        assert not webm_file.exists()

    @pytest.mark.asyncio
    async def test_provider_only_sees_its_own_credentials(self, dispatcher, registry, webm_file):
        await dispatcher.handle(request_for(
            webm_file, echoKey="k", groqApiKey="gsk_secret", hfApiKey="hf_secret",
            ociConfigPath="/home/u/.oci/config",
        ))
        assert registry.create_provider("echo").seen_credentials == [{"echoKey": "k"}]

    @pytest.mark.asyncio
    async def test_empty_transcript_deletes_file(self, dispatcher, registry, webm_file):
        registry.create_provider("echo").transcript = "   "
        with pytest.raises(NoTranscriptionError):
            await dispatcher.handle(request_for(webm_file, echoKey="k"))
        assert not webm_file.exists()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped_with_provider_name(self, dispatcher, webm_file):
        with pytest.raises(ProviderError) as exc_info:
            await dispatcher.handle(request_for(webm_file, provider="exploding", echoKey="k"))
        assert exc_info.value.provider == "exploding"
        assert "socket closed" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert not webm_file.exists()

    @pytest.mark.asyncio
    async def test_configured_default_is_used_when_request_omits_credential(self, temp_dir, webm_file):
        from relay.config import GroqConfig, RelayConfig

        config = RelayConfig(temp_dir=str(temp_dir), groq=GroqConfig(api_key="gsk_default"))
        dispatcher = Dispatcher(config)
        provider, creds = dispatcher.resolve(request_for(webm_file, provider="groq"))

        assert provider.name == "groq"
        assert dict(creds) == {"groqApiKey": "gsk_default"}


class TestProviderCredentialCheck:
    @pytest.mark.asyncio
    async def test_provider_rejects_foreign_bundle(self, relay_config, webm_file):
        from relay.errors import ConfigurationError

        provider = EchoProvider(relay_config)
        with pytest.raises(ConfigurationError):
            await provider.process_audio(webm_file, ProviderCredentials("groq", {"echoKey": "k"}))
