"""
Pytest configuration and fixtures for test isolation.
"""
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from relay.config import RelayConfig


RELAY_ENV_VARS = (
    "RELAY_DEFAULT_PROVIDER", "RELAY_TEMP_DIR", "RELAY_HTTP_TIMEOUT", "RELAY_LOG_LEVEL",
    "RELAY_STATIC_DIR", "GOOGLE_APPLICATION_CREDENTIALS", "GROQ_API_KEY", "HF_API_KEY",
    "LLAMA_PROVIDER", "REPLICATE_API_TOKEN", "OCI_CONFIG_PATH", "OCI_PROFILE",
    "OCI_COMPARTMENT_ID", "OCI_BUCKET_NAME", "OCI_NAMESPACE", "OCI_POLL_INTERVAL",
    "OCI_MAX_WAIT", "API_HOST", "API_PORT", "API_CORS_ORIGINS", "API_DEBUG",
)


@pytest.fixture(autouse=True)
def isolate_tests(tmp_path, monkeypatch):
    """
    Automatically isolate each test by:
    1. Running from a temporary working directory
    2. Removing relay environment variables inherited from the shell
    """
    monkeypatch.chdir(tmp_path)
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def temp_dir(tmp_path):
    directory = tmp_path / "audio_temp"
    directory.mkdir()
    return directory


@pytest.fixture
def relay_config(temp_dir):
    """Default configuration writing temp audio under tmp_path."""
    return RelayConfig(temp_dir=str(temp_dir))


@pytest.fixture
def webm_file(temp_dir):
    """A small fake WebM recording in the temp directory."""
    path = temp_dir / "upload-test.webm"
    path.write_bytes(b"\x1aE\xdf\xa3fake-webm-opus-audio")
    return path


@pytest.fixture
def fake_mp3(temp_dir):
    """Stand-in for the ffmpeg step: writes an MP3 next to the input."""
    created = []

    async def convert(input_path, output_path=None):
        target = temp_dir / (str(input_path).rsplit("/", 1)[-1].rsplit(".", 1)[0] + ".mp3")
        target.write_bytes(b"ID3fake-mp3")
        created.append(target)
        return str(target)

    mock = AsyncMock(side_effect=convert)
    mock.created = created
    return mock


def make_groq_client(transcript="Bonjou, kijan ou ye?", translation="Hello, how are you?"):
    """MagicMock shaped like groq.AsyncGroq."""
    client = MagicMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    client.audio.transcriptions.create = AsyncMock(return_value=SimpleNamespace(text=transcript))
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=translation))]
        )
    )
    return client


@pytest.fixture
def groq_client():
    return make_groq_client()


@pytest.fixture
def groq_client_factory():
    return make_groq_client
