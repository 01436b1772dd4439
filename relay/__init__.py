"""
Voice Relay Core

Turns recorded Haitian Creole speech into a transcript and an English
translation using one of several third-party providers.

Key Components:
    - dispatcher.py: Dispatcher validating requests and running one provider
    - factory.py: ProviderRegistry mapping provider ids to implementations
    - providers/: Provider implementations (gcp, groq, huggingface, llama, oci)
    - audio/: Upload storage, scoped cleanup and MP3 conversion
    - jobs.py: Polling state machine for asynchronous provider jobs
    - normalize.py: Mapping of provider responses onto TranscriptionResult
    - config.py: Configuration with YAML and environment variable support
    - errors.py: Error hierarchy

Usage:
    >>> from relay import Dispatcher, RelayConfig, TranscriptionRequest
    >>>
    >>> dispatcher = Dispatcher(RelayConfig.load())
    >>> result = await dispatcher.handle(
    ...     TranscriptionRequest("recording.webm", "groq", {"groqApiKey": "gsk_..."})
    ... )
    >>> print(result.translation)
"""

from relay.config import RelayConfig
from relay.dispatcher import Dispatcher, build_credentials
from relay.factory import ProviderRegistry
from relay.models import (
    ProviderCredentials,
    ProviderId,
    TranscriptionRequest,
    TranscriptionResult,
)
from relay.errors import (
    RelayError,
    ConfigurationError,
    ClientInputError,
    MissingInputError,
    UnknownProviderError,
    MissingCredentialError,
    TranscodeError,
    ProviderError,
    NoTranscriptionError,
    NoTranslationError,
    ProviderNotAvailableError,
    TimedOutError,
)

__version__ = "0.3.0"

__all__ = [
    "Dispatcher",
    "build_credentials",
    "ProviderRegistry",
    "RelayConfig",
    "ProviderCredentials",
    "ProviderId",
    "TranscriptionRequest",
    "TranscriptionResult",
    "RelayError",
    "ConfigurationError",
    "ClientInputError",
    "MissingInputError",
    "UnknownProviderError",
    "MissingCredentialError",
    "TranscodeError",
    "ProviderError",
    "NoTranscriptionError",
    "NoTranslationError",
    "ProviderNotAvailableError",
    "TimedOutError",
]
