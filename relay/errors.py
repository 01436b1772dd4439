"""
Relay Error Classes

This module defines the exception hierarchy for the voice relay. Client input
faults derive from ClientInputError and are reported as HTTP 400; everything
raised while a provider is processing audio derives from ProviderError and
carries the provider name, so callers can report which backend failed.
"""
from typing import Optional


class RelayError(Exception):
    """Base exception class for all relay errors.

    Example:
        try:
            result = await dispatcher.handle(request)
        except RelayError as e:
            logger.error(f"Translation failed: {e}")
    """
    pass


class ConfigurationError(RelayError):
    """Exception raised for invalid or unloadable configuration.

    This exception is raised when:
    - The configuration file cannot be parsed
    - A configuration value has the wrong type
    - A provider is asked for a backend it does not support
    """
    pass


class ClientInputError(RelayError):
    """Base class for faults in the caller's request."""
    pass


class MissingInputError(ClientInputError):
    """Raised when no audio file was supplied, or the file is empty."""

    def __init__(self, message: str = "No audio file provided"):
        super().__init__(message)


class UnknownProviderError(ClientInputError):
    """Raised when the provider selector is not one of the registered ids."""

    def __init__(self, provider: Optional[str], valid: Optional[list] = None):
        self.provider = provider
        self.valid = list(valid or [])
        message = f"Invalid provider: {provider!r}"
        if self.valid:
            message += f". Valid options: {', '.join(self.valid)}"
        super().__init__(message)


class MissingCredentialError(ClientInputError):
    """Raised when a credential required by the selected provider is empty."""

    def __init__(self, provider: str, field: str):
        self.provider = provider
        self.field = field
        super().__init__(f"Missing required credential '{field}' for provider '{provider}'")


class TranscodeError(RelayError):
    """Raised when the audio could not be converted to MP3."""
    pass


class ProviderError(RelayError):
    """Exception raised when a provider fails while processing audio.

    Wraps any downstream failure with the provider name. The original
    message is kept in ``detail`` for the HTTP ``details`` field.

    Example:
        try:
            response = await client.audio.transcriptions.create(...)
        except Exception as e:
            raise ProviderError("groq", str(e)) from e
    """

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"{provider} processing failed: {detail}")


class NoTranscriptionError(ProviderError):
    """Raised when the transcription stage returned no text."""

    def __init__(self, provider: str):
        super().__init__(provider, "No transcription generated")


class NoTranslationError(ProviderError):
    """Raised when the translation stage returned no text."""

    def __init__(self, provider: str):
        super().__init__(provider, "No translation generated")


class ProviderNotAvailableError(ProviderError):
    """Raised when a provider's SDK is not installed."""
    pass


class TimedOutError(ProviderError):
    """Raised when an asynchronous provider job does not finish in time.

    Distinct from a job that reports failure: the job may still be running
    remotely when this is raised.
    """

    def __init__(self, provider: str, job_id: str, waited: float):
        self.job_id = job_id
        self.waited = waited
        super().__init__(provider, f"Transcription timeout after {waited:.0f}s (job {job_id})")
