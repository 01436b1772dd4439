"""
Translation Provider Base Class

Defines TranslationProvider, the interface every backend implements: take a
recorded audio file and the caller's credentials, return a transcript of the
Haitian Creole speech and its English translation.

Every provider runs the same two-stage pipeline:

    transcribe -> (empty? NoTranscriptionError) -> translate
               -> (empty? NoTranslationError) -> normalized result

Providers are stateless; one instance may serve many concurrent requests.
Anything a request creates (transcoded files, clients) lives only for that
call.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from relay.audio.ingest import TemporaryArtifacts
from relay.config import RelayConfig
from relay.errors import (
    ClientInputError,
    ConfigurationError,
    NoTranscriptionError,
    NoTranslationError,
    ProviderError,
)
from relay.models import ProviderCredentials, TranscriptionResult
from relay.normalize import HAITIAN_CREOLE, build_result

logger = logging.getLogger(__name__)

TRANSLATION_SYSTEM_PROMPT = (
    "You are a professional translator specializing in Haitian Creole to English "
    "translation. Provide accurate, natural-sounding translations without explanations."
)


def translation_prompt(text: str) -> str:
    """User prompt asking an LLM for a bare English translation."""
    return (
        "Translate the following Haitian Creole text to English. "
        "Provide only the English translation without any explanation.\n\n"
        f"Haitian Creole: {text}\n\n"
        "English:"
    )


def ensure_transcription(provider: str, text: Optional[str]) -> str:
    """Return the stripped transcript or raise NoTranscriptionError."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise NoTranscriptionError(provider)
    return cleaned


def ensure_translation(provider: str, text: Optional[str]) -> str:
    """Return the stripped translation or raise NoTranslationError."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise NoTranslationError(provider)
    return cleaned


class TranslationProvider(ABC):
    """
    Base class for speech translation providers.

    Subclasses set ``name`` and ``required_credentials`` and implement the
    ``transcribe`` and ``translate`` stages. ``process_audio`` runs the stages
    in order, stops at the first failure, and wraps unexpected exceptions in
    ProviderError with the provider name.

    Example:
        >>> provider = CloudGroqProvider(config)
        >>> creds = ProviderCredentials("groq", {"groqApiKey": "gsk_..."})
        >>> result = await provider.process_audio("recording.webm", creds)
        >>> print(result.translation)
    """

    name: str = ""
    label: str = ""
    required_credentials: Tuple[str, ...] = ()
    optional_credentials: Tuple[str, ...] = ()
    language: str = HAITIAN_CREOLE

    def __init__(self, config: RelayConfig):
        if not isinstance(config, RelayConfig):
            raise ConfigurationError(
                f"Expected RelayConfig, got {type(config).__name__}"
            )
        self.config = config

    @property
    def log_prefix(self) -> str:
        return self.label or self.name.upper()

    @classmethod
    def credential_fields(cls) -> Tuple[str, ...]:
        return tuple(cls.required_credentials) + tuple(cls.optional_credentials)

    def required_credentials_for(self, credentials: Mapping[str, str]) -> Tuple[str, ...]:
        """Credential fields this request must supply.

        Providers with a configurable backend override this.
        """
        return tuple(self.required_credentials)

    def check_credentials(self, credentials: ProviderCredentials) -> None:
        """Reject bundles meant for another provider or missing a field."""
        if credentials.provider != self.name:
            raise ConfigurationError(
                f"Credentials for '{credentials.provider}' passed to provider '{self.name}'"
            )
        for field_name in self.required_credentials_for(credentials):
            credentials.require(field_name)

    async def process_audio(
        self,
        audio_path: Union[str, Path],
        credentials: ProviderCredentials,
    ) -> TranscriptionResult:
        """Transcribe the recording and translate the transcript to English.

        Args:
            audio_path: Recorded audio on local disk
            credentials: This provider's credential bundle

        Returns:
            Normalized TranscriptionResult

        Raises:
            MissingCredentialError: If a required credential is empty
            NoTranscriptionError: If transcription produced no text
            NoTranslationError: If translation produced no text
            ProviderError: For any other failure, naming this provider
        """
        self.check_credentials(credentials)
        try:
            async with TemporaryArtifacts() as artifacts:
                logger.info(f"{self.log_prefix}: Transcribing audio...")
                raw_transcript = await self.transcribe(Path(audio_path), credentials, artifacts)
                transcription = ensure_transcription(self.name, raw_transcript)
                logger.debug(f"{self.log_prefix}: Transcription: {transcription}")

                logger.info(f"{self.log_prefix}: Translating to English...")
                raw_translation = await self.translate(transcription, credentials, artifacts)
                translation = ensure_translation(self.name, raw_translation)
                logger.debug(f"{self.log_prefix}: Translation: {translation}")
        except (ProviderError, ClientInputError):
            raise
        except Exception as e:
            logger.error(f"{self.log_prefix} processing error: {e}")
            raise ProviderError(self.name, str(e)) from e

        return self.build_result(transcription, translation)

    @abstractmethod
    async def transcribe(
        self,
        audio_path: Path,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        """Return the source-language transcript of ``audio_path``.

        Derived files must be registered with ``artifacts`` so they are
        deleted when the request finishes. Clients opened on ``artifacts``
        are shared with ``translate`` and closed with the scope.
        """
        ...

    @abstractmethod
    async def translate(
        self,
        text: str,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        """Return the English translation of ``text``."""
        ...

    def models(self) -> Optional[Dict[str, str]]:
        """Models used for each stage, reported in the result."""
        return None

    def note(self) -> Optional[str]:
        return None

    def build_result(self, transcription: str, translation: str) -> TranscriptionResult:
        return build_result(
            provider=self.name,
            transcription=transcription,
            translation=translation,
            language=self.language,
            models=self.models(),
            note=self.note(),
        )

    def get_engine_info(self) -> Tuple[str, str]:
        """Return the provider name and the models it uses."""
        models = self.models() or {}
        return (self.name, " + ".join(models.values()) or "default")

    def describe(self) -> Dict[str, Any]:
        """Summary used by the providers listing."""
        return {
            "provider": self.name,
            "required_credentials": list(self.required_credentials_for(ProviderCredentials(self.name))),
            "optional_credentials": list(self.optional_credentials),
            "language": self.language,
            "models": self.models() or {},
        }
