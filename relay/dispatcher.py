"""
Request dispatcher.

Validates a TranscriptionRequest, picks the provider from the registry,
assembles that provider's credential bundle, runs it, and guarantees the
uploaded file is deleted afterwards whatever the outcome.

Validation order:
1. audio file present and non-empty      -> MissingInputError
2. provider id registered                -> UnknownProviderError
3. required credentials non-empty        -> MissingCredentialError
All three fail before any network call is made.
"""

import logging
import os
from typing import Mapping, Optional, Tuple

from relay.audio.ingest import TemporaryArtifacts
from relay.config import RelayConfig
from relay.errors import (
    ClientInputError,
    MissingInputError,
    ProviderError,
)
from relay.factory import ProviderRegistry
from relay.models import ProviderCredentials, TranscriptionRequest, TranscriptionResult
from relay.providers.base import TranslationProvider
from relay.utils.logging_config import log_timing

logger = logging.getLogger(__name__)


def build_credentials(
    provider: TranslationProvider,
    fields: Mapping[str, Optional[str]],
    defaults: Optional[Mapping[str, Optional[str]]] = None,
) -> ProviderCredentials:
    """Build the credential bundle for ``provider`` only.

    Request fields win over configured defaults. Fields that belong to other
    providers are dropped so they never reach this provider's backend.
    """
    defaults = defaults or {}
    values = {}
    for field_name in provider.credential_fields():
        values[field_name] = fields.get(field_name) or defaults.get(field_name)
    return ProviderCredentials(provider.name, values)


class Dispatcher:
    """Runs one translation request against the selected provider.

    Example:
        >>> config = RelayConfig.load()
        >>> dispatcher = Dispatcher(config)
        >>> result = await dispatcher.handle(
        ...     TranscriptionRequest("audio_temp/upload.webm", "groq", {"groqApiKey": "gsk_..."})
        ... )
    """

    def __init__(self, config: RelayConfig, registry: Optional[ProviderRegistry] = None):
        self.config = config
        self.registry = registry or ProviderRegistry(config)

    def resolve(self, request: TranscriptionRequest) -> Tuple[TranslationProvider, ProviderCredentials]:
        """Validate the request and return its provider and credentials.

        Raises:
            MissingInputError, UnknownProviderError, MissingCredentialError
        """
        if not request.audio_path or not os.path.isfile(request.audio_path):
            raise MissingInputError()
        if os.path.getsize(request.audio_path) == 0:
            raise MissingInputError("Uploaded audio file is empty")

        provider = self.registry.create_provider(request.provider)
        credentials = build_credentials(
            provider, request.credentials, self.config.default_credentials()
        )
        for field_name in provider.required_credentials_for(credentials):
            credentials.require(field_name)
        return provider, credentials

    async def handle(self, request: TranscriptionRequest) -> TranscriptionResult:
        """Process ``request`` and return the normalized result.

        The uploaded file is removed on every exit path.

        Raises:
            ClientInputError: For missing input, unknown provider or credential
            ProviderError: For any failure inside the provider
        """
        async with TemporaryArtifacts(request.audio_path):
            provider, credentials = self.resolve(request)
            logger.info(f"Dispatching to provider '{provider.name}'")
            try:
                with log_timing(logger, f"{provider.name} translation"):
                    return await provider.process_audio(request.audio_path, credentials)
            except (ProviderError, ClientInputError):
                raise
            except Exception as e:
                logger.error(f"Translation error ({provider.name}): {e}")
                raise ProviderError(provider.name, str(e)) from e
