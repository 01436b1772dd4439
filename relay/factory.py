"""
Translation Provider Registry

Maps provider ids to provider classes and instantiates them against the
process configuration. Selection goes through the registry instead of
branching at the call site, so adding a backend means registering a class.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from relay.config import RelayConfig
from relay.errors import UnknownProviderError
from relay.models import ProviderCredentials, ProviderId
from relay.providers.base import TranslationProvider
from relay.providers.cloud_gcp import CloudGCPProvider
from relay.providers.cloud_groq import CloudGroqProvider
from relay.providers.cloud_huggingface import CloudHuggingFaceProvider
from relay.providers.cloud_llama import CloudLlamaProvider
from relay.providers.cloud_oci import CloudOCIProvider


DEFAULT_PROVIDERS: Dict[str, Type[TranslationProvider]] = {
    ProviderId.GCP.value: CloudGCPProvider,
    ProviderId.GROQ.value: CloudGroqProvider,
    ProviderId.HUGGINGFACE.value: CloudHuggingFaceProvider,
    ProviderId.LLAMA.value: CloudLlamaProvider,
    ProviderId.OCI.value: CloudOCIProvider,
}


class ProviderRegistry:
    """Registry of translation providers keyed by provider id.

    Provider instances are stateless and cached per registry.

    Example:
        >>> registry = ProviderRegistry(RelayConfig.load())
        >>> provider = registry.create_provider("groq")
        >>> registry.required_credentials("huggingface")
        ('groqApiKey', 'hfApiKey')
    """

    def __init__(
        self,
        config: RelayConfig,
        providers: Optional[Dict[str, Type[TranslationProvider]]] = None,
    ):
        self.config = config
        self._providers: Dict[str, Type[TranslationProvider]] = dict(
            DEFAULT_PROVIDERS if providers is None else providers
        )
        self._provider_cache: Dict[str, TranslationProvider] = {}

    def register(self, provider_id: str, provider_class: Type[TranslationProvider]) -> None:
        self._providers[provider_id] = provider_class
        self._provider_cache.pop(provider_id, None)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def available_providers(self) -> List[str]:
        return list(self._providers)

    def create_provider(self, provider_id: Optional[str]) -> TranslationProvider:
        """Return the provider registered under ``provider_id``.

        Raises:
            UnknownProviderError: If no provider is registered under the id
        """
        if provider_id not in self._providers:
            raise UnknownProviderError(provider_id, self.available_providers())

        if provider_id not in self._provider_cache:
            self._provider_cache[provider_id] = self._providers[provider_id](self.config)
        return self._provider_cache[provider_id]

    def required_credentials(self, provider_id: str) -> Tuple[str, ...]:
        provider = self.create_provider(provider_id)
        return provider.required_credentials_for(ProviderCredentials(provider_id))

    def describe_providers(self) -> List[Dict[str, Any]]:
        return [self.create_provider(provider_id).describe() for provider_id in self._providers]

    def clear_cache(self) -> None:
        """Force re-instantiation of providers on next request."""
        self._provider_cache.clear()
