"""
Cloud Groq Provider

Transcribes with Whisper on Groq and translates with a Llama chat model on
the same API, prompted to return only the English text.

Provider ID: groq
"""
from pathlib import Path
from typing import Dict, Optional

from relay.audio.ingest import TemporaryArtifacts
from relay.models import ProviderCredentials
from relay.normalize import text_from_chat_completion
from relay.providers.base import (
    TRANSLATION_SYSTEM_PROMPT,
    TranslationProvider,
    translation_prompt,
)
from relay.providers.groq_whisper import create_groq_client, transcribe_with_groq_whisper


class CloudGroqProvider(TranslationProvider):
    """Whisper + Llama on Groq.

    Example:
        >>> provider = CloudGroqProvider(RelayConfig.load())
        >>> creds = ProviderCredentials("groq", {"groqApiKey": "gsk_..."})
        >>> result = await provider.process_audio("recording.webm", creds)
    """

    name = "groq"
    label = "GROQ"
    required_credentials = ("groqApiKey",)

    async def _client(self, credentials: ProviderCredentials, artifacts: TemporaryArtifacts):
        """One AsyncGroq client per request, shared by both stages."""
        api_key = credentials.require("groqApiKey")
        return await artifacts.open_client(
            "groq", lambda: create_groq_client(api_key, self.config.http_timeout)
        )

    async def transcribe(
        self,
        audio_path: Path,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        client = await self._client(credentials, artifacts)
        return await transcribe_with_groq_whisper(client, audio_path, self.config.groq, artifacts)

    async def translate(
        self,
        text: str,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        groq = self.config.groq
        client = await self._client(credentials, artifacts)
        completion = await client.chat.completions.create(
            messages=[
                {"role": "system", "content": TRANSLATION_SYSTEM_PROMPT},
                {"role": "user", "content": translation_prompt(text)},
            ],
            model=groq.translation_model,
            temperature=groq.translation_temperature,
            max_tokens=groq.max_tokens,
        )
        return text_from_chat_completion(completion)

    def models(self) -> Optional[Dict[str, str]]:
        return {
            "transcription": f"{self.config.groq.transcription_model} (GROQ)",
            "translation": f"{self.config.groq.translation_model} (GROQ)",
        }
