"""
Cloud Llama Provider

Whisper for transcription and Meta Llama for translation, on a backend chosen
by configuration (LLAMA_PROVIDER):

- ``groq``: plain HTTP calls (httpx) to Groq's OpenAI-compatible endpoints;
  the raw WebM recording is uploaded as-is.
- ``replicate``: Replicate's hosted Whisper and Llama 3 instruct models; the
  recording is sent as a base64 data URI.

Provider ID: llama
"""
import asyncio
import base64
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx
import replicate

from relay.audio.ingest import TemporaryArtifacts
from relay.config import RelayConfig
from relay.errors import ConfigurationError, ProviderError
from relay.models import ProviderCredentials
from relay.normalize import (
    text_from_chat_completion,
    text_from_replicate_output,
    text_from_transcription,
)
from relay.providers.base import TranslationProvider


BACKENDS = ("groq", "replicate")

LLAMA_PROMPT = (
    "Translate this Haitian Creole text to English. "
    "Only provide the English translation, nothing else:\n\n{text}"
)


class CloudLlamaProvider(TranslationProvider):
    """Whisper + Llama over a configurable backend."""

    name = "llama"
    label = "LLAMA"
    required_credentials = ("groqApiKey",)
    optional_credentials = ("replicateApiToken",)

    BACKEND_CREDENTIALS = {
        "groq": "groqApiKey",
        "replicate": "replicateApiToken",
    }

    def __init__(self, config: RelayConfig):
        super().__init__(config)
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown llama backend: {self.backend}. Valid options: {', '.join(BACKENDS)}"
            )

    @property
    def backend(self) -> str:
        return self.config.llama.backend.lower()

    def required_credentials_for(self, credentials: Mapping[str, str]) -> Tuple[str, ...]:
        return (self.BACKEND_CREDENTIALS[self.backend],)

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.http_timeout)

    def _replicate_client(self, credentials: ProviderCredentials) -> replicate.Client:
        return replicate.Client(api_token=credentials.require("replicateApiToken"))

    async def transcribe(
        self,
        audio_path: Path,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        audio_bytes = await asyncio.to_thread(audio_path.read_bytes)
        if self.backend == "groq":
            return await self._transcribe_with_groq(audio_bytes, credentials)
        return await self._transcribe_with_replicate(audio_bytes, credentials)

    async def translate(
        self,
        text: str,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        if self.backend == "groq":
            return await self._translate_with_groq(text, credentials)
        return await self._translate_with_replicate(text, credentials)

    async def _post_groq(self, path: str, credentials: ProviderCredentials, **kwargs) -> Dict[str, Any]:
        url = f"{self.config.llama.groq_base_url}{path}"
        headers = {"Authorization": f"Bearer {credentials.require('groqApiKey')}"}
        async with self._http_client() as client:
            response = await client.post(url, headers=headers, **kwargs)
        if response.status_code >= 400:
            raise ProviderError(self.name, f"Groq API error: {response.text}")
        return response.json()

    async def _transcribe_with_groq(self, audio_bytes: bytes, credentials: ProviderCredentials) -> str:
        result = await self._post_groq(
            "/audio/transcriptions",
            credentials,
            files={"file": ("recording.webm", audio_bytes, "audio/webm")},
            data={
                "model": self.config.groq.transcription_model,
                "language": self.config.groq.language,
                "response_format": "json",
            },
        )
        return text_from_transcription(result)

    async def _translate_with_groq(self, text: str, credentials: ProviderCredentials) -> str:
        llama = self.config.llama
        result = await self._post_groq(
            "/chat/completions",
            credentials,
            json={
                "model": self.config.groq.translation_model,
                "messages": [{"role": "user", "content": LLAMA_PROMPT.format(text=text)}],
                "temperature": llama.temperature,
                "max_tokens": llama.max_tokens,
            },
        )
        return text_from_chat_completion(result)

    async def _run_replicate(self, credentials: ProviderCredentials, model: str, model_input: Dict[str, Any]) -> Any:
        output = await self._replicate_client(credentials).async_run(model, input=model_input)
        if hasattr(output, "__aiter__"):
            return [chunk async for chunk in output]
        return output

    async def _transcribe_with_replicate(self, audio_bytes: bytes, credentials: ProviderCredentials) -> str:
        encoded = base64.b64encode(audio_bytes).decode("ascii")
        output = await self._run_replicate(
            credentials,
            self.config.llama.replicate_whisper_model,
            {
                "audio": f"data:audio/webm;base64,{encoded}",
                "model": "large-v3",
                "language": self.config.groq.language,
                "translate": False,
            },
        )
        return text_from_replicate_output(output)

    async def _translate_with_replicate(self, text: str, credentials: ProviderCredentials) -> str:
        llama = self.config.llama
        output = await self._run_replicate(
            credentials,
            llama.replicate_llama_model,
            {
                "prompt": LLAMA_PROMPT.format(text=text),
                "max_tokens": llama.max_tokens,
                "temperature": llama.temperature,
            },
        )
        return text_from_replicate_output(output)

    def models(self) -> Optional[Dict[str, str]]:
        if self.backend == "groq":
            return {
                "transcription": f"{self.config.groq.transcription_model} (GROQ)",
                "translation": f"{self.config.groq.translation_model} (GROQ)",
            }
        return {
            "transcription": "whisper large-v3 (Replicate)",
            "translation": f"{self.config.llama.replicate_llama_model} (Replicate)",
        }
