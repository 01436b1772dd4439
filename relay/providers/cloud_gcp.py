"""
Cloud GCP Provider

Transcribes with Google Cloud Speech-to-Text and translates with Google Cloud
Translation (v2). The captured WebM/Opus recording is sent inline, so no
transcoding is needed. Recognition uses Haitian Creole (ht-HT) with French as
an alternative language.

Provider ID: gcp
"""
import asyncio
from pathlib import Path
from typing import Any, Dict, Optional

from relay.audio.ingest import TemporaryArtifacts
from relay.errors import ProviderNotAvailableError
from relay.models import ProviderCredentials
from relay.normalize import text_from_speech_results
from relay.providers.base import TranslationProvider


class CloudGCPProvider(TranslationProvider):
    """Google Cloud Speech + Google Cloud Translation.

    Both clients authenticate with the service-account JSON named by the
    ``gcpCredentialsPath`` credential (GOOGLE_APPLICATION_CREDENTIALS by
    default).
    """

    name = "gcp"
    label = "GCP"
    required_credentials = ("gcpCredentialsPath",)

    def _create_speech_client(self, credentials_path: str):
        try:
            from google.cloud import speech
        except ImportError:
            raise ProviderNotAvailableError(
                self.name,
                "google-cloud-speech package not installed. Install with: pip install google-cloud-speech",
            )
        return speech.SpeechAsyncClient.from_service_account_file(credentials_path)

    def _create_translate_client(self, credentials_path: str):
        try:
            from google.cloud import translate_v2
        except ImportError:
            raise ProviderNotAvailableError(
                self.name,
                "google-cloud-translate package not installed. Install with: pip install google-cloud-translate",
            )
        return translate_v2.Client.from_service_account_json(credentials_path)

    def _recognition_request(self, audio_bytes: bytes) -> Dict[str, Any]:
        gcp = self.config.gcp
        return {
            "config": {
                "encoding": gcp.encoding,
                "sample_rate_hertz": gcp.sample_rate_hertz,
                "language_code": gcp.language_code,
                "alternative_language_codes": list(gcp.alternative_language_codes),
                "enable_automatic_punctuation": True,
            },
            "audio": {"content": audio_bytes},
        }

    async def transcribe(
        self,
        audio_path: Path,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        client = self._create_speech_client(credentials.require("gcpCredentialsPath"))
        artifacts.on_close(client.transport.close)
        audio_bytes = await asyncio.to_thread(audio_path.read_bytes)
        response = await client.recognize(request=self._recognition_request(audio_bytes))
        return text_from_speech_results(response)

    async def translate(
        self,
        text: str,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        gcp = self.config.gcp
        client = self._create_translate_client(credentials.require("gcpCredentialsPath"))
        result = await asyncio.to_thread(
            client.translate,
            text,
            source_language=gcp.source_language,
            target_language=gcp.target_language,
            format_="text",
        )
        return (result or {}).get("translatedText")

    def models(self) -> Optional[Dict[str, str]]:
        return {
            "transcription": f"Cloud Speech-to-Text ({self.config.gcp.language_code})",
            "translation": "Cloud Translation v2",
        }
