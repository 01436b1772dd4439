"""
Cloud Hugging Face Provider

Combines two services per request: Whisper on Groq for transcription and
Meta's NLLB-200 machine translation model on the Hugging Face Inference API.
NLLB is a dedicated translation model, not an LLM, so no prompt is involved;
languages are given as FLORES-200 tags (hat_Latn -> eng_Latn).

Provider ID: huggingface
"""
from pathlib import Path
from typing import Dict, Optional

from huggingface_hub import AsyncInferenceClient

from relay.audio.ingest import TemporaryArtifacts
from relay.models import ProviderCredentials
from relay.normalize import text_from_translation_output
from relay.providers.base import TranslationProvider
from relay.providers.groq_whisper import create_groq_client, transcribe_with_groq_whisper


def create_inference_client(token: str, timeout: float) -> AsyncInferenceClient:
    return AsyncInferenceClient(token=token, timeout=timeout)


class CloudHuggingFaceProvider(TranslationProvider):
    """Whisper on Groq + NLLB on Hugging Face."""

    name = "huggingface"
    label = "HF"
    required_credentials = ("groqApiKey", "hfApiKey")

    async def transcribe(
        self,
        audio_path: Path,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        api_key = credentials.require("groqApiKey")
        client = await artifacts.open_client(
            "groq", lambda: create_groq_client(api_key, self.config.http_timeout)
        )
        return await transcribe_with_groq_whisper(client, audio_path, self.config.groq, artifacts)

    async def translate(
        self,
        text: str,
        credentials: ProviderCredentials,
        artifacts: TemporaryArtifacts,
    ) -> Optional[str]:
        hf = self.config.huggingface
        token = credentials.require("hfApiKey")
        client = await artifacts.open_client(
            "huggingface", lambda: create_inference_client(token, self.config.http_timeout)
        )
        output = await client.translation(
            text,
            model=hf.translation_model,
            src_lang=hf.src_lang,
            tgt_lang=hf.tgt_lang,
        )
        return text_from_translation_output(output)

    def models(self) -> Optional[Dict[str, str]]:
        model_name = self.config.huggingface.translation_model.split("/")[-1]
        return {
            "transcription": f"{self.config.groq.transcription_model} (GROQ)",
            "translation": f"{model_name} (HuggingFace)",
        }
