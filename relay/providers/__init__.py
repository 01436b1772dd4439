"""
Translation Providers

Provider implementations follow the {deployment}_{service}.py naming pattern.

Available Providers:
    - CloudGCPProvider: Google Cloud Speech + Translation (cloud_gcp.py)
    - CloudGroqProvider: Whisper + Llama on Groq (cloud_groq.py)
    - CloudHuggingFaceProvider: Whisper on Groq + NLLB on Hugging Face (cloud_huggingface.py)
    - CloudLlamaProvider: Whisper + Llama on Groq or Replicate (cloud_llama.py)
    - CloudOCIProvider: OCI AI Speech + AI Language (cloud_oci.py)

All providers subclass TranslationProvider defined in base.py.
"""

from relay.providers.base import TranslationProvider

__all__ = [
    "TranslationProvider",
]
