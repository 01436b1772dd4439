"""
Request and result types shared by the dispatcher, the providers and the API.

All of these are request-scoped: they are built for one translation call and
dropped when it finishes.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Union

from relay.errors import MissingCredentialError


class ProviderId(str, Enum):
    """Identifiers accepted in the ``provider`` request field."""
    GCP = "gcp"
    GROQ = "groq"
    HUGGINGFACE = "huggingface"
    LLAMA = "llama"
    OCI = "oci"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class ProviderCredentials(Mapping[str, str]):
    """Secret bundle supplied for a single provider.

    Behaves as a read-only mapping of credential field name to value. The
    provider name is bound at construction so an adapter can check that it
    was handed its own bundle. Values never appear in ``repr``.
    """

    def __init__(self, provider: str, values: Optional[Mapping[str, Optional[str]]] = None):
        self.provider = provider
        self._values: Dict[str, str] = {
            key: value for key, value in (values or {}).items() if value
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        masked = {key: "***" for key in self._values}
        return f"ProviderCredentials(provider={self.provider!r}, values={masked})"

    def require(self, field_name: str) -> str:
        """Return a credential value or raise MissingCredentialError."""
        value = self._values.get(field_name)
        if not value:
            raise MissingCredentialError(self.provider, field_name)
        return value


@dataclass(frozen=True)
class TranscriptionRequest:
    """One translation call: the uploaded audio, the provider, its credentials."""
    audio_path: Optional[Union[str, Path]]
    provider: Optional[str]
    credentials: Mapping[str, Optional[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class TranscriptionResult:
    """Normalized output of every provider.

    Attributes:
        provider: Provider id that produced the result
        transcription: Source-language transcript
        translation: English translation
        language: Source language label, noting any substituted language
        models: Underlying models used, keyed by stage
        note: Free-text remark, e.g. about a language substitution
    """
    provider: str
    transcription: str
    translation: str
    language: str
    models: Optional[Mapping[str, str]] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "provider": self.provider,
            "transcription": self.transcription,
            "translation": self.translation,
            "language": self.language,
        }
        if self.models:
            data["models"] = dict(self.models)
        if self.note:
            data["note"] = self.note
        return data
