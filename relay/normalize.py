"""
Result normalization across providers.

Each backend answers in its own shape: SDK objects, plain dicts, lists of
dicts, or bare strings. The helpers here pull the text out of those shapes
and build the common TranscriptionResult. They unify shape only; apart from
trimming surrounding whitespace the text is returned as the backend sent it.
"""

from typing import Any, Iterable, Mapping, Optional

from relay.models import TranscriptionResult


HAITIAN_CREOLE = "Haitian Creole"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an attribute-style SDK object."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _clean(text: Any) -> str:
    if text is None:
        return ""
    return str(text).strip()


def text_from_speech_results(response: Any) -> str:
    """Join the top alternative of each Google Speech result with newlines."""
    lines = []
    for result in _field(response, "results", None) or []:
        alternatives = _field(result, "alternatives", None) or []
        if alternatives:
            transcript = _clean(_field(alternatives[0], "transcript", ""))
            if transcript:
                lines.append(transcript)
    return "\n".join(lines)


def text_from_transcription(response: Any) -> str:
    """Text of an OpenAI-compatible transcription response (object or JSON)."""
    if isinstance(response, str):
        return _clean(response)
    return _clean(_field(response, "text", ""))


def text_from_chat_completion(response: Any) -> str:
    """Content of the first choice of an OpenAI-compatible chat completion."""
    choices = _field(response, "choices", None) or []
    if not choices:
        return ""
    message = _field(choices[0], "message", None)
    return _clean(_field(message, "content", ""))


def text_from_translation_output(output: Any) -> str:
    """``translation_text`` of a Hugging Face translation response.

    The Inference API returns either a single object or a one-element list.
    """
    if isinstance(output, (list, tuple)):
        output = output[0] if output else None
    if isinstance(output, str):
        return _clean(output)
    return _clean(_field(output, "translation_text", ""))


def text_from_replicate_output(output: Any) -> str:
    """Text from a Replicate prediction output.

    Language models stream a list of string chunks; Whisper returns a dict
    with ``transcription`` (or ``text``).
    """
    if output is None:
        return ""
    if isinstance(output, str):
        return _clean(output)
    if isinstance(output, Mapping):
        return _clean(output.get("transcription") or output.get("text") or "")
    if isinstance(output, Iterable):
        return _clean("".join(str(chunk) for chunk in output))
    return _clean(output)


def text_from_oci_speech_output(payload: Any) -> str:
    """Join every ``transcriptions[].transcription`` of an OCI Speech result."""
    parts = []
    for item in _field(payload, "transcriptions", None) or []:
        text = _clean(_field(item, "transcription", ""))
        if text:
            parts.append(text)
    return " ".join(parts)


def build_result(
    provider: str,
    transcription: str,
    translation: str,
    language: str = HAITIAN_CREOLE,
    models: Optional[Mapping[str, str]] = None,
    note: Optional[str] = None,
) -> TranscriptionResult:
    """Assemble the common result shape."""
    return TranscriptionResult(
        provider=provider,
        transcription=transcription,
        translation=translation,
        language=language,
        models=dict(models) if models else None,
        note=note,
    )
