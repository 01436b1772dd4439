"""Pydantic response models for the REST API."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TranslationResponse(BaseModel):
    """Successful translation of one recording."""
    provider: str
    transcription: str
    translation: str
    language: str
    models: Optional[Dict[str, str]] = None
    note: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    providers: List[str]


class ProviderInfo(BaseModel):
    provider: str
    required_credentials: List[str]
    optional_credentials: List[str] = Field(default_factory=list)
    language: str
    models: Dict[str, str] = Field(default_factory=dict)


class ProvidersResponse(BaseModel):
    default_provider: str
    providers: List[ProviderInfo]
