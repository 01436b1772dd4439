"""Translate endpoint: recorded audio in, transcript and translation out."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from api.dependencies import get_dispatcher
from api.models import ErrorResponse, TranslationResponse
from relay.audio.ingest import store_upload
from relay.dispatcher import Dispatcher
from relay.errors import ClientInputError
from relay.models import TranscriptionRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(exc: Exception) -> JSONResponse:
    """400 for caller faults, 500 with details for everything else."""
    if isinstance(exc, ClientInputError):
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return JSONResponse(
        status_code=500,
        content={"error": "Translation failed", "details": str(exc)},
    )


@router.post(
    "/translate",
    response_model=TranslationResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def translate(
    audio: Optional[UploadFile] = File(None),
    provider: Optional[str] = Form(None),
    groq_api_key: Optional[str] = Form(None, alias="groqApiKey"),
    hf_api_key: Optional[str] = Form(None, alias="hfApiKey"),
    replicate_api_token: Optional[str] = Form(None, alias="replicateApiToken"),
    gcp_credentials_path: Optional[str] = Form(None, alias="gcpCredentialsPath"),
    oci_config_path: Optional[str] = Form(None, alias="ociConfigPath"),
    oci_api_key: Optional[str] = Form(None, alias="ociApiKey"),
    oci_profile: Optional[str] = Form(None, alias="ociProfile"),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Transcribe a Haitian Creole recording and translate it to English."""
    credentials = {
        "groqApiKey": groq_api_key,
        "hfApiKey": hf_api_key,
        "replicateApiToken": replicate_api_token,
        "gcpCredentialsPath": gcp_credentials_path,
        "ociConfigPath": oci_config_path,
        "ociApiKey": oci_api_key,
        "ociProfile": oci_profile,
    }

    try:
        data = await audio.read() if audio is not None else None
        audio_path = await store_upload(
            data,
            audio.filename if audio is not None else None,
            dispatcher.config.temp_dir,
        )
        request = TranscriptionRequest(
            audio_path=audio_path,
            provider=provider or dispatcher.config.default_provider,
            credentials=credentials,
        )
        result = await dispatcher.handle(request)
    except ClientInputError as e:
        logger.info(f"Rejected translation request: {e}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Translation error: {e}")
        return error_response(e)

    return result.to_dict()
