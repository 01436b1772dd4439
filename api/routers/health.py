"""Health and provider info endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import get_dispatcher, get_relay_config
from api.models import HealthResponse, ProvidersResponse
from relay import __version__
from relay.config import RelayConfig
from relay.dispatcher import Dispatcher

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        version=__version__,
        providers=dispatcher.registry.available_providers(),
    )


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(
    dispatcher: Dispatcher = Depends(get_dispatcher),
    relay_config: RelayConfig = Depends(get_relay_config),
):
    """List providers with the credential fields each one needs."""
    return ProvidersResponse(
        default_provider=relay_config.default_provider,
        providers=dispatcher.registry.describe_providers(),
    )
