"""
Voice Relay REST API

FastAPI application receiving recorded audio from the browser client and
returning a transcript plus English translation.

Usage:
    uvicorn api.app:app --reload --port 3001
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.config import APIConfig
from api.routers import health, translate
from relay import __version__
from relay.config import RelayConfig
from relay.dispatcher import Dispatcher
from relay.utils.logging_config import configure_logging, logging_config


def create_app(
    relay_config: Optional[RelayConfig] = None,
    api_config: Optional[APIConfig] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> FastAPI:
    """Build the application. Configuration is read once, here."""
    relay_config = relay_config or RelayConfig.load()
    api_config = api_config or APIConfig.load()

    configure_logging(level="debug" if api_config.debug else relay_config.log_level)
    logging_config.log_configuration_details(relay_config.default_credentials())

    app = FastAPI(
        title="Voice Relay API",
        description="Transcribes Haitian Creole speech and translates it to English.",
        version=__version__,
    )
    app.state.relay_config = relay_config
    app.state.dispatcher = dispatcher or Dispatcher(relay_config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # /translate is what the front end posts to; /api/translate is kept for older clients
    app.include_router(translate.router, tags=["Translate"])
    app.include_router(translate.router, prefix="/api", tags=["Translate"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    if api_config.static_dir and Path(api_config.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=api_config.static_dir, html=True), name="static")
    else:
        @app.get("/")
        async def root():
            """Root endpoint with API info."""
            return {
                "name": "Voice Relay API",
                "version": __version__,
                "docs": "/docs",
                "health": "/api/health",
            }

    return app


load_dotenv()
app = create_app()
