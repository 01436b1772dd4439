"""
Serve Subcommand Module

Runs the FastAPI relay under uvicorn.
"""

import logging

import click
import uvicorn

from api.config import APIConfig
from .help_texts import SERVE_HELP, HOST_HELP, PORT_HELP, RELOAD_HELP

logger = logging.getLogger(__name__)


@click.command(help=SERVE_HELP)
@click.option('--host', default=None, help=HOST_HELP)
@click.option('--port', default=None, type=int, help=PORT_HELP)
@click.option('--reload', is_flag=True, default=False, help=RELOAD_HELP)
def serve(host, port, reload):
    api_config = APIConfig.load()
    host = host or api_config.host
    port = port or api_config.port

    click.echo(f"Voice relay listening on http://{host}:{port}")
    uvicorn.run("api.app:app", host=host, port=port, reload=reload)
