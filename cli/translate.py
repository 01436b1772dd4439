"""
Translate Subcommand Module

Pushes a local recording through the same dispatcher the HTTP relay uses.
The recording is copied into the temp directory first, because the
dispatcher deletes its input once the request finishes.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from relay.audio.ingest import store_upload
from relay.config import RelayConfig
from relay.dispatcher import Dispatcher
from relay.errors import ClientInputError, ConfigurationError, RelayError
from relay.models import TranscriptionRequest
from relay.utils.logging_config import configure_logging
from .help_texts import TRANSLATE_HELP, PROVIDER_HELP, JSON_HELP, ExitCodes
from .shared_options import config_option, credential_options, log_level_option, pop_credentials

logger = logging.getLogger(__name__)


async def run_translation(dispatcher, audio_file, provider, credentials):
    """Copy ``audio_file`` into the temp dir and run it through ``dispatcher``."""
    data = await asyncio.to_thread(Path(audio_file).read_bytes)
    audio_path = await store_upload(data, Path(audio_file).name, dispatcher.config.temp_dir)
    request = TranscriptionRequest(
        audio_path=audio_path,
        provider=provider or dispatcher.config.default_provider,
        credentials=credentials,
    )
    return await dispatcher.handle(request)


def _echo_result(result, as_json):
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Provider:      {result.provider}")
    click.echo(f"Language:      {result.language}")
    click.echo(f"Transcription: {result.transcription}")
    click.echo(f"Translation:   {result.translation}")
    if result.note:
        click.echo(f"Note:          {result.note}")


@click.command(help=TRANSLATE_HELP)
@click.argument('audio_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--provider', '-p', default=None, help=PROVIDER_HELP)
@credential_options
@config_option()
@log_level_option()
@click.option('--json', 'as_json', is_flag=True, default=False, help=JSON_HELP)
def translate(audio_file, provider, config_path, log_level, as_json, **kwargs):
    credentials = pop_credentials(kwargs)

    try:
        relay_config = RelayConfig.load(config_path)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCodes.INVALID_CONFIGURATION)

    configure_logging(level=log_level or relay_config.log_level)
    dispatcher = Dispatcher(relay_config)

    try:
        result = asyncio.run(run_translation(dispatcher, audio_file, provider, credentials))
    except ClientInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCodes.CLIENT_ERROR)
    except RelayError as e:
        logger.error(f"Translation failed: {e}")
        click.echo(f"Translation failed: {e}", err=True)
        sys.exit(ExitCodes.PROVIDER_ERROR)

    _echo_result(result, as_json)
