"""
Providers Subcommand Module

Lists the registered providers with their credential requirements.
"""

import json

import click

from relay.config import RelayConfig
from relay.factory import ProviderRegistry
from .help_texts import PROVIDERS_HELP, JSON_HELP
from .shared_options import config_option


@click.command(help=PROVIDERS_HELP)
@config_option()
@click.option('--json', 'as_json', is_flag=True, default=False, help=JSON_HELP)
def providers(config_path, as_json):
    relay_config = RelayConfig.load(config_path)
    registry = ProviderRegistry(relay_config)
    described = registry.describe_providers()

    if as_json:
        click.echo(json.dumps(described, indent=2))
        return

    for info in described:
        marker = '*' if info['provider'] == relay_config.default_provider else ' '
        required = ', '.join(info['required_credentials']) or '-'
        click.echo(f"{marker} {info['provider']:<12} {info['language']:<40} requires: {required}")
