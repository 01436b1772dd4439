"""
Shared CLI Option Decorators

Reusable Click decorators for options that several subcommands accept.
"""

import re

import click

from .help_texts import CONFIG_HELP, CREDENTIAL_HELP, LOG_LEVEL_HELP


def config_option(help=None):
    """Decorator for configuration file option."""
    def decorator(f):
        return click.option(
            '--config', '-c',
            'config_path',
            default=None,
            type=click.Path(exists=True, dir_okay=False),
            help=help or CONFIG_HELP
        )(f)
    return decorator


def log_level_option(help=None):
    """Decorator for logging level option."""
    def decorator(f):
        return click.option(
            '--log-level',
            default=None,
            type=click.Choice(['debug', 'info', 'warning', 'error'], case_sensitive=False),
            help=help or LOG_LEVEL_HELP
        )(f)
    return decorator


def parameter_name(field_name):
    """groqApiKey -> groq_api_key"""
    return re.sub(r'(?<!^)(?=[A-Z])', '_', field_name).lower()


def credential_options(f):
    """Add one option per provider credential field (--groq-api-key, ...)."""
    for field_name in reversed(list(CREDENTIAL_HELP)):
        name = parameter_name(field_name)
        f = click.option(
            '--' + name.replace('_', '-'),
            name,
            default=None,
            help=CREDENTIAL_HELP[field_name],
        )(f)
    return f


def pop_credentials(kwargs):
    """Remove the credential options from ``kwargs``, keyed by wire field name."""
    return {
        field_name: kwargs.pop(parameter_name(field_name), None)
        for field_name in CREDENTIAL_HELP
    }
