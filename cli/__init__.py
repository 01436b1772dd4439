"""
CLI Package for Voice Relay

Click group with one module per subcommand. The cli() function is the
console script entry point declared in setup.py.
"""

import os
import click
from dotenv import load_dotenv

from relay import __version__

# .env.dev (if exists) overrides .env
if os.path.exists('.env.dev'):
    load_dotenv('.env.dev')
elif os.path.exists('.env'):
    load_dotenv('.env')
from .serve import serve
from .translate import translate
from .providers import providers


@click.group()
@click.version_option(version=__version__, prog_name='voice-relay')
def main():
    """Voice Relay CLI - transcribe Haitian Creole speech and translate it to English.

    Run the HTTP relay used by the browser recorder, or push a local
    recording through any of the configured providers.
    """
    pass


main.add_command(serve)
main.add_command(translate)
main.add_command(providers)


def cli():
    """Console script entry point for the voice-relay command."""
    main()
