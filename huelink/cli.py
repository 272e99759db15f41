"""
huelink CLI
Discover Philips Hue bridges and pair with them via the link button.
"""

import logging

import click

from huelink import __version__
from huelink.commands.bridge import discover_command, pair_command, setup_command


@click.group(
    context_settings={
        'help_option_names': ['-h', '--help'],
    }
)
@click.version_option(version=__version__, prog_name='huelink')
@click.option('-v', '--verbose', is_flag=True, help='Show debug logging')
def cli(verbose):
    """huelink - Find your Hue bridge and create API credentials.

Run 'discover' to list bridges, 'pair' to authenticate via the link button
and 'setup' to show the saved pairing."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


# Register bridge commands
cli.add_command(discover_command)
cli.add_command(pair_command)
cli.add_command(setup_command)


if __name__ == '__main__':
    cli()
