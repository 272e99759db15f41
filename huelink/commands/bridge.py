"""
Bridge commands for the huelink CLI.

Contains discovery, link button pairing and a status view of the saved pairing.
"""

import click

from huelink.core.auth import Authenticator, deadline_after
from huelink.core.config import (
    DEFAULT_AUTH_TIMEOUT,
    DEFAULT_DEVICE_TYPE,
    DEFAULT_POLL_INTERVAL,
    MDNS_BROWSE_TIMEOUT,
    USER_CONFIG_FILE,
    bridge_session,
    load_pairing,
    save_pairing,
)
from huelink.core.discovery import discover
from huelink.core.errors import AuthenticationOtherError, AuthenticationTimedOut, HueError
from huelink.models.bridge import Bridge


def mask_secret(value: str, visible: int = 4) -> str:
    """Show only the first few characters of a secret."""
    if len(value) <= visible:
        return '*' * len(value)
    return value[:visible] + '*' * (len(value) - visible)


def select_bridge_interactive(bridges: list[Bridge]) -> Bridge | None:
    """Display interactive menu to select a bridge from discovered list.

    Args:
        bridges: Bridges sorted for display

    Returns:
        Selected bridge, or None if cancelled/invalid
    """
    if not bridges:
        return None

    click.echo()
    click.secho(f"Found {len(bridges)} Hue bridge{'s' if len(bridges) > 1 else ''}:", fg='cyan', bold=True)
    click.echo()
    for i, bridge in enumerate(bridges, 1):
        click.echo(f"  {click.style(str(i), fg='green', bold=True)}. {bridge.id} ({bridge.url_host}:{bridge.port})")
    click.echo()

    choice = click.prompt(
        f"Select bridge [1-{len(bridges)}] or 'q' to cancel",
        type=str,
        default='1'
    )
    if choice.lower() == 'q':
        return None

    try:
        index = int(choice) - 1
    except ValueError:
        click.echo(f"Invalid selection: {choice}", err=True)
        return None

    if 0 <= index < len(bridges):
        return bridges[index]
    click.echo(f"Invalid selection: {choice}", err=True)
    return None


def _sorted(bridges: set[Bridge]) -> list[Bridge]:
    # Sort by id, then host, for a stable listing
    return sorted(bridges, key=lambda b: (b.id, b.host, b.port))


@click.command(name='discover')
@click.option('--remote/--no-remote', default=True, help='Query discovery.meethue.com')
@click.option('--mdns/--no-mdns', default=False, help='Browse the local network via mDNS')
@click.option('--mdns-timeout', type=float, default=MDNS_BROWSE_TIMEOUT, show_default=True,
              help='Seconds to browse for mDNS advertisements')
def discover_command(remote, mdns, mdns_timeout):
    """List Hue bridges on the local network."""
    try:
        bridges = discover(remote=remote, mdns=mdns, mdns_timeout=mdns_timeout)
    except HueError as e:
        click.secho(f"✗ Bridge discovery failed: {e}", fg='red', err=True)
        raise SystemExit(1)

    if not bridges:
        click.secho("⚠ No bridges found", fg='yellow')
        return

    for bridge in _sorted(bridges):
        click.echo(f"{click.style(bridge.id, fg='green')}  {bridge.url_host}:{bridge.port}")


@click.command(name='pair')
@click.option('-i', '--bridge-ip', help='Bridge host; skips discovery')
@click.option('--bridge-id', help='Unique bridge id; required with --bridge-ip')
@click.option('-d', '--device-type', default=DEFAULT_DEVICE_TYPE, show_default=True,
              help='Identifies this app/device to the bridge')
@click.option('-t', '--timeout', type=float, default=DEFAULT_AUTH_TIMEOUT, show_default=True,
              help='Seconds to wait for the link button')
@click.option('-p', '--poll-interval', type=float, default=DEFAULT_POLL_INTERVAL, show_default=True,
              help='Seconds between requests to the bridge')
@click.option('--save/--no-save', default=True, help=f'Save the pairing to {USER_CONFIG_FILE}')
def pair_command(bridge_ip, bridge_id, device_type, timeout, poll_interval, save):
    """Create API credentials via link button authentication.

    Finds a bridge (or uses --bridge-ip), then asks it for credentials until
    the link button is pressed or the timeout runs out.
    """
    session = bridge_session()

    if bridge_ip:
        if not bridge_id:
            raise click.UsageError("--bridge-id is required with --bridge-ip (see 'huelink discover' or the Hue app)")
        try:
            bridge = Bridge(host=bridge_ip, id=bridge_id)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint='--bridge-ip')
    else:
        click.echo("Discovering Hue bridges...")
        try:
            bridges = _sorted(discover())
        except HueError as e:
            click.secho(f"✗ Bridge discovery failed: {e}", fg='red', err=True)
            click.echo("Pass the bridge address and id with --bridge-ip and --bridge-id instead.")
            raise SystemExit(1)

        if not bridges:
            click.secho("⚠ No bridges found via automatic discovery", fg='yellow')
            click.echo("Pass the bridge address and id with --bridge-ip and --bridge-id instead.")
            raise SystemExit(1)
        elif len(bridges) == 1:
            bridge = bridges[0]
            click.secho(f"✓ Found 1 bridge: {bridge}", fg='green')
        else:
            bridge = select_bridge_interactive(bridges)
            if bridge is None:
                click.echo("Pairing cancelled.")
                return

    click.echo()
    click.secho(f"Press the LINK BUTTON on your Hue Bridge (waiting {timeout:g}s)", fg='yellow', bold=True)

    try:
        authenticator = Authenticator.request(
            bridge, session, device_type, deadline_after(timeout), poll_interval
        )
    except AuthenticationTimedOut:
        click.secho("✗ Link button was not pressed in time", fg='red', err=True)
        raise SystemExit(1)
    except AuthenticationOtherError as e:
        click.secho(f"✗ Bridge refused the request (error {e.code})", fg='red', err=True)
        raise SystemExit(1)
    except HueError as e:
        click.secho(f"✗ Connection error: {e}", fg='red', err=True)
        raise SystemExit(1)

    click.secho("✓ Successfully created API credentials!", fg='green', bold=True)
    click.echo(f"  Username:   {mask_secret(authenticator.username.get_secret_value())}")

    if save:
        if save_pairing(bridge, authenticator):
            click.secho(f"✓ Pairing saved to {USER_CONFIG_FILE}", fg='green')
        else:
            click.secho(f"✗ Failed to save pairing to {USER_CONFIG_FILE}", fg='red', err=True)
            raise SystemExit(1)


@click.command(name='setup')
def setup_command():
    """Show the saved bridge pairing."""
    click.echo()
    click.secho("=== Hue Bridge Pairing ===", fg='cyan', bold=True)
    click.echo()

    pairing = load_pairing()
    if pairing is None:
        click.echo(f"   Status:      {click.style('✗ Not paired', fg='yellow')}")
        click.echo(f"   Path:        {USER_CONFIG_FILE}")
        click.echo()
        click.echo("Run this command to pair with a bridge:")
        click.echo(click.style("  huelink pair", fg='green', bold=True))
        click.echo()
        return

    bridge, authenticator = pairing
    click.echo(f"   Status:      {click.style('✓ Paired', fg='green')}")
    click.echo(f"   Path:        {USER_CONFIG_FILE}")
    click.echo(f"   Bridge ID:   {bridge.id}")
    click.echo(f"   Bridge host: {bridge.url_host}:{bridge.port}")
    click.echo(f"   Username:    {mask_secret(authenticator.username.get_secret_value())}")
    click.echo()
