"""Bridge discovery.

Two strategies are available:
- remote: N-UPnP, one GET to https://discovery.meethue.com/
- mdns: browse the local network for _hue._tcp services with zeroconf

discover() runs the enabled strategies (mDNS first, then remote) and merges
their results into one set. A failing strategy aborts the whole call.
"""

import logging
import threading
import time

import requests
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from zeroconf import IPVersion, ServiceBrowser, ServiceListener, Zeroconf

from huelink.core.config import DISCOVERY_URL, MDNS_BROWSE_TIMEOUT, REQUEST_TIMEOUT
from huelink.core.errors import TransportError
from huelink.models.bridge import Bridge

logger = logging.getLogger(__name__)

HUE_SERVICE_TYPE = '_hue._tcp.local.'


class _DiscoveryRecord(BaseModel):
    # name, macaddress etc. may be present and are ignored
    model_config = ConfigDict(extra='ignore')

    internalipaddress: str
    id: str
    port: int


_RECORDS_ADAPTER = TypeAdapter(list[_DiscoveryRecord])


def discover(session: requests.Session | None = None, *, remote: bool = True, mdns: bool = False,
             url: str = DISCOVERY_URL, mdns_timeout: float = MDNS_BROWSE_TIMEOUT) -> set[Bridge]:
    """Discover Hue bridges on the local network.

    Args:
        session: requests session for the remote strategy (a new one if None)
        remote: Query the N-UPnP discovery endpoint
        mdns: Browse the local network via mDNS
        url: Discovery endpoint URL
        mdns_timeout: Seconds to browse for mDNS advertisements

    Returns:
        Set of bridges found, possibly empty. Entries are deduplicated by
        (host, id, port); the same id reached under two hosts appears twice.

    Raises:
        TransportError: If any enabled strategy fails
    """
    discovered: set[Bridge] = set()

    if mdns:
        discovered.update(discover_mdns(timeout=mdns_timeout))

    if remote:
        if session is not None:
            discovered.update(discover_remote(session, url=url))
        else:
            with requests.Session() as own_session:
                discovered.update(discover_remote(own_session, url=url))

    logger.info(f"Discovered {len(discovered)} bridge(s)")
    return discovered


def discover_remote(session: requests.Session, url: str = DISCOVERY_URL,
                    timeout: float = REQUEST_TIMEOUT) -> set[Bridge]:
    """Ask the Philips discovery service for bridges on this network.

    Note that the service rate limits requests (HTTP 429); that surfaces as a
    TransportError like any other non-2xx status.
    """
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise TransportError(f"bridge discovery failed: {e}") from e

    try:
        records = _RECORDS_ADAPTER.validate_json(response.content)
        bridges = {
            Bridge.from_discovery(r.model_dump())
            for r in records
        }
    except ValidationError as e:
        raise TransportError(f"failed to parse discovery response: {e}") from e
    except ValueError as e:
        raise TransportError(f"invalid bridge in discovery response: {e}") from e

    logger.debug(f"Discovery service at {url} returned {len(bridges)} bridge(s)")
    return bridges


class HueServiceListener(ServiceListener):
    """Collects bridges advertised over mDNS.

    Callbacks run on zeroconf's thread, so access to the result is locked.
    """

    def __init__(self):
        self._bridges: set[Bridge] = set()
        self._lock = threading.Lock()

    @property
    def bridges(self) -> set[Bridge]:
        with self._lock:
            return set(self._bridges)

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        info = zc.get_service_info(type_, name)
        if info is None:
            logger.debug(f"No service info for {name}")
            return

        addresses = info.parsed_addresses(IPVersion.V4Only) or info.parsed_addresses()
        bridge_id = (info.properties or {}).get(b'bridgeid')
        if not addresses or not bridge_id:
            logger.debug(f"Skipping incomplete advertisement {name}")
            return

        try:
            # The TXT record carries the id upper-cased; the discovery service lower-cases it
            bridge = Bridge(
                host=addresses[0],
                id=bridge_id.decode('utf-8').lower(),
                port=info.port or 443,
            )
        except (UnicodeDecodeError, ValueError) as e:
            logger.debug(f"Skipping invalid advertisement {name}: {e}")
            return

        with self._lock:
            self._bridges.add(bridge)
        logger.debug(f"Found bridge {bridge} via mDNS")

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        pass


def discover_mdns(timeout: float = MDNS_BROWSE_TIMEOUT) -> set[Bridge]:
    """Browse the local network for bridges advertising _hue._tcp."""
    try:
        zc = Zeroconf()
    except OSError as e:
        raise TransportError(f"mDNS discovery failed: {e}") from e

    listener = HueServiceListener()
    try:
        browser = ServiceBrowser(zc, HUE_SERVICE_TYPE, listener)
        time.sleep(timeout)
        browser.cancel()
    except OSError as e:
        raise TransportError(f"mDNS discovery failed: {e}") from e
    finally:
        zc.close()

    return listener.bridges
