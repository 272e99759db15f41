"""Bridge identity.

A Bridge is the immutable value discovery produces and the authenticator
consumes: where to reach a Philips Hue bridge and how to recognise it again.
"""

import ipaddress
import re
from dataclasses import dataclass

from huelink.models.types import DiscoveryRecord

# Code points a host cannot contain inside a URL
_FORBIDDEN_HOST_CHARS = re.compile(r'[\s#/:<>?@\[\\\]^|%]')


def parse_host(value: str) -> str:
    """Normalise a host string to a bare hostname or IP literal.

    Accepts IPv4 literals, IPv6 literals with or without brackets, and
    hostnames. Hostnames are not held to RFC 1123: underscores and IDN names
    pass, only characters that cannot appear in a URL host are rejected.
    IP literals are returned in their compressed canonical form, hostnames
    are lower-cased.

    Args:
        value: Host as found in a discovery record or typed by a user

    Returns:
        Normalised host string (IPv6 without brackets)

    Raises:
        ValueError: If value is neither an IP literal nor a usable hostname
    """
    if not isinstance(value, str):
        raise ValueError(f"host must be a string, got {type(value).__name__}")

    host = value.strip()
    if host.startswith('[') and host.endswith(']'):
        try:
            return str(ipaddress.IPv6Address(host[1:-1]))
        except ValueError:
            raise ValueError(f"invalid host: {value!r}") from None

    try:
        return str(ipaddress.ip_address(host))
    except ValueError:
        pass

    name = host.rstrip('.')
    if not name or _FORBIDDEN_HOST_CHARS.search(name) or '..' in name:
        raise ValueError(f"invalid host: {value!r}")
    return name.lower()


@dataclass(frozen=True)
class Bridge:
    """A Philips Hue bridge found on the local network.

    The host may change when the bridge gets a new DHCP lease; the id never
    does. Use the id, not the host, to recognise a bridge you have seen before.

    Attributes:
        host: DNS name or IP literal where HTTP requests are sent
        id: Unique, permanent bridge identifier
        port: Port of the REST API (443 for https)
    """
    host: str
    id: str
    port: int = 443

    def __post_init__(self):
        object.__setattr__(self, 'host', parse_host(self.host))

        if not isinstance(self.id, str) or not self.id:
            raise ValueError("bridge id must be a non-empty string")

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"port must be an integer, got {self.port!r}")
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def from_discovery(cls, record: DiscoveryRecord) -> 'Bridge':
        """Build a Bridge from an N-UPnP discovery record."""
        return cls(
            host=record['internalipaddress'],
            id=record['id'],
            port=record['port'],
        )

    @property
    def url_host(self) -> str:
        """Host formatted for use inside a URL (IPv6 literals bracketed)."""
        if ':' in self.host:
            return f"[{self.host}]"
        return self.host

    @property
    def api_url(self) -> str:
        """Legacy CLIP v1 endpoint used for link button authentication."""
        return f"https://{self.url_host}/api"

    def __str__(self):
        return f"{self.id} ({self.url_host}:{self.port})"
