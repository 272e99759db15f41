"""Tests for the Bridge identity in huelink/models/bridge.py"""

import dataclasses

import pytest

from huelink.models.bridge import Bridge, parse_host


class TestParseHost:
    """Host strings from discovery may be IP literals or hostnames."""

    def test_ipv4(self):
        assert parse_host('192.168.1.2') == '192.168.1.2'

    def test_ipv6_without_brackets(self):
        """Discovery records carry IPv6 literals without brackets."""
        assert parse_host('fe80::17:88ff:fe4b:2a7c') == 'fe80::17:88ff:fe4b:2a7c'

    def test_ipv6_with_brackets(self):
        assert parse_host('[fe80::1]') == 'fe80::1'

    def test_ipv6_is_compressed(self):
        assert parse_host('fe80:0000:0000:0000:0000:0000:0000:0001') == 'fe80::1'

    def test_hostname(self):
        assert parse_host('Philips-Hue.local') == 'philips-hue.local'

    def test_surrounding_whitespace(self):
        assert parse_host(' 10.0.0.5 ') == '10.0.0.5'

    def test_hostname_with_underscore(self):
        """Names outside RFC 1123 are still valid URL hosts."""
        assert parse_host('hue_bridge.local') == 'hue_bridge.local'

    def test_idn_hostname(self):
        assert parse_host('Büro-Hue.local') == 'büro-hue.local'

    @pytest.mark.parametrize('value', [
        '', '.', 'not a host', 'a/b', 'host:80', 'a#b', 'user@host', 'a?b',
        'a|b', 'a%b', 'a\\b', '[not-ipv6]', 'a..b',
    ])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_host(value)

    def test_non_string(self):
        with pytest.raises(ValueError):
            parse_host(None)


class TestBridge:
    """Tests for Bridge construction and accessors."""

    def test_round_trip(self):
        """Fields read back exactly as constructed."""
        bridge = Bridge(host='192.168.1.2', id='001788fffe4b2a7c', port=443)
        assert bridge.host == '192.168.1.2'
        assert bridge.id == '001788fffe4b2a7c'
        assert bridge.port == 443

    def test_default_port(self):
        assert Bridge(host='192.168.1.2', id='abc').port == 443

    def test_from_discovery(self):
        record = {'internalipaddress': '192.168.1.2', 'id': '001788fffe4b2a7c', 'port': 443}
        assert Bridge.from_discovery(record) == Bridge('192.168.1.2', '001788fffe4b2a7c', 443)

    def test_immutable(self):
        bridge = Bridge(host='192.168.1.2', id='abc')
        with pytest.raises(dataclasses.FrozenInstanceError):
            bridge.host = '192.168.1.3'

    def test_equality_uses_all_fields(self):
        a = Bridge('192.168.1.2', 'abc', 443)
        assert a == Bridge('192.168.1.2', 'abc', 443)
        assert a != Bridge('192.168.1.3', 'abc', 443)
        assert a != Bridge('192.168.1.2', 'abd', 443)
        assert a != Bridge('192.168.1.2', 'abc', 80)

    def test_hashable(self):
        bridges = {Bridge('192.168.1.2', 'abc'), Bridge('192.168.1.2', 'abc'), Bridge('192.168.1.3', 'abc')}
        assert len(bridges) == 2

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            Bridge(host='192.168.1.2', id='')

    @pytest.mark.parametrize('port', [0, -1, 65536, '443', True])
    def test_invalid_port_rejected(self, port):
        with pytest.raises(ValueError):
            Bridge(host='192.168.1.2', id='abc', port=port)

    def test_invalid_host_rejected(self):
        with pytest.raises(ValueError):
            Bridge(host='not a host', id='abc')


class TestUrls:
    """Tests for URL formatting."""

    def test_api_url_ipv4(self):
        assert Bridge('192.168.1.2', 'abc').api_url == 'https://192.168.1.2/api'

    def test_api_url_ipv6_is_bracketed(self):
        bridge = Bridge('fe80::1', 'abc')
        assert bridge.url_host == '[fe80::1]'
        assert bridge.api_url == 'https://[fe80::1]/api'

    def test_api_url_hostname(self):
        assert Bridge('philips-hue.local', 'abc').api_url == 'https://philips-hue.local/api'

    def test_str(self):
        assert str(Bridge('192.168.1.2', 'abc')) == 'abc (192.168.1.2:443)'
