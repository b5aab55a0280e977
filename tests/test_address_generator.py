"""
Tests for random candidate address generation.
"""

import ipaddress

import pytest

from http_prober.core.address_generator import AddressGenerator, DEFAULT_SEED
from http_prober.core.network_range import parse_network


def test_addresses_stay_in_default_network(default_network):
    """Every address drawn from 10.0.0.0/8 is in 10.0.0.0 - 10.255.255.255."""
    generator = AddressGenerator(default_network)
    low = ipaddress.IPv4Address('10.0.0.0')
    high = ipaddress.IPv4Address('10.255.255.255')

    for _ in range(20000):
        address = generator.next()
        assert low <= address <= high


def test_addresses_stay_in_small_network():
    network = parse_network('192.168.1.0/28')
    generator = AddressGenerator(network)

    seen = {generator.next() for _ in range(2000)}
    assert all(address in network for address in seen)
    # 16 addresses and 2000 draws, all should show up
    assert len(seen) == 16


def test_same_seed_same_sequence(default_network):
    """A fixed seed reproduces the exact address sequence."""
    first = AddressGenerator(default_network, seed=DEFAULT_SEED)
    second = AddressGenerator(default_network, seed=DEFAULT_SEED)

    assert [first.next() for _ in range(500)] == [second.next() for _ in range(500)]


def test_different_seed_different_sequence(default_network):
    first = AddressGenerator(default_network, seed=1)
    second = AddressGenerator(default_network, seed=2)

    assert [first.next() for _ in range(50)] != [second.next() for _ in range(50)]


def test_iterator_protocol(default_network):
    generator = AddressGenerator(default_network)
    reference = AddressGenerator(default_network)

    for address, _ in zip(generator, range(10)):
        assert address == reference.next()


@pytest.mark.parametrize('cidr, offset, expected', [
    ('10.0.0.0/8', 0, '10.0.0.0'),
    ('10.0.0.0/8', 16777215, '10.255.255.255'),
    ('10.0.0.0/8', 0x010203, '10.1.2.3'),
    ('192.168.1.0/24', 5, '192.168.1.5'),
    ('192.168.1.0/24', 255, '192.168.1.255'),
    ('8.8.8.8/32', 0, '8.8.8.8'),
    ('0.0.0.0/0', 0xFFFFFFFF, '255.255.255.255'),
])
def test_address_for_offset(cidr, offset, expected):
    generator = AddressGenerator(parse_network(cidr))
    assert generator.address_for_offset(offset) == ipaddress.IPv4Address(expected)


@pytest.mark.parametrize('offset', [-1, 256, 1 << 32])
def test_address_for_offset_out_of_range(offset):
    generator = AddressGenerator(parse_network('192.168.1.0/24'))
    with pytest.raises(ValueError):
        generator.address_for_offset(offset)


def test_single_address_network():
    generator = AddressGenerator(parse_network('8.8.8.8/32'))
    assert {generator.next() for _ in range(20)} == {ipaddress.IPv4Address('8.8.8.8')}
