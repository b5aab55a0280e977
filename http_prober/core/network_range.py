"""
Parsing of the IPv4 network range to probe.
"""

from dataclasses import dataclass
import ipaddress

from http_prober.core.errors import ConfigurationError

IPV4_BITS = 32


@dataclass(frozen=True)
class NetworkRange:
    """
    An IPv4 network: base address with host bits cleared plus prefix length.
    """
    base: ipaddress.IPv4Address
    prefix_length: int

    @property
    def host_bits(self) -> int:
        return IPV4_BITS - self.prefix_length

    @property
    def size(self) -> int:
        """Number of addresses in the range, the exclusive bound for offsets."""
        return 1 << self.host_bits

    @property
    def netmask(self) -> ipaddress.IPv4Address:
        mask = ((1 << IPV4_BITS) - 1) ^ (self.size - 1)
        return ipaddress.IPv4Address(mask)

    @property
    def last(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(int(self.base) | (self.size - 1))

    def __contains__(self, address) -> bool:
        address = ipaddress.ip_address(address)
        if address.version != 4:
            return False
        return self.base <= address <= self.last

    def __str__(self):
        return f'{self.base}/{self.prefix_length}'


def parse_network(cidr: str) -> NetworkRange:
    """
    Parse a CIDR string such as '10.0.0.0/8'.

    Host bits in the address part are cleared, so '10.1.2.3/8'
    yields 10.0.0.0/8. Raises ConfigurationError for malformed
    input and for anything that is not IPv4.
    """
    if not isinstance(cidr, str) or '/' not in cidr:
        raise ConfigurationError(f'invalid CIDR address: {cidr}')
    # only a decimal prefix length, no netmask or hostmask forms
    prefix = cidr.rsplit('/', 1)[1]
    if not (prefix.isascii() and prefix.isdigit()):
        raise ConfigurationError(f'invalid CIDR address: {cidr}')
    try:
        network = ipaddress.ip_network(cidr, strict=False)
    except ValueError as exc:
        raise ConfigurationError(f'invalid CIDR address: {cidr}') from exc

    if not isinstance(network, ipaddress.IPv4Network):
        raise ConfigurationError('Only IPv4 supported')

    return NetworkRange(
        base=network.network_address,
        prefix_length=network.prefixlen
    )
