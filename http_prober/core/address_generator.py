"""
Pseudo-random candidate addresses inside a network range.
"""

import ipaddress
import random
from typing import Iterator, Optional

from http_prober.core.network_range import NetworkRange

# Predictable is better here: the same seed reproduces the same address sequence.
DEFAULT_SEED = 1


class AddressGenerator:
    """
    Draws candidate addresses uniformly from a NetworkRange.

    Each call to next() advances the random source exactly once.
    """

    def __init__(self, network: NetworkRange, seed: Optional[int] = DEFAULT_SEED):
        self.network = network
        self.seed = seed
        self._random = random.Random(seed)

    def __iter__(self) -> Iterator[ipaddress.IPv4Address]:
        return self

    def __next__(self) -> ipaddress.IPv4Address:
        return self.next()

    def next(self) -> ipaddress.IPv4Address:
        offset = self._random.randrange(self.network.size)
        return self.address_for_offset(offset)

    def address_for_offset(self, offset: int) -> ipaddress.IPv4Address:
        """
        OR the offset into the masked base address, most significant byte first.
        """
        if not 0 <= offset < self.network.size:
            raise ValueError(f'offset {offset} outside [0, {self.network.size})')

        base = bytearray(self.network.base.packed)
        lower = offset.to_bytes(4, 'big')
        for i in range(4):
            base[i] |= lower[i]
        return ipaddress.IPv4Address(bytes(base))
