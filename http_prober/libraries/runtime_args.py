import argparse
from dataclasses import dataclass
from typing import List, Optional

from http_prober.core.probe_config import DEFAULT_NETWORK


@dataclass
class RuntimeArgs:
    network: str = DEFAULT_NETWORK


def parse_args(argv: Optional[List[str]] = None) -> RuntimeArgs:
    parser = argparse.ArgumentParser(
        description='Send HTTP GET requests to random addresses in a network range'
    )
    parser.add_argument(
        '--network',
        type=str,
        default=DEFAULT_NETWORK,
        help='Network space to probe'
    )
    args = parser.parse_args(argv)
    return RuntimeArgs(network=args.network)
