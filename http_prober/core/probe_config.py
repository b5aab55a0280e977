from dataclasses import dataclass, fields, asdict

from http_prober.core.network_range import NetworkRange, parse_network
from http_prober.core.address_generator import DEFAULT_SEED

DEFAULT_NETWORK = '10.0.0.0/8'


@dataclass
class ProberConfig:
    network: str = DEFAULT_NETWORK
    timeout: float = 1.0
    seed: int = DEFAULT_SEED
    port: int = 80
    path: str = '/'
    chunk_size: int = 8192

    @staticmethod
    def from_dict(data: dict) -> 'ProberConfig':
        # Only use keys that are fields of ProberConfig
        init_args = {f.name: data.get(f.name, getattr(ProberConfig, f.name)) for f in fields(ProberConfig)}
        return ProberConfig(**init_args)

    def to_dict(self) -> dict:
        return asdict(self)

    def parse_network(self) -> NetworkRange:
        return parse_network(self.network)

    def url_for(self, address) -> str:
        host = str(address) if self.port == 80 else f'{address}:{self.port}'
        return f'http://{host}{self.path}'

    def __str__(self):
        return f'ProberCfg(network={self.network}, timeout={self.timeout}, seed={self.seed})'
