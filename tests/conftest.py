"""
Shared pytest fixtures for the http-prober test suite.
"""

import pytest

from http_prober.core.network_range import parse_network
from http_prober.core.probe_config import ProberConfig
from ._helpers import running_http_server, silent_listener, unused_port
from .test_globals import DEFAULT_NETWORK, FAST_TIMEOUT, LOOPBACK_NETWORK


@pytest.fixture
def default_network():
    """The 10.0.0.0/8 range probed by default."""
    return parse_network(DEFAULT_NETWORK)


@pytest.fixture
def http_server_port():
    """Port of a loopback HTTP server answering 200 with a body."""
    with running_http_server() as port:
        yield port


@pytest.fixture
def silent_port():
    """Port of a loopback listener that never responds."""
    with silent_listener() as port:
        yield port


@pytest.fixture
def closed_port():
    """Port with nothing listening, connections are refused."""
    return unused_port()


@pytest.fixture
def loopback_config():
    """
    Build a ProberConfig aimed at 127.0.0.1 on the given port.

    Returns:
        callable: port -> ProberConfig
    """
    def _build(port: int, timeout: float = FAST_TIMEOUT, **kwargs) -> ProberConfig:
        return ProberConfig(network=LOOPBACK_NETWORK, port=port, timeout=timeout, **kwargs)
    return _build
