"""
Random-address HTTP prober
"""
# Probe loop and its parts
from http_prober.core.probe_loop import ProbeLoop
from http_prober.core.prober import Prober
from http_prober.core.address_generator import AddressGenerator
from http_prober.core.deadline import CancelToken, Deadline

# Network range parsing
from http_prober.core.network_range import NetworkRange, parse_network

# Configuration
from http_prober.core.probe_config import ProberConfig

# Models and errors
from http_prober.core.models import ProbeOutcome, ProbeResult
from http_prober.core.errors import (
    ProberError,
    ConfigurationError,
    DeadlineExceeded,
    ProbeCancelled,
    UnexpectedProbeError
)
