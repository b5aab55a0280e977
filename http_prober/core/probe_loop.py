"""
The probe loop: one address, one GET, one classification per iteration.
"""

from collections import Counter
import logging
from typing import Optional

from http_prober.core.address_generator import AddressGenerator
from http_prober.core.deadline import CancelToken, Deadline
from http_prober.core.models import ProbeResult
from http_prober.core.probe_config import ProberConfig
from http_prober.core.prober import Prober

log = logging.getLogger('core')


class ProbeLoop:
    """
    Probes random addresses in the configured network until told to stop.

    By default run() never returns on its own. UnexpectedProbeError
    propagates to the caller, which is expected to terminate the process.
    """

    def __init__(
            self,
            config: Optional[ProberConfig] = None,
            prober: Optional[Prober] = None,
            cancel_token: Optional[CancelToken] = None
        ):
        self.config = config or ProberConfig()
        self.network = self.config.parse_network()
        self.generator = AddressGenerator(self.network, seed=self.config.seed)
        self.prober = prober or Prober(self.config)
        self.cancel_token = cancel_token
        self.outcomes: Counter = Counter()
        self.iterations = 0
        self.last_result: Optional[ProbeResult] = None

    def run(self, max_iterations: Optional[int] = None) -> Counter:
        log.info(str(self.network))
        try:
            while max_iterations is None or self.iterations < max_iterations:
                self.step()
                if self.cancel_token is not None and self.cancel_token.cancelled:
                    log.info('Probe loop cancelled.')
                    break
        finally:
            self.prober.close()
        return self.outcomes

    def step(self) -> ProbeResult:
        """Run exactly one probe iteration."""
        with Deadline(self.config.timeout, parent=self.cancel_token) as deadline:
            address = self.generator.next()
            result = self.prober.probe(address, deadline)
        self.iterations += 1
        self.outcomes[result.outcome] += 1
        self.last_result = result
        return result
