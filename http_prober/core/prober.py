"""Single-shot HTTP probe against one candidate address.
"""

import errno
import logging
from typing import Optional, Tuple

import requests
from urllib3.exceptions import MaxRetryError, NewConnectionError, ReadTimeoutError

from http_prober.core.deadline import Deadline
from http_prober.core.errors import DeadlineExceeded, ProbeCancelled, UnexpectedProbeError
from http_prober.core.models import ProbeOutcome, ProbeResult
from http_prober.core.probe_config import ProberConfig
from http_prober.core.watchdog import Watchdog, WatchedAdapter

log = logging.getLogger('prober')

# connect-phase failures that only mean "nothing there"
BENIGN_CONNECT_ERRNOS = frozenset(
    code for code in (
        getattr(errno, name, None) for name in (
            'ECONNREFUSED',
            'ECONNRESET',
            'ECONNABORTED',
            'EHOSTUNREACH',
            'ENETUNREACH',
            'EHOSTDOWN',
            'ENETDOWN',
        )
    ) if code is not None
)

# urllib3 rejects timeouts <= 0
MIN_SOCKET_TIMEOUT = 0.001


class Prober:
    """
    Issues one GET per call and classifies the outcome.

    Benign outcomes (refused, timeout, cancelled, success) come back as a
    ProbeResult. Everything else is raised as UnexpectedProbeError.
    """

    def __init__(self, config: Optional[ProberConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or ProberConfig()
        self.watchdog = Watchdog()
        self.session = session or self._build_session()

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        # no proxies or .netrc from the environment
        session.trust_env = False
        # one attempt per iteration, never retry
        adapter = WatchedAdapter(self.watchdog, max_retries=0)
        session.mount('http://', adapter)
        return session

    def __enter__(self) -> 'Prober':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def probe(self, address, deadline: Deadline) -> ProbeResult:
        """
        GET http://<address>/ within the deadline and drain the body.
        """
        address = str(address)
        log.info(address)

        try:
            with self.watchdog.armed(deadline):
                status_code, drained = self._get(address, deadline)
        except ProbeCancelled as exc:
            return self._benign(address, ProbeOutcome.CANCELLED, deadline, exc)
        except DeadlineExceeded as exc:
            return self._benign(address, self._timeout_outcome(deadline), deadline, exc)
        except requests.exceptions.Timeout as exc:
            return self._benign(address, self._timeout_outcome(deadline), deadline, exc)
        except requests.exceptions.ConnectionError as exc:
            if is_connect_timeout(exc) or is_read_timeout(exc) or self._deadline_hit(deadline):
                return self._benign(address, self._timeout_outcome(deadline), deadline, exc)
            if is_connect_failure(exc):
                return self._benign(address, ProbeOutcome.REFUSED, deadline, exc)
            raise UnexpectedProbeError(exc, address) from exc
        except Exception as exc:
            # the watchdog breaks sockets mid-read, which surfaces as protocol errors
            if self._deadline_hit(deadline):
                return self._benign(address, self._timeout_outcome(deadline), deadline, exc)
            raise UnexpectedProbeError(exc, address) from exc

        return ProbeResult(
            address=address,
            outcome=ProbeOutcome.SUCCESS,
            status_code=status_code,
            bytes_drained=drained,
            elapsed=deadline.elapsed()
        )

    def _get(self, address: str, deadline: Deadline) -> Tuple[int, int]:
        self._check(deadline)
        url = self.config.url_for(address)
        response = self.session.get(
            url, timeout=self._timeouts(deadline), stream=True, allow_redirects=False
        )
        try:
            redirects = 0
            while response.is_redirect:
                next_request = response.next
                response.close()
                redirects += 1
                if redirects > self.session.max_redirects:
                    raise requests.exceptions.TooManyRedirects(
                        f'Exceeded {self.session.max_redirects} redirects.', response=response
                    )
                self._check(deadline)
                response = self.session.send(
                    next_request, timeout=self._timeouts(deadline), stream=True, allow_redirects=False
                )
            # drain so the pooled connection is left in a clean state
            drained = self._drain(response, deadline)
            return response.status_code, drained
        finally:
            response.close()

    def _drain(self, response: requests.Response, deadline: Deadline) -> int:
        drained = 0
        for chunk in response.iter_content(chunk_size=self.config.chunk_size):
            drained += len(chunk)
            self._check(deadline)
        # an aborted socket can look like a clean end of body
        self._check(deadline)
        return drained

    def _check(self, deadline: Deadline) -> None:
        if self.watchdog.fired:
            raise DeadlineExceeded('context deadline exceeded')
        deadline.check()

    def _deadline_hit(self, deadline: Deadline) -> bool:
        return self.watchdog.fired or deadline.expired or deadline.cancelled

    @staticmethod
    def _timeouts(deadline: Deadline) -> Tuple[float, float]:
        timeout = max(deadline.remaining(), MIN_SOCKET_TIMEOUT)
        return timeout, timeout

    @staticmethod
    def _timeout_outcome(deadline: Deadline) -> ProbeOutcome:
        # a socket timeout that races an outer cancel reports the cancel
        if deadline.cancelled:
            return ProbeOutcome.CANCELLED
        return ProbeOutcome.TIMEOUT

    @staticmethod
    def _benign(address: str, outcome: ProbeOutcome, deadline: Deadline,
                exc: BaseException) -> ProbeResult:
        log.debug(f'{address} -> {outcome.value}: {exc}')
        return ProbeResult(
            address=address,
            outcome=outcome,
            elapsed=deadline.elapsed(),
            error=str(exc)
        )


def _reason(exc: requests.exceptions.ConnectionError):
    """Dig the urllib3 error out of a requests ConnectionError."""
    reason = exc.args[0] if exc.args else None
    if isinstance(reason, MaxRetryError):
        reason = reason.reason
    return reason


def _errno(reason) -> Optional[int]:
    """errno of an OSError, or of the OSError a urllib3 error was raised from."""
    if isinstance(reason, OSError) and reason.errno is not None:
        return reason.errno
    cause = getattr(reason, '__cause__', None)
    if isinstance(cause, OSError):
        return cause.errno
    return None


def is_connect_timeout(exc: requests.exceptions.ConnectionError) -> bool:
    """
    True when the kernel gave up connecting (ETIMEDOUT).
    """
    return _errno(_reason(exc)) == errno.ETIMEDOUT


def is_connect_failure(exc: requests.exceptions.ConnectionError) -> bool:
    """
    True when the TCP connection was never established.
    """
    reason = _reason(exc)
    if isinstance(reason, NewConnectionError):
        return True
    if isinstance(reason, OSError):
        return reason.errno in BENIGN_CONNECT_ERRNOS
    return False


def is_read_timeout(exc: requests.exceptions.ConnectionError) -> bool:
    """
    requests reports a read timeout hit while streaming the body
    as a ConnectionError wrapping urllib3's ReadTimeoutError.
    """
    return isinstance(_reason(exc), ReadTimeoutError)
