"""Exception types raised by the prober."""

from typing import Optional


class ProberError(Exception):
    """Base class for all prober errors."""


class ConfigurationError(ProberError, ValueError):
    """Raised when the network range cannot be used."""


class DeadlineExceeded(ProberError):
    """Raised when a probe runs past its deadline."""


class ProbeCancelled(ProberError):
    """Raised when a probe's cancel token is set."""


class UnexpectedProbeError(ProberError):
    """
    A probe failed in a way that is not a benign network outcome.
    Wraps the original exception so its concrete type can be reported.
    """

    def __init__(self, cause: BaseException, address: Optional[str] = None):
        self.cause = cause
        self.address = address
        super().__init__(self.describe())

    @property
    def cause_type(self) -> str:
        kind = type(self.cause)
        return f'{kind.__module__}.{kind.__qualname__}'

    def describe(self) -> str:
        return f'{self.cause_type} {self.cause}'
