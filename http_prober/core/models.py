"""
Probe outcome models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProbeOutcome(Enum):
    """Classification of a single probe attempt."""
    SUCCESS = 'success'
    REFUSED = 'refused'
    TIMEOUT = 'timeout'
    CANCELLED = 'cancelled'
    UNEXPECTED_ERROR = 'unexpected_error'


class ProbeResult(BaseModel):
    """Result of one GET against one candidate address."""
    address: str = Field(description="Probed IPv4 address")
    outcome: ProbeOutcome = Field(description="How the probe ended")
    status_code: Optional[int] = Field(default=None, description="HTTP status, if a response arrived")
    bytes_drained: int = Field(default=0, description="Body bytes read and discarded")
    elapsed: float = Field(default=0.0, description="Seconds spent on the probe")
    error: Optional[str] = Field(default=None, description="Error description for non-success outcomes")

    def __str__(self):
        return f'ProbeResult(address={self.address}, outcome={self.outcome.value}, status={self.status_code})'

    model_config = {
        "json_schema_extra": {
            "example": {
                "address": "10.42.7.19",
                "outcome": "refused",
                "status_code": None,
                "bytes_drained": 0,
                "elapsed": 0.0012,
                "error": "connection refused"
            }
        }
    }
