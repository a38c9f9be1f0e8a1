"""Domain Events emitted while executing API requests.

Events carry the action and outcome of a single operation. They never carry
the API key or request bodies.
"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class RequestDeferred(DomainEvent):
    """Event triggered when a request had to wait for rate limit capacity."""
    indexer: str
    action: str
    wait_time_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RequestSent(DomainEvent):
    """Event triggered when a request is about to be transmitted."""
    indexer: str
    action: str
    method: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class RequestSucceeded(DomainEvent):
    """Event triggered when a response was classified as a success."""
    indexer: str
    action: str
    status_code: int
    latency_ms: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class RequestFailed(DomainEvent):
    """Event triggered when an operation ends with a GazelleError."""
    indexer: str
    action: str
    error_type: str
    error_message: str
    status_code: Optional[int] = None
    timestamp: float = field(default_factory=time.time)
