"""Typed, rate limited client for the Gazelle tracker API (ops, red)."""

from gazelle_api.domain.errors import ErrorKind, GazelleError
from gazelle_api.infrastructure.api.client import GazelleClient
from gazelle_api.infrastructure.api.factory import GazelleClientFactory, GazelleClientOptions
from gazelle_api.infrastructure.api.mock_client import MockGazelleClient
from gazelle_api.infrastructure.resilience.rate_limiter import RateLimiter

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "GazelleClient",
    "GazelleClientFactory",
    "GazelleClientOptions",
    "GazelleError",
    "MockGazelleClient",
    "RateLimiter",
]
