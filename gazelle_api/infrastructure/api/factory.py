"""Builds a ready-to-use GazelleClient from connection options."""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import httpx

from gazelle_api.infrastructure.api.client import GazelleClient
from gazelle_api.infrastructure.api.executor import EventListener, RequestExecutor
from gazelle_api.infrastructure.resilience.rate_limiter import (
    DEFAULT_MAX_REQUESTS,
    DEFAULT_TIME_WINDOW_SECONDS,
    RateLimiter,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "gazelle-api.py"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Published allowances: (requests, window seconds)
INDEXER_LIMITS: Dict[str, Tuple[int, float]] = {
    "ops": (5, 10.0),
    "red": (10, 10.0),
}


def default_limits(name: str) -> Tuple[int, float]:
    return INDEXER_LIMITS.get(name.lower(), (DEFAULT_MAX_REQUESTS, DEFAULT_TIME_WINDOW_SECONDS))


@dataclass
class GazelleClientOptions:
    """Connection options for one indexer.

    Unset limits fall back to the indexer's published allowance.
    """
    name: str
    key: str
    url: str
    user_agent: str = DEFAULT_USER_AGENT
    requests_allowed_per_duration: Optional[int] = None
    request_limit_duration: Optional[float] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def limits(self) -> Tuple[int, float]:
        """Configured limits, with the indexer defaults for unset values.

        An explicit 0 is kept so that RateLimiter rejects it.
        """
        default_requests, default_window = default_limits(self.name)
        requests = self.requests_allowed_per_duration
        window = self.request_limit_duration
        return (
            default_requests if requests is None else requests,
            default_window if window is None else window,
        )

    def __repr__(self) -> str:
        # Never expose the API key
        return (
            f"GazelleClientOptions(name={self.name!r}, url={self.url!r}, "
            f"user_agent={self.user_agent!r}, limits={self.limits()!r}, timeout={self.timeout!r})"
        )


class GazelleClientFactory:
    """Factory for creating a GazelleClient from the configured options.

    Args:
        options: Connection options.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
        event_listener: Optional receiver for request domain events.
    """

    def __init__(
        self,
        options: GazelleClientOptions,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        event_listener: Optional[EventListener] = None,
    ):
        self.options = options
        self.transport = transport
        self.event_listener = event_listener

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.options.user_agent,
            "Accept": "application/json",
            "Authorization": self.options.key,
        }

    def create(self) -> GazelleClient:
        max_requests, time_window = self.options.limits()
        limiter = RateLimiter(max_requests=max_requests, time_window=time_window)
        http_client = httpx.AsyncClient(
            base_url=self.options.url,
            headers=self._headers(),
            timeout=self.options.timeout,
            transport=self.transport,
        )
        executor = RequestExecutor(
            http_client,
            limiter,
            indexer=self.options.name,
            event_listener=self.event_listener,
        )
        logger.info(
            f"Created client for '{self.options.name}' at {self.options.url} "
            f"({max_requests} requests / {time_window} seconds)"
        )
        return GazelleClient(executor)
