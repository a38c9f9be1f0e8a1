"""Executes single Gazelle API requests.

Each request passes through the same pipeline: wait for rate limit capacity,
send, read the body, decode the envelope, classify, map the payload. Every
failure along the way surfaces as one GazelleError. There are no retries.
"""

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import httpx

from gazelle_api.domain.errors import ErrorKind, GazelleError
from gazelle_api.domain.events.api_events import (
    DomainEvent,
    RequestDeferred,
    RequestFailed,
    RequestSent,
    RequestSucceeded,
)
from gazelle_api.domain.models.common import TORRENT_CONTENT_TYPE
from gazelle_api.domain.models.envelope import ApiEnvelope
from gazelle_api.infrastructure.api.classifier import classify, is_success, match_error
from gazelle_api.infrastructure.resilience.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

EventListener = Callable[[DomainEvent], None]
PayloadParser = Callable[[Any], Any]


def log_event(event: DomainEvent) -> None:
    """Default event listener."""
    logger.debug(f"EVENT: {event}")


def _describe_parse_error(error: Exception) -> str:
    if isinstance(error, KeyError):
        return f"missing field `{error.args[0]}`"
    return str(error)


class RequestExecutor:
    """Runs requests against one indexer through a shared rate limiter.

    The executor does not own the HTTP client; whoever created it closes it.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        rate_limiter: RateLimiter,
        indexer: str = "",
        event_listener: Optional[EventListener] = None,
    ):
        self.http_client = http_client
        self.rate_limiter = rate_limiter
        self.indexer = indexer
        self.event_listener = event_listener or log_event

    def _dispatch(self, event: DomainEvent) -> None:
        self.event_listener(event)

    async def execute(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Tuple[str, bytes, str]]] = None,
        parse: Optional[PayloadParser] = None,
    ) -> Any:
        """Sends a request and returns its classified, mapped payload.

        Args:
            method: HTTP method.
            path: Path relative to the client's base URL.
            params: Query parameters, including ``action``.
            data: Form fields. List values are sent as repeated fields.
            files: Multipart file parts.
            parse: Maps the raw ``response`` payload to a domain model.

        Returns:
            The payload, passed through ``parse`` when given.

        Raises:
            GazelleError: On any transport, decoding or API failure.
        """
        action = _action_of(params)
        try:
            await self._admit(action)
            start_time = time.perf_counter()
            status_code, _, body = await self._send(method, path, action, params, data, files)
            envelope = self._decode(status_code, body)
            payload = classify(status_code, envelope)
            result = payload
            if parse is not None:
                try:
                    result = parse(payload)
                except (KeyError, TypeError, ValueError, AttributeError) as e:
                    raise GazelleError(ErrorKind.DESERIALIZE, _describe_parse_error(e), status_code) from e
        except GazelleError as e:
            self._dispatch_failure(action, e)
            raise
        self._dispatch_success(action, status_code, start_time)
        return result

    async def download(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> bytes:
        """Sends a request whose successful response is a .torrent file.

        A JSON body is never a success here: when the envelope passes
        classification the response is still reported as ``ErrorKind.OTHER``.

        Raises:
            GazelleError: On any transport, decoding or API failure.
        """
        action = _action_of(params)
        try:
            await self._admit(action)
            start_time = time.perf_counter()
            status_code, headers, body = await self._send("GET", path, action, params, None, None)
            if TORRENT_CONTENT_TYPE in headers.get("content-type", ""):
                if not is_success(status_code):
                    raise match_error(status_code, None) or GazelleError.other(status_code)
            else:
                envelope = self._decode(status_code, body)
                classify(status_code, envelope)
                raise GazelleError.other(status_code, envelope.error or None)
        except GazelleError as e:
            self._dispatch_failure(action, e)
            raise
        self._dispatch_success(action, status_code, start_time)
        return body

    async def _admit(self, action: str) -> None:
        wait_time = await self.rate_limiter.acquire()
        if wait_time > 0:
            self._dispatch(RequestDeferred(
                indexer=self.indexer, action=action, wait_time_seconds=wait_time,
            ))

    async def _send(
        self,
        method: str,
        path: str,
        action: str,
        params: Optional[Mapping[str, Any]],
        data: Optional[Dict[str, Any]],
        files: Optional[Dict[str, Tuple[str, bytes, str]]],
    ) -> Tuple[int, httpx.Headers, bytes]:
        request = self.http_client.build_request(method, path, params=params, data=data, files=files)
        self._dispatch(RequestSent(indexer=self.indexer, action=action, method=method))
        logger.debug(f"{method} {request.url.path} action={action}")
        try:
            response = await self.http_client.send(request, stream=True)
        except httpx.RequestError as e:
            logger.debug(f"Request for {action} failed: {e}")
            raise GazelleError.transport(e) from e
        try:
            body = await response.aread()
        except (httpx.RequestError, httpx.StreamError) as e:
            raise GazelleError.body_read(e, response.status_code) from e
        finally:
            await response.aclose()
        logger.debug(f"Received {response.status_code} ({len(body)} bytes) for {action}")
        return response.status_code, response.headers, body

    @staticmethod
    def _decode(status_code: int, body: bytes) -> ApiEnvelope:
        try:
            return ApiEnvelope.from_json(body)
        except ValueError as e:
            raise GazelleError.deserialize(e, status_code) from e

    def _dispatch_success(self, action: str, status_code: int, start_time: float) -> None:
        latency_ms = (time.perf_counter() - start_time) * 1000
        self._dispatch(RequestSucceeded(
            indexer=self.indexer, action=action, status_code=status_code, latency_ms=latency_ms,
        ))

    def _dispatch_failure(self, action: str, error: GazelleError) -> None:
        self._dispatch(RequestFailed(
            indexer=self.indexer,
            action=action,
            error_type=error.kind.value,
            error_message=str(error),
            status_code=error.status_code,
        ))


def _action_of(params: Optional[Mapping[str, Any]]) -> str:
    if not params:
        return ""
    return str(params.get("action", ""))
