"""Maps an HTTP status and decoded envelope to a payload or a GazelleError.

Classification is table driven. The known error strings are checked first,
then the HTTP status, so a 400 carrying "Rate limit exceeded" is reported as
rate limited rather than as a bad request.
"""

import logging
from typing import Any, Dict, Optional

from gazelle_api.domain.errors import ErrorKind, GazelleError
from gazelle_api.domain.models.envelope import ApiEnvelope

logger = logging.getLogger(__name__)

# Exact, case-sensitive error strings observed on ops and red
ERROR_LEXICON: Dict[str, ErrorKind] = {
    "bad id parameter": ErrorKind.BAD_REQUEST,
    "bad parameters": ErrorKind.BAD_REQUEST,
    "no such user": ErrorKind.BAD_REQUEST,
    "This page is limited to API key usage only.": ErrorKind.UNAUTHORIZED,
    "This page requires an api token": ErrorKind.UNAUTHORIZED,
    "endpoint not found": ErrorKind.NOT_FOUND,
    "failure": ErrorKind.NOT_FOUND,
    "could not find torrent": ErrorKind.NOT_FOUND,
    "Rate limit exceeded": ErrorKind.RATE_LIMITED,
}

STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def match_error(status_code: int, error: Optional[str]) -> Optional[GazelleError]:
    """Returns the error the lexicon or the status table assigns, if any."""
    if error:
        kind = ERROR_LEXICON.get(error)
        if kind is not None:
            return GazelleError(kind, error, status_code)
    kind = STATUS_KINDS.get(status_code)
    if kind is not None:
        return GazelleError(kind, error, status_code)
    return None


def classify(status_code: int, envelope: ApiEnvelope) -> Any:
    """Returns the envelope's payload or raises the matching GazelleError.

    Args:
        status_code: HTTP status of the response.
        envelope: The decoded response body.

    Returns:
        ``envelope.response`` for a successful response.

    Raises:
        GazelleError: For every other combination. Unrecognised failures are
            ``ErrorKind.OTHER`` carrying the status code.
    """
    error = match_error(status_code, envelope.error)
    if error is None:
        if not envelope.has_response:
            # e.g. 200 with no payload, or an error string we do not know
            error = GazelleError.other(status_code, envelope.error or None)
        elif not is_success(status_code):
            error = GazelleError.other(status_code, envelope.error or None)
    if error is not None:
        logger.debug(f"Classified status {status_code} as {error.kind.name}")
        raise error
    return envelope.response
