"""Error taxonomy for the Gazelle API client.

Every failed operation surfaces as exactly one GazelleError. The error kind is
a closed enum; transport, parse and local I/O failures keep their underlying
exception as ``__cause__`` rather than as a payload.
"""

import enum
from http import HTTPStatus
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    """Closed set of failure kinds an operation can end with."""

    TRANSPORT = "request"
    BODY_READ = "response"
    DESERIALIZE = "deserialization"
    UPLOAD = "upload"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "too_many_requests"
    OTHER = "other"


# Kinds raised before or around the API call, wrapping a local exception.
LOCAL_KINDS = frozenset({
    ErrorKind.TRANSPORT,
    ErrorKind.BODY_READ,
    ErrorKind.DESERIALIZE,
    ErrorKind.UPLOAD,
})

_FAILED_ACTIONS = {
    ErrorKind.TRANSPORT: "send API request",
    ErrorKind.BODY_READ: "read API response",
    ErrorKind.DESERIALIZE: "deserialize API response",
    ErrorKind.UPLOAD: "upload torrent file",
}

_RECEIVED_LABELS = {
    ErrorKind.BAD_REQUEST: "bad request",
    ErrorKind.UNAUTHORIZED: "unauthorized",
    ErrorKind.NOT_FOUND: "not found",
    ErrorKind.RATE_LIMITED: "too many requests",
}


class GazelleError(Exception):
    """A classified failure of a single Gazelle API operation.

    Attributes are read-only once constructed.

    Args:
        kind: Which part of the pipeline failed, or how the API refused.
        message: The API's error string, or the text of the local failure.
        status_code: HTTP status observed, if a response was received.
            Always present for ``ErrorKind.OTHER``.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        if kind is ErrorKind.OTHER and status_code is None:
            raise ValueError("An OTHER error requires a status code.")
        self._kind = kind
        self._message = message
        self._status_code = status_code
        super().__init__(self._describe())

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> Optional[str]:
        return self._message

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    # --- Constructors for local failures ---

    @classmethod
    def transport(cls, error: Exception) -> "GazelleError":
        return cls(ErrorKind.TRANSPORT, str(error))

    @classmethod
    def body_read(cls, error: Exception, status_code: Optional[int] = None) -> "GazelleError":
        return cls(ErrorKind.BODY_READ, str(error), status_code)

    @classmethod
    def deserialize(cls, error: Exception, status_code: Optional[int] = None) -> "GazelleError":
        return cls(ErrorKind.DESERIALIZE, str(error), status_code)

    @classmethod
    def upload(cls, error: Exception) -> "GazelleError":
        return cls(ErrorKind.UPLOAD, str(error))

    @classmethod
    def other(cls, status_code: int, message: Optional[str] = None) -> "GazelleError":
        return cls(ErrorKind.OTHER, message, status_code)

    # --- Presentation ---

    def _describe(self) -> str:
        if self._kind in _FAILED_ACTIONS:
            return f"Failed to {_FAILED_ACTIONS[self._kind]}{_append(self._message)}"
        if self._kind in _RECEIVED_LABELS:
            return f"Received {_RECEIVED_LABELS[self._kind]} response{_append(self._message)}"
        return f"Received {_status_code_and_reason(self._status_code)} response{_append(self._message)}"

    def __repr__(self) -> str:
        return (
            f"GazelleError(kind={self._kind.name}, message={self._message!r}, "
            f"status_code={self._status_code!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Tagged mapping of the error, e.g. for JSON or YAML output."""
        data: Dict[str, Any] = {"type": self._kind.value}
        if self._kind is ErrorKind.OTHER:
            data["status"] = self._status_code
            data["message"] = self._message
        elif self._kind in LOCAL_KINDS:
            data["error"] = self._message or ""
        else:
            data["message"] = self._message or ""
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GazelleError":
        """Inverse of ``to_dict``."""
        kind = ErrorKind(data["type"])
        if kind is ErrorKind.OTHER:
            return cls(kind, data.get("message"), int(data["status"]))
        if kind in LOCAL_KINDS:
            return cls(kind, data.get("error", ""))
        return cls(kind, data.get("message", ""))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GazelleError):
            return NotImplemented
        return (self._kind, self._message, self._status_code) == (
            other._kind, other._message, other._status_code
        )

    def __hash__(self) -> int:
        return hash((self._kind, self._message, self._status_code))


def _status_code_and_reason(code: Optional[int]) -> str:
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


def _append(message: Optional[str]) -> str:
    return f": {message}" if message else ""
