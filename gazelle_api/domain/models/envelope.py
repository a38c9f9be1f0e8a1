"""The wire-level wrapper every Gazelle JSON response arrives in."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiEnvelope:
    """`{"status": ..., "response": ..., "error": ...}`

    ``response`` is only populated on success, ``error`` only on failure,
    though not every deployment honours that.
    """
    status: str
    response: Optional[Any] = None
    error: Optional[str] = None

    @property
    def has_response(self) -> bool:
        return self.response is not None

    @classmethod
    def from_dict(cls, data: Any) -> "ApiEnvelope":
        """Structurally decodes an already-parsed JSON value.

        Raises:
            ValueError: If the value does not have the envelope shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, found {type(data).__name__}")
        status = data.get("status")
        if not isinstance(status, str):
            raise ValueError("missing field `status`")
        error = data.get("error")
        if error is not None and not isinstance(error, str):
            raise ValueError(f"invalid type for `error`: {type(error).__name__}, expected a string")
        return cls(status=status, response=data.get("response"), error=error)

    @classmethod
    def from_json(cls, body: Union[str, bytes]) -> "ApiEnvelope":
        """Parses a response body, tolerating the known malformed failure shape.

        Raises:
            ValueError: On invalid JSON (``json.JSONDecodeError``) or a wrong shape.
        """
        data = json.loads(body)
        return cls.from_dict(normalize(data))


def normalize(data: Any) -> Any:
    """Drops the empty-array `response` some deployments send alongside an error.

    `{"status":"failure","response":[],"error":"bad id parameter"}` is a failure,
    not a collection, so the array is treated as absent.
    """
    if (
        isinstance(data, dict)
        and data.get("response") == []
        and isinstance(data.get("error"), str)
        and data["error"]
    ):
        logger.debug("Removing malformed empty `response` array from failure envelope.")
        data = {key: value for key, value in data.items() if key != "response"}
    return data
