import json

import pytest

from gazelle_api.domain.models.envelope import ApiEnvelope, normalize


def test_parses_success_envelope():
    envelope = ApiEnvelope.from_json(b'{"status": "success", "response": {"id": 1}}')

    assert envelope.status == "success"
    assert envelope.response == {"id": 1}
    assert envelope.error is None
    assert envelope.has_response


def test_parses_failure_envelope():
    envelope = ApiEnvelope.from_json('{"status": "failure", "error": "bad id parameter"}')

    assert not envelope.has_response
    assert envelope.error == "bad id parameter"


def test_empty_array_response_next_to_error_is_dropped():
    body = '{"status":"failure","response":[],"error":"bad id parameter"}'

    envelope = ApiEnvelope.from_json(body)

    assert envelope.response is None
    assert envelope.error == "bad id parameter"


def test_empty_array_response_without_error_is_kept():
    data = {"status": "success", "response": []}

    assert normalize(data) == data
    assert ApiEnvelope.from_dict(normalize(data)).response == []


@pytest.mark.parametrize("body", [
    "not json",
    "[1, 2, 3]",
    '{"response": {}}',
    '{"status": 1}',
    '{"status": "failure", "error": {"code": 5}}',
])
def test_malformed_bodies_raise_value_error(body):
    with pytest.raises(ValueError):
        ApiEnvelope.from_json(body)


def test_invalid_json_raises_decode_error():
    with pytest.raises(json.JSONDecodeError):
        ApiEnvelope.from_json(b"<html>502 Bad Gateway</html>")
