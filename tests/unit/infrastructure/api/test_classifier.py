import pytest

from gazelle_api.domain.errors import ErrorKind, GazelleError
from gazelle_api.domain.models.envelope import ApiEnvelope
from gazelle_api.infrastructure.api.classifier import ERROR_LEXICON, classify


def failure(error=None, response=None):
    return ApiEnvelope(status="failure", response=response, error=error)


@pytest.mark.parametrize("message, kind", sorted(ERROR_LEXICON.items()))
def test_known_messages_are_classified_by_lexicon(message, kind):
    with pytest.raises(GazelleError) as excinfo:
        classify(400, failure(message))

    assert excinfo.value.kind is kind
    assert excinfo.value.message == message
    assert excinfo.value.status_code == 400


def test_lexicon_beats_status():
    with pytest.raises(GazelleError) as excinfo:
        classify(400, failure("Rate limit exceeded"))

    assert excinfo.value.kind is ErrorKind.RATE_LIMITED


def test_lexicon_match_is_case_sensitive():
    with pytest.raises(GazelleError) as excinfo:
        classify(200, failure("Bad Id Parameter"))

    assert excinfo.value.kind is ErrorKind.OTHER
    assert excinfo.value.message == "Bad Id Parameter"


@pytest.mark.parametrize("status_code, kind", [
    (400, ErrorKind.BAD_REQUEST),
    (401, ErrorKind.UNAUTHORIZED),
    (404, ErrorKind.NOT_FOUND),
    (429, ErrorKind.RATE_LIMITED),
])
def test_status_fallback_when_message_is_unknown(status_code, kind):
    with pytest.raises(GazelleError) as excinfo:
        classify(status_code, failure("something new"))

    assert excinfo.value.kind is kind
    assert excinfo.value.message == "something new"
    assert excinfo.value.status_code == status_code


@pytest.mark.parametrize("status_code, kind", [
    (400, ErrorKind.BAD_REQUEST),
    (401, ErrorKind.UNAUTHORIZED),
    (404, ErrorKind.NOT_FOUND),
    (429, ErrorKind.RATE_LIMITED),
])
def test_status_fallback_without_message(status_code, kind):
    with pytest.raises(GazelleError) as excinfo:
        classify(status_code, failure())

    assert excinfo.value.kind is kind
    assert excinfo.value.message is None
    assert excinfo.value.status_code == status_code


def test_success_returns_payload():
    payload = {"group": {"id": 1}}

    assert classify(200, ApiEnvelope(status="success", response=payload)) == payload


def test_success_without_response_is_other():
    with pytest.raises(GazelleError) as excinfo:
        classify(200, ApiEnvelope(status="success"))

    assert excinfo.value.kind is ErrorKind.OTHER
    assert excinfo.value.status_code == 200
    assert excinfo.value.message is None


def test_unknown_error_without_response_keeps_message():
    with pytest.raises(GazelleError) as excinfo:
        classify(200, failure("maintenance"))

    assert excinfo.value == GazelleError.other(200, "maintenance")


def test_unmatched_server_error_is_other():
    with pytest.raises(GazelleError) as excinfo:
        classify(500, failure())

    assert excinfo.value.kind is ErrorKind.OTHER
    assert excinfo.value.status_code == 500


def test_non_success_status_with_payload_is_still_a_failure():
    with pytest.raises(GazelleError) as excinfo:
        classify(503, ApiEnvelope(status="success", response={"id": 1}))

    assert excinfo.value.kind is ErrorKind.OTHER
    assert excinfo.value.status_code == 503
