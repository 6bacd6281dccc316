import httpx
import pytest

from iamcli.domain.errors import (
    ApiStatusError,
    ErrorKind,
    NetworkError,
    ResourceNotFoundError,
)
from iamcli.domain.models.operation import Operation, OperationCategory
from iamcli.domain.models.outcome import Retryable, Success, TerminalError
from iamcli.infrastructure.resilience.outcome_classifier import OutcomeClassifier


@pytest.fixture
def classifier():
    return OutcomeClassifier()


@pytest.fixture
def read_op():
    return Operation(OperationCategory.READ, "GET", "/groups/g-1", resource_id="g-1")


@pytest.fixture
def create_op():
    return Operation(OperationCategory.CREATE, "POST", "/groups", body={"name": "x", "description": ""})


@pytest.mark.parametrize("status", [200, 201, 204])
def test_success_statuses(classifier, create_op, status):
    outcome = classifier.classify(create_op, response=httpx.Response(status))
    assert isinstance(outcome, Success)


@pytest.mark.parametrize("status,kind", [
    (429, ErrorKind.RATE_LIMITED),
    (502, ErrorKind.SERVER_UNAVAILABLE),
    (503, ErrorKind.SERVER_UNAVAILABLE),
    (504, ErrorKind.SERVER_UNAVAILABLE),
])
def test_transient_statuses_are_retryable(classifier, read_op, status, kind):
    outcome = classifier.classify(read_op, response=httpx.Response(status, text="busy"))
    assert isinstance(outcome, Retryable)
    assert isinstance(outcome.cause, ApiStatusError)
    assert outcome.cause.kind is kind
    assert outcome.cause.status_code == status


@pytest.mark.parametrize("status", [400, 401, 403, 409, 422, 500])
def test_other_error_statuses_are_terminal(classifier, read_op, status):
    outcome = classifier.classify(read_op, response=httpx.Response(status, text="nope"))
    assert isinstance(outcome, TerminalError)
    assert outcome.kind is ErrorKind.OTHER
    assert "nope" in str(outcome.error)


def test_404_on_specific_resource_is_not_found(classifier, read_op):
    outcome = classifier.classify(read_op, response=httpx.Response(404))
    assert isinstance(outcome, TerminalError)
    assert isinstance(outcome.error, ResourceNotFoundError)
    assert outcome.error.resource_type == "group"
    assert outcome.error.resource_id == "g-1"
    assert str(outcome.error) == "group with ID g-1 not found"


def test_404_on_create_is_plain_status_error(classifier, create_op):
    outcome = classifier.classify(create_op, response=httpx.Response(404, text="no route"))
    assert isinstance(outcome, TerminalError)
    assert outcome.kind is ErrorKind.OTHER


def test_network_error_is_retryable(classifier, read_op):
    error = NetworkError("connection reset")
    outcome = classifier.classify(read_op, error=error)
    assert isinstance(outcome, Retryable)
    assert outcome.cause is error


def test_classify_requires_response_or_error(classifier, read_op):
    with pytest.raises(ValueError):
        classifier.classify(read_op)
