"""
Unit tests for the Jenkins API token lifecycle.
"""

import pytest
from jenkins_broker import Operation, Request
from jenkins_broker.domain.lease import TOKEN_SECRET_TYPE
from jenkins_broker.exceptions import DownstreamError, InvalidRequestError
from jenkins_broker.ports.jenkins_port import JenkinsAPIError

TEST_TOKEN_NAME = "test-user-token"


def _token(backend, name=TEST_TOKEN_NAME, operation=Operation.READ, **data):
    return backend.handle_request(Request(operation=operation, path=f"tokens/{name}", data=data))


def test_create_token(configured_backend):
    """Test reading tokens/<name> issues a token."""
    resp = _token(configured_backend)

    assert resp is not None
    assert resp.data["token_name"] == TEST_TOKEN_NAME
    assert resp.data["token"]
    assert resp.data["token_id"]


def test_token_internal_data_has_id_not_value(configured_backend):
    """Test the lease carries the token ID for revocation, never the value."""
    resp = _token(configured_backend)

    internal = resp.secret.internal_data
    assert resp.secret.secret_type == TOKEN_SECRET_TYPE
    assert internal["token_id"] == resp.data["token_id"]
    assert internal["token_name"] == TEST_TOKEN_NAME
    assert "token" not in internal
    assert resp.data["token"] not in internal.values()


def test_every_call_creates_a_new_token(configured_backend, jenkins_factory):
    """Test read and update both mint a fresh token."""
    first = _token(configured_backend, operation=Operation.READ)
    second = _token(configured_backend, operation=Operation.UPDATE)

    assert first.data["token_id"] != second.data["token_id"]
    assert len(jenkins_factory.latest.tokens) == 2


def test_tokens_never_touch_storage(configured_backend, storage):
    """Test token creation writes no storage record."""
    _token(configured_backend)

    assert storage.list("tokens/") == []
    assert storage.list("users/") == []


def test_token_ttls(configured_backend, settings):
    """Test positive ttls apply; zero falls back to host defaults."""
    explicit = _token(configured_backend, ttl=120, max_ttl=240)
    defaulted = _token(configured_backend, ttl=0, max_ttl=0)

    assert (explicit.secret.ttl, explicit.secret.max_ttl) == (120, 240)
    assert defaulted.secret.ttl == settings.default_lease_ttl
    assert defaulted.secret.max_ttl == settings.max_lease_ttl


def test_token_delete_not_supported(configured_backend):
    """Test tokens cannot be deleted through the path; only revoked via lease."""
    with pytest.raises(InvalidRequestError):
        _token(configured_backend, operation=Operation.DELETE)


def test_downstream_failure(configured_backend, jenkins_factory):
    """Test a Jenkins error is wrapped with the token name."""
    jenkins_factory.latest.fail_on("generate_api_token", JenkinsAPIError("forbidden", 403))

    with pytest.raises(DownstreamError) as exc_info:
        _token(configured_backend)

    assert TEST_TOKEN_NAME in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, JenkinsAPIError)


def test_revoke_token(configured_backend, jenkins_factory):
    """Test revoke removes the token from Jenkins."""
    resp = _token(configured_backend)
    token_id = resp.data["token_id"]

    configured_backend.tokens.revoke(token_id)

    assert token_id not in jenkins_factory.latest.tokens


def test_revoke_unknown_token_succeeds(configured_backend):
    """Test revoking an already-absent token is not an error."""
    configured_backend.tokens.revoke("00000000-0000-0000-0000-000000000000")


def test_revoke_failure_is_wrapped(configured_backend, jenkins_factory):
    """Test a non-404 revocation failure surfaces as DownstreamError."""
    resp = _token(configured_backend)
    jenkins_factory.latest.fail_on("revoke_api_token")

    with pytest.raises(DownstreamError):
        configured_backend.tokens.revoke(resp.data["token_id"])
