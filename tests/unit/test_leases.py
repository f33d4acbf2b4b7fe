"""
Unit tests for lease renew/revoke dispatch.
"""

import pytest
from jenkins_broker import Operation, Request
from jenkins_broker.core.users import user_path
from jenkins_broker.domain.lease import Lease, USER_SECRET_TYPE, TOKEN_SECRET_TYPE
from jenkins_broker.exceptions import (
    InvalidRequestError,
    MalformedInternalDataError,
    MissingLeaseMetadataError,
)


def _create_user(backend, name="alice", **data):
    payload = {"password": "p", "fullname": "Alice A", "email": "a@x.com"}
    payload.update(data)
    return backend.handle_request(Request(operation=Operation.CREATE, path=f"users/{name}", data=payload))


def _renew(backend, lease):
    return backend.handle_request(Request(operation=Operation.RENEW, path="", secret=lease))


def _revoke(backend, lease):
    return backend.handle_request(Request(operation=Operation.REVOKE, path="", secret=lease))


class TestRenew:
    """Lease renewal."""

    def test_renew_reapplies_positive_ttls(self, configured_backend):
        """Test renewal restores the credential's own ttl/max_ttl."""
        lease = _create_user(configured_backend, ttl=300, max_ttl=900).secret
        lease.ttl = 10

        resp = _renew(configured_backend, lease)

        assert resp.secret.ttl == 300
        assert resp.secret.max_ttl == 900
        assert resp.secret.lease_id == lease.lease_id

    def test_renew_with_zero_keeps_host_defaults(self, configured_backend, settings):
        """Test zero ttls leave the lease's host defaults in effect."""
        lease = _create_user(configured_backend).secret

        resp = _renew(configured_backend, lease)

        assert resp.secret.ttl == settings.default_lease_ttl
        assert resp.secret.max_ttl == settings.max_lease_ttl

    def test_renew_accepts_json_floats(self, configured_backend):
        """Test ttls that round-tripped through JSON as floats still renew."""
        lease = Lease(
            secret_type=TOKEN_SECRET_TYPE,
            internal_data={"token_id": "abc", "ttl": 60.0, "max_ttl": 120.0},
            ttl=5,
            max_ttl=120,
        )

        resp = _renew(configured_backend, lease)

        assert resp.secret.ttl == 60

    @pytest.mark.parametrize("missing", ["ttl", "max_ttl"])
    def test_renew_without_metadata_fails(self, configured_backend, jenkins_factory, missing):
        """Test renewal without ttl/max_ttl fails and leaves the lease untouched."""
        lease = _create_user(configured_backend, ttl=300, max_ttl=900).secret
        del lease.internal_data[missing]
        before = lease.to_dict()

        with pytest.raises(MissingLeaseMetadataError):
            _renew(configured_backend, lease)

        assert lease.to_dict() == before

    def test_renew_makes_no_jenkins_call(self, configured_backend, jenkins_factory):
        """Test renewal is purely lease metadata."""
        lease = _create_user(configured_backend).secret
        calls_before = list(jenkins_factory.latest.calls)

        _renew(configured_backend, lease)

        assert jenkins_factory.latest.calls == calls_before

    def test_renew_returns_new_lease(self, configured_backend):
        """Test the lease passed in is not mutated by renewal."""
        lease = _create_user(configured_backend, ttl=300, max_ttl=900).secret
        lease.ttl = 10

        resp = _renew(configured_backend, lease)

        assert resp.secret is not lease
        assert lease.ttl == 10


class TestRevoke:
    """Lease revocation."""

    def test_revoke_user_lease(self, configured_backend, storage, jenkins_factory):
        """Test revoking a user lease deletes the Jenkins user and its record."""
        lease = _create_user(configured_backend).secret

        assert _revoke(configured_backend, lease) is None

        assert "alice" not in jenkins_factory.latest.users
        assert storage.get(user_path("alice")) is None

    def test_revoke_token_lease(self, configured_backend, jenkins_factory):
        """Test revoking a token lease revokes only the Jenkins token."""
        _create_user(configured_backend)
        resp = configured_backend.handle_request(Request(operation=Operation.READ, path="tokens/ci"))

        _revoke(configured_backend, resp.secret)

        assert jenkins_factory.latest.tokens == {}
        assert "alice" in jenkins_factory.latest.users

    def test_revoke_token_twice(self, configured_backend):
        """Test a repeated revoke of the same token does not error."""
        resp = configured_backend.handle_request(Request(operation=Operation.READ, path="tokens/ci"))

        _revoke(configured_backend, resp.secret)
        _revoke(configured_backend, resp.secret)

    @pytest.mark.parametrize("secret_type,internal_data", [
        (USER_SECRET_TYPE, {"ttl": 0, "max_ttl": 0}),
        (USER_SECRET_TYPE, {"username": 42}),
        (USER_SECRET_TYPE, {"username": ""}),
        (USER_SECRET_TYPE, {"username": "a/b"}),
        (USER_SECRET_TYPE, {"username": "../admin"}),
        (TOKEN_SECRET_TYPE, {"token_name": "ci"}),
        (TOKEN_SECRET_TYPE, {"token_id": ["abc"]}),
        ("jenkins_role", {"name": "x"}),
    ])
    def test_revoke_malformed_internal_data(self, configured_backend, jenkins_factory, secret_type, internal_data):
        """Test missing or mistyped identifying fields fail before any Jenkins call."""
        lease = Lease(secret_type=secret_type, internal_data=internal_data, ttl=60, max_ttl=60)
        calls_before = list(jenkins_factory.latest.calls)

        with pytest.raises(MalformedInternalDataError):
            _revoke(configured_backend, lease)

        assert jenkins_factory.latest.calls == calls_before

    def test_lease_operation_requires_secret(self, configured_backend):
        """Test renew/revoke without a lease are rejected."""
        with pytest.raises(InvalidRequestError):
            configured_backend.handle_request(Request(operation=Operation.REVOKE, path="tokens/ci"))
