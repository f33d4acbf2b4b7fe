"""
Shared fixtures: an in-memory backend wired to an in-memory Jenkins.
"""

import pytest
from jenkins_broker import JenkinsBackend, BackendSettings, Operation, Request
from jenkins_broker.adapters import MemoryStorageAdapter, MemoryJenkinsAdapter

TEST_USERNAME = "admin"
TEST_PASSWORD = "admin"
TEST_URL = "http://localhost:8080"

DEFAULT_LEASE_TTL = 3600
MAX_LEASE_TTL = 7200


class JenkinsFactory:
    """Client factory that remembers every MemoryJenkinsAdapter it builds."""

    def __init__(self):
        self.built = []

    def __call__(self, config):
        client = MemoryJenkinsAdapter(config)
        self.built.append(client)
        return client

    @property
    def latest(self) -> MemoryJenkinsAdapter:
        return self.built[-1]


@pytest.fixture
def storage():
    return MemoryStorageAdapter()


@pytest.fixture
def jenkins_factory():
    return JenkinsFactory()


@pytest.fixture
def settings():
    return BackendSettings(default_lease_ttl=DEFAULT_LEASE_TTL, max_lease_ttl=MAX_LEASE_TTL)


@pytest.fixture
def backend(storage, settings, jenkins_factory):
    """Unconfigured backend."""
    return JenkinsBackend(storage=storage, settings=settings, client_factory=jenkins_factory)


@pytest.fixture
def configured_backend(backend):
    """Backend with the test Jenkins config written (and validated)."""
    resp = backend.handle_request(Request(
        operation=Operation.CREATE,
        path="config",
        data={
            "username": TEST_USERNAME,
            "password": TEST_PASSWORD,
            "url": TEST_URL,
        },
    ))
    assert resp is None
    return backend
