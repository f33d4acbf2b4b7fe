"""
Jenkins Credential Broker - Dynamic Jenkins users and API tokens.

Hexagonal architecture for issuing short-lived Jenkins credentials on
behalf of a secrets host. The host provides storage and lease handling;
this package manages the Jenkins side.

Usage:
    from jenkins_broker import JenkinsBackend, Operation, Request
    from jenkins_broker.adapters import MemoryStorageAdapter

    backend = JenkinsBackend(storage=MemoryStorageAdapter())

    # Configure
    backend.handle_request(Request(Operation.CREATE, "config", data={...}))

    # Issue an API token
    response = backend.handle_request(Request(Operation.READ, "tokens/ci"))
"""

__version__ = "0.1.0"

from jenkins_broker.sdk.backend import JenkinsBackend
from jenkins_broker.settings import BackendSettings
from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.domain.user import JenkinsUser
from jenkins_broker.domain.token import JenkinsToken
from jenkins_broker.domain.lease import Lease
from jenkins_broker.domain.request import Operation, Request, Response

__all__ = [
    "JenkinsBackend",
    "BackendSettings",
    "JenkinsConfig",
    "JenkinsUser",
    "JenkinsToken",
    "Lease",
    "Operation",
    "Request",
    "Response",
]
