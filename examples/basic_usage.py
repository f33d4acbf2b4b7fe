"""
Basic Usage Example - Issue and revoke Jenkins credentials in memory.

Uses the in-memory Jenkins double, so no Jenkins server is needed.
"""

import logging

from jenkins_broker import JenkinsBackend, BackendSettings, Operation, Request
from jenkins_broker.adapters import MemoryStorageAdapter, MemoryJenkinsAdapter


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    jenkins = MemoryJenkinsAdapter()

    def client_factory(config):
        config.require_complete()
        return jenkins

    backend = JenkinsBackend(
        storage=MemoryStorageAdapter(),
        settings=BackendSettings(default_lease_ttl=3600, max_lease_ttl=7200),
        client_factory=client_factory,
    )

    # Configure the Jenkins connection
    backend.handle_request(Request(
        operation=Operation.CREATE,
        path="config",
        data={"username": "admin", "password": "admin", "url": "http://localhost:8080"},
    ))
    config = backend.handle_request(Request(Operation.READ, "config"))
    print(f"Configured: {config.data}")

    # Issue a user
    response = backend.handle_request(Request(
        operation=Operation.CREATE,
        path="users/alice",
        data={"password": "p", "fullname": "Alice A", "email": "alice@example.com", "ttl": "1h"},
    ))
    user_lease = response.secret

    print(f"\nCreated user: {response.data}")
    print(f"Lease: {user_lease.lease_id} ttl={user_lease.ttl}s expires {user_lease.expires_at().isoformat()}")

    # Issue a token
    response = backend.handle_request(Request(Operation.READ, "tokens/ci"))
    token_lease = response.secret

    print(f"\nIssued token {response.data['token_name']}: {response.data['token'][:6]}...")

    # Revoke both
    backend.handle_request(Request(Operation.REVOKE, "", secret=token_lease))
    backend.handle_request(Request(Operation.REVOKE, "", secret=user_lease))

    users = backend.handle_request(Request(Operation.LIST, "users"))
    print(f"\nUsers after revocation: {users.data['keys']}")


if __name__ == "__main__":
    main()
