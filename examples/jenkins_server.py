"""
Jenkins Server Example - Broker credentials on a real Jenkins.

Settings come from the environment (JENKINS_BROKER_* variables) and
Jenkins admin credentials from JENKINS_URL/JENKINS_USER/JENKINS_PASSWORD.
"""

import logging
import os

from jenkins_broker import JenkinsBackend, Operation, Request
from jenkins_broker.exceptions import BrokerError


def main():
    logging.basicConfig(level=logging.INFO)

    backend = JenkinsBackend.factory()

    try:
        backend.handle_request(Request(
            operation=Operation.CREATE,
            path="config",
            data={
                "username": os.environ.get("JENKINS_USER", "admin"),
                "password": os.environ["JENKINS_PASSWORD"],
                "url": os.environ.get("JENKINS_URL", "http://localhost:8080"),
            },
        ))

        response = backend.handle_request(Request(Operation.CREATE, "tokens/deploy", data={"ttl": "15m"}))
        lease = response.secret
        print(f"Token {response.data['token_id']} valid until {lease.expires_at().isoformat()}")

        renewed = backend.handle_request(Request(Operation.RENEW, "", secret=lease))
        print(f"Renewed: ttl={renewed.secret.ttl}s")

        backend.handle_request(Request(Operation.REVOKE, "", secret=renewed.secret))
        print("Revoked")
    except BrokerError as e:
        print(f"Failed: {e}")
    finally:
        backend.close()


if __name__ == "__main__":
    main()
