"""
Memory Jenkins Adapter - In-memory Jenkins double (testing only).
"""

import secrets
import threading
import uuid
from typing import Optional, Dict, List

from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.ports.jenkins_port import (
    JenkinsPort,
    JenkinsAPIError,
    JenkinsNotFoundError,
    JenkinsUserRecord,
    JenkinsAPIToken,
)


class MemoryJenkinsAdapter(JenkinsPort):
    """
    In-memory Jenkins.

    WARNING: Only for testing. Enforces username uniqueness like a real
    Jenkins, and reports unknown users/tokens as JenkinsNotFoundError.
    """

    def __init__(self, config: Optional[JenkinsConfig] = None):
        """
        Initialize in-memory Jenkins.

        Args:
            config: Configuration this instance was built from (inspected by tests)
        """
        self.config = config
        self.users: Dict[str, JenkinsUserRecord] = {}
        # Format: {uuid: token_name}
        self.tokens: Dict[str, str] = {}
        self.calls: List[str] = []
        self.closed = False
        self._failures: Dict[str, JenkinsAPIError] = {}
        self._lock = threading.Lock()

    def fail_on(self, operation: str, error: Optional[JenkinsAPIError] = None):
        """
        Make every later call to an operation raise.

        Args:
            operation: Method name (e.g., "delete_user")
            error: Error to raise (default: JenkinsAPIError with HTTP 500)
        """
        self._failures[operation] = error or JenkinsAPIError(f"{operation} failed", 500)

    def clear_failures(self):
        self._failures.clear()

    def _record(self, operation: str):
        self.calls.append(operation)
        if operation in self._failures:
            raise self._failures[operation]

    def init(self) -> None:
        with self._lock:
            self._record("init")

    def create_user(
        self,
        username: str,
        password: str,
        fullname: str,
        email: str,
    ) -> JenkinsUserRecord:
        with self._lock:
            self._record("create_user")
            if username in self.users:
                raise JenkinsAPIError(f"User name is already taken: {username}", 400)

            user = JenkinsUserRecord(username=username, fullname=fullname, email=email)
            self.users[username] = user
            return user

    def delete_user(self, username: str) -> None:
        with self._lock:
            self._record("delete_user")
            if username not in self.users:
                raise JenkinsNotFoundError(f"user {username} not found", 404)
            del self.users[username]

    def generate_api_token(self, name: str) -> JenkinsAPIToken:
        with self._lock:
            self._record("generate_api_token")
            token_id = str(uuid.uuid4())
            self.tokens[token_id] = name
            return JenkinsAPIToken(value=f"11{secrets.token_hex(16)}", uuid=token_id, name=name)

    def revoke_api_token(self, token_id: str) -> None:
        with self._lock:
            self._record("revoke_api_token")
            if token_id not in self.tokens:
                raise JenkinsNotFoundError(f"token {token_id} not found", 404)
            del self.tokens[token_id]

    def close(self):
        self.closed = True
