"""
Jenkins Port - The downstream identity capabilities the broker consumes.

Lifecycle managers depend only on this interface. The concrete HTTP client
is an adapter, so the managers never see the Jenkins wire protocol.

Implementations:
- JenkinsClient: Jenkins HTTP API (httpx)
- MemoryJenkinsAdapter: In-memory Jenkins (testing only)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class JenkinsAPIError(Exception):
    """Raised when a Jenkins capability call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class JenkinsNotFoundError(JenkinsAPIError):
    """Raised when the user or token a call targets does not exist."""


@dataclass
class JenkinsUserRecord:
    """User as Jenkins reports it after creation."""
    username: str
    fullname: str = ""
    email: str = ""


@dataclass
class JenkinsAPIToken:
    """
    Freshly generated API token.

    WARNING: value is the secret. Never log this.
    """
    value: str
    uuid: str
    name: str = ""


class JenkinsPort(ABC):
    """Port: Jenkins user and API token management."""

    @abstractmethod
    def init(self) -> None:
        """
        Probe connectivity and authentication.

        Raises:
            JenkinsAPIError: Jenkins unreachable or credentials rejected
        """
        pass

    @abstractmethod
    def create_user(
        self,
        username: str,
        password: str,
        fullname: str,
        email: str,
    ) -> JenkinsUserRecord:
        """
        Create a Jenkins user account.

        Args:
            username: Login name
            password: Initial password
            fullname: Display name
            email: Email address

        Returns:
            Created user as reported by Jenkins

        Raises:
            JenkinsAPIError: Creation rejected
        """
        pass

    @abstractmethod
    def delete_user(self, username: str) -> None:
        """
        Delete a Jenkins user account.

        Raises:
            JenkinsNotFoundError: User does not exist
            JenkinsAPIError: Deletion rejected
        """
        pass

    @abstractmethod
    def generate_api_token(self, name: str) -> JenkinsAPIToken:
        """
        Generate an API token for the configured Jenkins user.

        Args:
            name: Token display name

        Returns:
            Token value and UUID

        Raises:
            JenkinsAPIError: Generation rejected
        """
        pass

    @abstractmethod
    def revoke_api_token(self, token_id: str) -> None:
        """
        Revoke an API token by UUID.

        Raises:
            JenkinsNotFoundError: Token does not exist
            JenkinsAPIError: Revocation rejected
        """
        pass

    def close(self) -> None:
        """Release any connections held by the client. No-op by default."""
        pass
