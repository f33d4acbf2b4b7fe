"""
User Lifecycle Manager - Ephemeral Jenkins users.

A users/<name> record exists exactly while the matching Jenkins account
does: it is written only after Jenkins confirms creation, and removed only
after Jenkins confirms deletion. The password is never written anywhere.
"""

import logging
from typing import Optional

from jenkins_broker.core.client_cache import ClientCache
from jenkins_broker.domain.lease import Lease, LeaseDefaults, NAME_PATTERN
from jenkins_broker.domain.request import Response
from jenkins_broker.domain.user import JenkinsUser
from jenkins_broker.exceptions import (
    AlreadyExistsError,
    DownstreamError,
    InvalidRequestError,
    StorageError,
)
from jenkins_broker.ports.jenkins_port import JenkinsAPIError, JenkinsNotFoundError
from jenkins_broker.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)

USERS_PREFIX = "users"


def validate_name(name: str, kind: str) -> str:
    """
    Check a user or token name.

    Raises:
        InvalidRequestError: Empty or containing characters outside [\\w-.@]
    """
    if not name:
        raise InvalidRequestError(f"missing {kind}")
    if not NAME_PATTERN.match(name):
        raise InvalidRequestError(f"invalid {kind}: {name!r}")
    return name


def user_path(username: str) -> str:
    """Storage path for a user record, e.g. users/alice."""
    return f"{USERS_PREFIX}/{username}"


class UserManager:
    """Create, read, list and delete Jenkins users."""

    def __init__(self, storage: StoragePort, cache: ClientCache, lease_defaults: LeaseDefaults):
        self._storage = storage
        self._cache = cache
        self._lease_defaults = lease_defaults

    def exists(self, username: str) -> bool:
        """Existence check against storage (not against Jenkins)."""
        return self._storage.get(user_path(username)) is not None

    def create(
        self,
        username: str,
        password: str,
        fullname: str,
        email: str,
        ttl: int = 0,
        max_ttl: int = 0,
    ) -> Response:
        """
        Create a Jenkins user and issue it as a leased secret.

        The existence check and the Jenkins call are not atomic; two
        concurrent creates of a new name can both pass the check, and
        Jenkins' own uniqueness rule decides which one wins.

        Args:
            username: Jenkins login name
            password: Initial password (returned nowhere, stored nowhere)
            fullname: Display name
            email: Email address
            ttl: Lease TTL in seconds (0 = host default)
            max_ttl: Lease max TTL in seconds (0 = host default)

        Returns:
            Response with {username, fullname, email} and a jenkins_user lease

        Raises:
            AlreadyExistsError: users/<username> already stored
            ConfigurationMissingError: Backend not configured
            DownstreamError: Jenkins rejected the creation
            StorageError: Jenkins user created but the record could not be stored
        """
        validate_name(username, "username")
        if not password:
            raise InvalidRequestError("missing password")

        if self.exists(username):
            raise AlreadyExistsError(f"user {username} already exists")

        client = self._cache.get()

        try:
            record = client.create_user(username, password, fullname, email)
        except JenkinsAPIError as e:
            raise DownstreamError("creating user", username, str(e)) from e

        user = JenkinsUser(
            username=username,
            fullname=record.fullname or fullname,
            email=record.email or email,
            password=password,
            ttl=ttl,
            max_ttl=max_ttl,
        )

        try:
            self._storage.put(user_path(username), user.to_record())
        except StorageError:
            logger.warning("Jenkins user %s was created but its record could not be stored", username)
            raise

        lease = Lease.issue(user.to_internal_data(), self._lease_defaults)
        logger.info("Created Jenkins user %s (lease %s, ttl=%ss)", username, lease.lease_id, lease.ttl)

        return Response(data=user.to_response_data(), secret=lease)

    def read(self, username: str) -> Optional[JenkinsUser]:
        """
        Read a user's inventory record.

        Returns:
            JenkinsUser without password, or None if not found
        """
        validate_name(username, "username")

        record = self._storage.get(user_path(username))
        if record is None:
            return None
        return JenkinsUser.from_record(record)

    def list(self) -> list[str]:
        """List stored usernames, in whatever order storage yields them."""
        return self._storage.list(f"{USERS_PREFIX}/")

    def delete(self, username: str):
        """
        Delete the Jenkins user, then its record.

        If Jenkins refuses, the record is left in place so a retry can find
        it. A user Jenkins no longer knows about counts as deleted.

        Raises:
            DownstreamError: Jenkins rejected the deletion
            StorageError: Record could not be removed
        """
        validate_name(username, "username")

        client = self._cache.get()

        try:
            client.delete_user(username)
        except JenkinsNotFoundError:
            logger.warning("Jenkins user %s already absent; removing record", username)
        except JenkinsAPIError as e:
            raise DownstreamError("deleting user", username, str(e)) from e

        self._storage.delete(user_path(username))
        logger.info("Deleted Jenkins user %s", username)
