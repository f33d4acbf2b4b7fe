"""
Token Lifecycle Manager - Single-shot Jenkins API tokens.

Tokens never touch storage. The value appears once, in the creation
response; the token ID rides in lease internal data so the lease can
revoke it later.
"""

import logging

from jenkins_broker.core.client_cache import ClientCache
from jenkins_broker.core.users import validate_name
from jenkins_broker.domain.lease import Lease, LeaseDefaults
from jenkins_broker.domain.request import Response
from jenkins_broker.domain.token import JenkinsToken
from jenkins_broker.exceptions import DownstreamError, InvalidRequestError
from jenkins_broker.ports.jenkins_port import JenkinsAPIError, JenkinsNotFoundError

logger = logging.getLogger(__name__)

TOKENS_PREFIX = "tokens"


class TokenManager:
    """Create and revoke Jenkins API tokens."""

    def __init__(self, cache: ClientCache, lease_defaults: LeaseDefaults):
        self._cache = cache
        self._lease_defaults = lease_defaults

    def create(self, name: str, ttl: int = 0, max_ttl: int = 0) -> Response:
        """
        Generate a fresh API token. Every call creates a new one.

        Args:
            name: Token display name in Jenkins
            ttl: Lease TTL in seconds (0 = host default)
            max_ttl: Lease max TTL in seconds (0 = host default)

        Returns:
            Response with {token, token_name, token_id} and a jenkins_token lease

        Raises:
            ConfigurationMissingError: Backend not configured
            DownstreamError: Jenkins rejected the request
        """
        validate_name(name, "token name")

        client = self._cache.get()

        try:
            api_token = client.generate_api_token(name)
        except JenkinsAPIError as e:
            raise DownstreamError("creating token", name, str(e)) from e

        token = JenkinsToken(
            token_id=api_token.uuid,
            name=name,
            value=api_token.value,
            ttl=ttl,
            max_ttl=max_ttl,
        )

        lease = Lease.issue(token.to_internal_data(), self._lease_defaults)
        logger.info("Created Jenkins token %s (%s, lease %s)", name, token.token_id, lease.lease_id)

        return Response(data=token.to_response_data(), secret=lease)

    def revoke(self, token_id: str):
        """
        Revoke a token by ID. An unknown ID counts as already revoked.

        Raises:
            DownstreamError: Jenkins rejected the revocation
        """
        if not token_id:
            raise InvalidRequestError("missing token_id")

        client = self._cache.get()

        try:
            client.revoke_api_token(token_id)
        except JenkinsNotFoundError:
            logger.warning("Jenkins token %s already absent", token_id)
            return
        except JenkinsAPIError as e:
            raise DownstreamError("revoking token", token_id, str(e)) from e

        logger.info("Revoked Jenkins token %s", token_id)
