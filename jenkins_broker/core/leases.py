"""
Lease Coordinator - Renew/revoke callbacks for both credential kinds.

The host calls these for any outstanding lease. Renewal only refreshes
lease metadata; revocation removes the credential from Jenkins (and, for
users, the inventory record).
"""

import logging

from jenkins_broker.core.tokens import TokenManager
from jenkins_broker.core.users import UserManager
from jenkins_broker.domain.lease import (
    Lease,
    LeaseTTL,
    TokenInternalData,
    UserInternalData,
    USER_SECRET_TYPE,
    TOKEN_SECRET_TYPE,
)
from jenkins_broker.exceptions import MalformedInternalDataError

logger = logging.getLogger(__name__)


class LeaseCoordinator:
    """Dispatches renew/revoke by secret type."""

    def __init__(self, users: UserManager, tokens: TokenManager):
        self._users = users
        self._tokens = tokens

    def renew(self, lease: Lease) -> Lease:
        """
        Reapply the lease's stored ttl/max_ttl. No Jenkins call is made.

        Returns:
            A new Lease; the one passed in is left untouched

        Raises:
            MissingLeaseMetadataError: ttl or max_ttl absent from internal data
            MalformedInternalDataError: ttl or max_ttl not a number
        """
        lease_ttl = LeaseTTL.from_internal_data(lease.internal_data)
        renewed = lease.renewed(lease_ttl)
        logger.info("Renewed %s lease %s (ttl=%ss)", lease.secret_type, lease.lease_id, renewed.ttl)
        return renewed

    def revoke(self, lease: Lease):
        """
        Revoke the credential behind a lease.

        Raises:
            MalformedInternalDataError: Unknown secret type, or identifying field missing/mistyped
            DownstreamError: Jenkins rejected the deletion
        """
        if lease.secret_type == USER_SECRET_TYPE:
            user = UserInternalData.from_dict(lease.internal_data)
            self._users.delete(user.username)
        elif lease.secret_type == TOKEN_SECRET_TYPE:
            token = TokenInternalData.from_dict(lease.internal_data)
            self._tokens.revoke(token.token_id)
        else:
            raise MalformedInternalDataError(f"unknown secret type: {lease.secret_type!r}")

        logger.info("Revoked %s lease %s", lease.secret_type, lease.lease_id)
